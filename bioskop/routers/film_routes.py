# bioskop/routers/film_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import require_api_key
from bioskop.core.exceptions import NotFoundError
from bioskop.database import schemas
from bioskop.database.database import get_db
from bioskop.services import catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/films", tags=["Films"])


@router.get("/movies", response_model=List[schemas.MovieResponse])
def list_movies(db: Session = Depends(get_db)):
    try:
        movies = catalog_service.list_movies(db)
    except Exception:
        logger.exception("Error fetching movies")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching movies")

    if not movies:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No movies found")
    return movies


@router.get("/movie/{movie_id}", response_model=schemas.MovieResponse)
def get_movie(movie_id: int, db: Session = Depends(get_db)):
    try:
        return catalog_service.get_movie(db, movie_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error fetching movie %s", movie_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching movie")


@router.post(
    "/insert-movie",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.MovieCreated,
    dependencies=[Depends(require_api_key)],
)
def insert_movie(movie: schemas.MovieCreate, db: Session = Depends(get_db)):
    try:
        new_movie = catalog_service.create_movie(db, movie)
        logger.info("Movie added successfully: %s", new_movie.movie_name)
        return {"message": "Movie added successfully", "movie_id": new_movie.movie_id}
    except Exception:
        db.rollback()
        logger.exception("Error adding movie")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding movie")


@router.delete(
    "/delete-movie/{movie_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def delete_movie(movie_id: int, db: Session = Depends(get_db)):
    try:
        catalog_service.delete_movie(db, movie_id)
        logger.info("Movie %s deleted", movie_id)
        return {"message": "Movie deleted successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting movie %s", movie_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting movie")


@router.put(
    "/update-movie-status/{movie_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def update_movie_status(movie_id: int, data: schemas.MovieStatusUpdate, db: Session = Depends(get_db)):
    try:
        catalog_service.update_movie_status(db, movie_id, data.status)
        return {"message": "Movie status updated successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error updating movie status %s", movie_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating movie status")
