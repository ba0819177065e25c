# bioskop/routers/showtime_routes.py
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

router = APIRouter(prefix="/showtimes", tags=["Showtimes"])


@router.get("/get-showtimes/{theater_id}/{movie_id}", response_model=List[schemas.ShowtimeResponse])
def get_showtimes(theater_id: int, movie_id: int, db: Session = Depends(get_db)):
    try:
        showtimes = catalog_service.list_showtimes(db, theater_id, movie_id)
    except Exception:
        logger.exception("Error fetching showtimes")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching showtimes")

    if not showtimes:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No showtimes found for the given theater and movie",
        )
    return showtimes


@router.post(
    "/add-showtime",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.ShowtimeCreated,
    dependencies=[Depends(require_api_key)],
)
def add_showtime(data: schemas.ShowtimeCreate, db: Session = Depends(get_db)):
    try:
        showtime = catalog_service.create_showtime(db, data)
        logger.info("Showtime %s added for movie %s", showtime.showtime_id, showtime.movie_id)
        return {"message": "Showtime added successfully", "showtime_id": showtime.showtime_id}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error adding showtime")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding showtime")


@router.delete(
    "/delete-showtime/{showtime_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def delete_showtime(showtime_id: int, db: Session = Depends(get_db)):
    try:
        catalog_service.delete_showtime(db, showtime_id)
        return {"message": "Showtime deleted successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting showtime %s", showtime_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting showtime")
