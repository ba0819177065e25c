# bioskop/routers/theater_routes.py
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

router = APIRouter(prefix="/theaters", tags=["Theaters"])


@router.post(
    "/add-theater",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.TheaterCreated,
    dependencies=[Depends(require_api_key)],
)
def add_theater(theater: schemas.TheaterCreate, db: Session = Depends(get_db)):
    try:
        new_theater = catalog_service.create_theater(db, theater)
        logger.info("Theater added: %s (%s seats)", new_theater.theater_name, new_theater.total_seats)
        return {"message": "Theater added successfully", "theater_id": new_theater.theater_id}
    except Exception:
        db.rollback()
        logger.exception("Error adding theater")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding theater")


@router.get("/get-theaters", response_model=List[schemas.TheaterResponse])
def get_theaters(db: Session = Depends(get_db)):
    try:
        theaters = catalog_service.list_theaters(db)
    except Exception:
        logger.exception("Error fetching theaters")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching theaters")

    if not theaters:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No theaters found")
    return theaters


@router.delete(
    "/delete-theater/{theater_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def delete_theater(theater_id: int, db: Session = Depends(get_db)):
    try:
        catalog_service.delete_theater(db, theater_id)
        return {"message": "Theater deleted successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting theater %s", theater_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting theater")
