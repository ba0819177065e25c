# bioskop/routers/seat_routes.py
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import get_current_user
from bioskop.core.exceptions import ConflictError, NotFoundError
from bioskop.database import schemas
from bioskop.database.database import get_db
from bioskop.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/seats", tags=["Seats"])


@router.post("/add-seat-reservation", status_code=status.HTTP_201_CREATED, response_model=schemas.MessageResponse)
def add_seat_reservation(
    data: schemas.SeatReservationCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Reserve a seat for the caller. A seat can only be held once per showtime."""
    try:
        booking_service.reserve_seat(db, data, current_user["id"])
        logger.info("Seat %s reserved for showtime %s by user %s", data.seat_number, data.showtime_id, current_user["id"])
        return {"message": "Seat reservation added successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error adding seat reservation")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding seat reservation")


@router.get("/get-seat-reservations/{showtime_id}", response_model=List[schemas.SeatReservationResponse])
def get_seat_reservations(
    showtime_id: int,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return booking_service.list_seat_reservations(db, showtime_id)
    except Exception:
        logger.exception("Error fetching seat reservations for showtime %s", showtime_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching seat reservations"
        )


@router.delete("/delete-seat-reservation/{showtime_id}/{seat_number}", response_model=schemas.MessageResponse)
def delete_seat_reservation(
    showtime_id: int,
    seat_number: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        booking_service.release_seat(db, showtime_id, seat_number)
        return {"message": "Seat reservation deleted successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting seat reservation")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting seat reservation"
        )
