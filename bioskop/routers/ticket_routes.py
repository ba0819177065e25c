# bioskop/routers/ticket_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import require_api_key
from bioskop.core.exceptions import NotFoundError
from bioskop.database import schemas
from bioskop.database.database import get_db
from bioskop.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post(
    "/add-ticket",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.TicketCreated,
    dependencies=[Depends(require_api_key)],
)
def add_ticket(data: schemas.TicketCreate, db: Session = Depends(get_db)):
    try:
        ticket = booking_service.create_ticket(db, data)
        logger.info("Ticket %s issued: showtime=%s seat=%s", ticket.ticket_id, ticket.showtime_id, ticket.seat_number)
        return {"message": "Ticket added successfully", "ticket_id": ticket.ticket_id}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error adding ticket")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding ticket")


@router.get("/get-tickets", response_model=List[schemas.TicketResponse])
def get_tickets(db: Session = Depends(get_db)):
    try:
        tickets = booking_service.list_tickets(db)
    except Exception:
        logger.exception("Error fetching tickets")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching tickets")

    if not tickets:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No tickets found")
    return tickets


@router.get("/get-ticket/{ticket_id}", response_model=schemas.TicketResponse)
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    try:
        return booking_service.get_ticket(db, ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error fetching ticket %s", ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching ticket")


@router.delete(
    "/delete-ticket/{ticket_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def delete_ticket(ticket_id: int, db: Session = Depends(get_db)):
    try:
        booking_service.delete_ticket(db, ticket_id)
        return {"message": "Ticket deleted successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting ticket %s", ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting ticket")


@router.put(
    "/update-ticket-status/{ticket_id}",
    response_model=schemas.MessageResponse,
    dependencies=[Depends(require_api_key)],
)
def update_ticket_status(ticket_id: int, data: schemas.TicketStatusUpdate, db: Session = Depends(get_db)):
    try:
        booking_service.update_ticket_status(db, ticket_id, data.status)
        return {"message": "Ticket status updated successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error updating ticket status %s", ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating ticket status")
