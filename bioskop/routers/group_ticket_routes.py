# bioskop/routers/group_ticket_routes.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import get_current_user
from bioskop.core.exceptions import InvalidRequestError, NotFoundError
from bioskop.database import schemas
from bioskop.database.database import get_db
from bioskop.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/TicketGroup", tags=["Group Tickets"])


@router.post("/add-group-ticket", status_code=status.HTTP_201_CREATED, response_model=schemas.GroupTicketCreated)
def add_group_ticket(
    data: schemas.GroupTicketCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        group = booking_service.create_group_ticket(db, data.ticket_id, current_user["id"])
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error adding group ticket")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error adding group ticket")

    return {
        "message": "GroupTicket added successfully",
        "data": {
            "group_ticket_id": group.ticket_id,
            "user_id": group.user_id,
            "showtime_id": group.showtime_id,
            "seat_number": group.seat_number,
            "total_price": group.price,
            "status": group.status,
        },
    }


@router.get("/get-group-ticket/{group_ticket_id}", response_model=schemas.GroupTicketDetail)
def get_group_ticket(
    group_ticket_id: int,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return booking_service.get_group_ticket_detail(db, group_ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error fetching group ticket %s", group_ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching group ticket")


@router.delete("/delete-group-ticket/{group_ticket_id}", response_model=schemas.GroupTicketDeleted)
def delete_group_ticket(
    group_ticket_id: int,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a group ticket along with its payments, member tickets and seat reservations."""
    try:
        result = booking_service.delete_group_ticket(db, group_ticket_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error deleting group ticket %s", group_ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting group ticket")

    logger.info(
        "Group ticket %s deleted (payments=%s, tickets=%s)",
        group_ticket_id, result["deleted_payments"], result["deleted_ticket_ids"],
    )
    return {"message": "GroupTicket and associated data deleted successfully", **result}
