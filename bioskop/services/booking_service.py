import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bioskop.core.exceptions import ConflictError, InvalidRequestError, NotFoundError
from bioskop.database import models, schemas
from bioskop.database.payment_models import Payment
from bioskop.services.catalog_service import get_showtime

logger = logging.getLogger(__name__)

GROUP_SEAT_SEPARATOR = " "


# ==============================
# Seat reservations
# ==============================
def _seat_taken(db: Session, showtime_id: int, seat_number: str) -> bool:
    return db.query(models.SeatReservation).filter(
        models.SeatReservation.showtime_id == showtime_id,
        models.SeatReservation.seat_number == seat_number,
    ).first() is not None


def reserve_seat(db: Session, data: schemas.SeatReservationCreate, user_id: int) -> models.SeatReservation:
    get_showtime(db, data.showtime_id)

    if _seat_taken(db, data.showtime_id, data.seat_number):
        raise ConflictError("Seat already reserved")

    reservation = models.SeatReservation(
        showtime_id=data.showtime_id,
        seat_number=data.seat_number,
        user_id=user_id,
        reservation_status=data.reservation_status,
    )
    db.add(reservation)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # only a concurrent reservation of the same seat is a conflict
        if _seat_taken(db, data.showtime_id, data.seat_number):
            raise ConflictError("Seat already reserved")
        raise
    db.refresh(reservation)
    return reservation


def list_seat_reservations(db: Session, showtime_id: int) -> List[models.SeatReservation]:
    return (
        db.query(models.SeatReservation)
        .filter(models.SeatReservation.showtime_id == showtime_id)
        .order_by(models.SeatReservation.seat_number)
        .all()
    )


def release_seat(db: Session, showtime_id: int, seat_number: str) -> None:
    reservation = db.query(models.SeatReservation).filter(
        models.SeatReservation.showtime_id == showtime_id,
        models.SeatReservation.seat_number == seat_number,
    ).first()
    if not reservation:
        raise NotFoundError("Seat reservation not found")
    db.delete(reservation)
    db.commit()


# ==============================
# Tickets
# ==============================
def create_ticket(db: Session, data: schemas.TicketCreate) -> models.Ticket:
    get_showtime(db, data.showtime_id)
    ticket = models.Ticket(**data.model_dump())
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket


def list_tickets(db: Session) -> List[models.Ticket]:
    return db.query(models.Ticket).order_by(models.Ticket.ticket_id).all()


def get_ticket(db: Session, ticket_id: int) -> models.Ticket:
    ticket = db.query(models.Ticket).filter(models.Ticket.ticket_id == ticket_id).first()
    if not ticket:
        raise NotFoundError("Ticket not found")
    return ticket


def update_ticket_status(db: Session, ticket_id: int, status: str) -> models.Ticket:
    ticket = get_ticket(db, ticket_id)
    ticket.status = status
    db.commit()
    db.refresh(ticket)
    return ticket


def delete_ticket(db: Session, ticket_id: int) -> None:
    ticket = get_ticket(db, ticket_id)
    db.delete(ticket)
    db.commit()


# ==============================
# Group tickets
# ==============================
def create_group_ticket(db: Session, ticket_ids: List[int], user_id: int) -> models.GroupTicket:
    """
    Aggregate several tickets into one group booking.

    The group takes showtime and status from its lowest ticket id, joins the
    member seat numbers with a single space and sums the member prices.
    """
    unique_ids = list(dict.fromkeys(ticket_ids))
    tickets = (
        db.query(models.Ticket)
        .filter(models.Ticket.ticket_id.in_(unique_ids))
        .order_by(models.Ticket.ticket_id)
        .all()
    )
    if len(tickets) != len(unique_ids):
        raise NotFoundError("Some ticket_id values were not found")

    showtime_ids = {t.showtime_id for t in tickets}
    if len(showtime_ids) > 1:
        raise InvalidRequestError("All tickets in a group must belong to the same showtime")
    if any(len(t.seat_number.split()) != 1 for t in tickets):
        raise InvalidRequestError("Seat numbers in a group must not contain whitespace")

    first = tickets[0]
    group = models.GroupTicket(
        user_id=user_id,
        showtime_id=first.showtime_id,
        seat_number=GROUP_SEAT_SEPARATOR.join(t.seat_number for t in tickets),
        price=sum(t.ticket_price for t in tickets),
        status=first.status,
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group ticket %s created from tickets %s", group.ticket_id, unique_ids)
    return group


def get_group_ticket_detail(db: Session, group_ticket_id: int) -> Dict[str, Any]:
    row = (
        db.query(
            models.GroupTicket.ticket_id,
            models.Movie.movie_name,
            models.Theater.theater_name,
            models.Showtime.showtime,
            models.GroupTicket.seat_number,
            models.GroupTicket.price.label("ticket_price"),
            models.GroupTicket.status,
        )
        .join(models.Showtime, models.GroupTicket.showtime_id == models.Showtime.showtime_id)
        .join(models.Movie, models.Showtime.movie_id == models.Movie.movie_id)
        .join(models.Theater, models.Showtime.theater_id == models.Theater.theater_id)
        .filter(models.GroupTicket.ticket_id == group_ticket_id)
        .first()
    )
    if row is None:
        raise NotFoundError("GroupTicket not found")
    return dict(row._mapping)


def delete_group_ticket(db: Session, group_ticket_id: int) -> Dict[str, Any]:
    """
    Delete a group ticket together with its own payments, member tickets and seat reservations.
    Everything is committed at once; any failure rolls the whole delete back.
    """
    group = db.query(models.GroupTicket).filter(models.GroupTicket.ticket_id == group_ticket_id).first()
    if not group:
        raise NotFoundError("GroupTicket not found")

    showtime_id = group.showtime_id
    seat_numbers = [s for s in group.seat_number.split(GROUP_SEAT_SEPARATOR) if s]

    try:
        deleted_payments = (
            db.query(Payment)
            .filter(Payment.group_ticket_id == group.ticket_id)
            .delete(synchronize_session=False)
        )

        related_ticket_ids: List[int] = []
        if seat_numbers:
            related_ticket_ids = [
                ticket_id
                for (ticket_id,) in db.query(models.Ticket.ticket_id)
                .filter(
                    models.Ticket.showtime_id == showtime_id,
                    models.Ticket.seat_number.in_(seat_numbers),
                )
                .order_by(models.Ticket.ticket_id)
                .all()
            ]
            if related_ticket_ids:
                db.query(models.Ticket).filter(models.Ticket.ticket_id.in_(related_ticket_ids)).delete(
                    synchronize_session=False
                )

            db.query(models.SeatReservation).filter(
                models.SeatReservation.showtime_id == showtime_id,
                models.SeatReservation.seat_number.in_(seat_numbers),
            ).delete(synchronize_session=False)

        db.delete(group)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {
        "deleted_payments": deleted_payments,
        "deleted_ticket_ids": related_ticket_ids,
        "deleted_seat_numbers": seat_numbers,
    }
