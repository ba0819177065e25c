import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from sqlalchemy.orm import Session

from bioskop.core.exceptions import InvalidRequestError, InvalidSignatureError, NotFoundError
from bioskop.database import models
from bioskop.database.payment_models import Payment
from bioskop.services.payment_gateway import MidtransClient, verify_notification_signature
from bioskop.utils import generate_order_id

logger = logging.getLogger(__name__)

SETTLEMENT = "settlement"
# the only moves allowed once a payment has settled
POST_SETTLEMENT_STATUSES = {"refund", "partial_refund", "chargeback", "partial_chargeback"}
GATEWAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_gateway_time(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.strptime(raw, GATEWAY_TIME_FORMAT)
    except (TypeError, ValueError):
        logger.warning("Unparseable gateway timestamp: %s", raw)
        return None


def _extract_va_number(transaction: Mapping[str, Any]) -> Optional[str]:
    va_numbers = transaction.get("va_numbers") or []
    if va_numbers and isinstance(va_numbers[0], dict):
        return va_numbers[0].get("va_number")
    return transaction.get("permata_va_number")


def resolve_status(transaction: Mapping[str, Any]) -> str:
    """Card captures cleared by fraud screening count as settled."""
    status = transaction.get("transaction_status") or "pending"
    if status == "capture" and transaction.get("fraud_status") == "accept":
        return SETTLEMENT
    return status


def ticket_is_settled(db: Session, ticket_id: int, is_group: bool = False) -> bool:
    query = db.query(Payment).filter(Payment.payment_status == SETTLEMENT)
    if is_group:
        query = query.filter(Payment.group_ticket_id == ticket_id)
    else:
        query = query.filter(Payment.ticket_id == ticket_id, Payment.group_ticket_id.is_(None))
    return query.count() > 0


def create_transaction(
    db: Session,
    gateway: MidtransClient,
    ticket_id: int,
    gross_amount: float,
    bank: str,
    customer: Mapping[str, Any],
    is_group: bool = False,
) -> Tuple[str, Dict[str, Any]]:
    """
    Charge a bank-transfer payment for a ticket and record it as a Payment row.
    With is_group the id refers to a group ticket and the payment is marked with it.
    """
    if is_group:
        exists = db.query(models.GroupTicket).filter(models.GroupTicket.ticket_id == ticket_id).first()
        if not exists:
            raise NotFoundError("GroupTicket not found")

    if ticket_is_settled(db, ticket_id, is_group):
        raise InvalidRequestError("This ticket has already been purchased by someone else.")

    order_id = generate_order_id(ticket_id)
    logger.info("Generated order id %s for ticket %s", order_id, ticket_id)

    parameter = {
        "payment_type": "bank_transfer",
        "transaction_details": {
            "order_id": order_id,
            "gross_amount": gross_amount,
        },
        "bank_transfer": {
            "bank": bank,
        },
        "customer_details": {
            "email": customer.get("email"),
            "phone": customer.get("phone"),
        },
    }
    transaction = gateway.charge(parameter)

    payment = Payment(
        payment_id=order_id,
        ticket_id=ticket_id,
        group_ticket_id=ticket_id if is_group else None,
        payment_method=f"bank_transfer:{bank}",
        payment_status=resolve_status(transaction),
        amount=gross_amount,
        va_number=_extract_va_number(transaction),
        payment_date=_parse_gateway_time(transaction.get("transaction_time")) or datetime.utcnow(),
    )
    db.add(payment)
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Charge %s succeeded at the gateway but could not be recorded", order_id)
        raise
    return order_id, transaction


def get_payment(db: Session, payment_id: str) -> Payment:
    payment = db.query(Payment).filter(Payment.payment_id == payment_id).first()
    if not payment:
        raise NotFoundError("Payment not found for the provided payment_id")
    return payment


def apply_gateway_status(db: Session, payment: Payment, transaction: Mapping[str, Any]) -> Payment:
    """Store a gateway status. A settled payment only moves on to a refund or chargeback."""
    status = resolve_status(transaction)
    if payment.payment_status == SETTLEMENT and status not in POST_SETTLEMENT_STATUSES:
        if status != SETTLEMENT:
            logger.warning("Payment %s is settled; ignoring gateway status %s", payment.payment_id, status)
        return payment
    if payment.payment_status != status:
        logger.info("Payment %s: %s -> %s", payment.payment_id, payment.payment_status, status)
    payment.payment_status = status
    if status == SETTLEMENT:
        payment.payment_date = _parse_gateway_time(transaction.get("settlement_time")) or datetime.utcnow()
    db.commit()
    db.refresh(payment)
    return payment


def sync_payment_status(db: Session, gateway: MidtransClient, order_id: str) -> Tuple[Payment, Dict[str, Any]]:
    """Poll the gateway for an order and store the answer."""
    payment = get_payment(db, order_id)
    transaction = gateway.status(order_id)
    return apply_gateway_status(db, payment, transaction), transaction


def handle_notification(db: Session, payload: Mapping[str, Any], server_key: str) -> Payment:
    if not verify_notification_signature(payload, server_key):
        logger.warning("Notification for order %s has an invalid signature", payload.get("order_id"))
        raise InvalidSignatureError("Invalid signature")

    payment = get_payment(db, str(payload.get("order_id")))
    return apply_gateway_status(db, payment, payload)
