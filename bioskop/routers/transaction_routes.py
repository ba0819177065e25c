# bioskop/routers/transaction_routes.py
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import get_current_user
from bioskop.core.exceptions import InvalidRequestError, NotFoundError, PaymentGatewayError
from bioskop.database.database import get_db
from bioskop.services import payment_service
from bioskop.services.payment_gateway import MidtransClient, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transaction", tags=["Transactions"])

REQUIRED_FIELDS_MESSAGE = "Ticket ID, valid gross amount, and bank are required"
ONE_ID_MESSAGE = "Send either ticket_id or group_ticket_id, not both"


# helpers
def _parse_ticket_id(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw > 0 else None
    if isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
        return value if value > 0 else None
    return None


def _parse_amount(raw: Any) -> Optional[float]:
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        amount = float(raw)
    except (TypeError, ValueError):
        return None
    return amount if amount > 0 else None


@router.post("/create-transaction", status_code=status.HTTP_201_CREATED)
def create_transaction(
    request_data: Dict[str, Any] = Body(...),
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: MidtransClient = Depends(get_payment_gateway),
):
    """
    Open a bank-transfer payment for a ticket or a group ticket at the gateway.
    Body: ticket_id or group_ticket_id, gross_amount, bank (bca, bni, bri, permata, ...).
    """
    is_group = request_data.get("group_ticket_id") is not None
    if is_group and request_data.get("ticket_id") is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=ONE_ID_MESSAGE)
    ticket_id = _parse_ticket_id(request_data.get("group_ticket_id" if is_group else "ticket_id"))
    gross_amount = _parse_amount(request_data.get("gross_amount"))
    bank = request_data.get("bank")
    if ticket_id is None or gross_amount is None or not isinstance(bank, str) or not bank.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=REQUIRED_FIELDS_MESSAGE)

    # IDR amounts have no minor unit
    if gross_amount.is_integer():
        gross_amount = int(gross_amount)

    try:
        order_id, transaction = payment_service.create_transaction(
            db, gateway, ticket_id, gross_amount, bank.strip().lower(), current_user, is_group=is_group
        )
    except InvalidRequestError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except Exception:
        logger.exception("Error creating transaction for ticket %s", ticket_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating transaction")

    logger.info("Transaction %s created for ticket %s", order_id, ticket_id)
    return {
        "message": "Transaction created successfully",
        "order_id": order_id,
        "transaction": transaction,
    }
