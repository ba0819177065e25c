# bioskop/routers/payment_routes.py
"""
Payment routes: stored payment lookup, gateway status polling and the
Midtrans HTTP notification receiver.
"""
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from bioskop.auth import get_current_user
from bioskop.core.exceptions import InvalidSignatureError, NotFoundError, PaymentGatewayError
from bioskop.database import schemas
from bioskop.database.database import get_db
from bioskop.services import payment_service
from bioskop.services.payment_gateway import MidtransClient, get_payment_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("/payment/{payment_id}", response_model=schemas.PaymentResponse)
def get_payment(
    payment_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return payment_service.get_payment(db, payment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        logger.exception("Error retrieving payment details for %s", payment_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error retrieving payment details")


@router.get("/status/{order_id}")
def poll_payment_status(
    order_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: MidtransClient = Depends(get_payment_gateway),
):
    """Ask the gateway for the current state of an order and store it."""
    try:
        payment, transaction = payment_service.sync_payment_status(db, gateway, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PaymentGatewayError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    except Exception:
        db.rollback()
        logger.exception("Error checking payment status for %s", order_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error checking payment status")

    return {"order_id": order_id, "payment_status": payment.payment_status, "transaction": transaction}


@router.post("/notification")
async def payment_notification(
    request: Request,
    db: Session = Depends(get_db),
    gateway: MidtransClient = Depends(get_payment_gateway),
):
    """Midtrans HTTP notification receiver. Authenticated by the payload signature."""
    body_bytes = await request.body()
    try:
        payload = json.loads(body_bytes.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid notification body")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid notification body")

    try:
        payment = payment_service.handle_notification(db, payload, gateway.server_key)
    except InvalidSignatureError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Notification error for order %s", payload.get("order_id"))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error processing notification")

    logger.info("Notification: order %s is %s", payment.payment_id, payment.payment_status)
    return {"status": "ok"}
