"""
Midtrans Core API client.
Only the bank-transfer charge and the status lookup are used by the API.
"""
import hashlib
import hmac
import logging
import threading
from typing import Any, Dict, Mapping, Optional

import httpx

from bioskop.core.config import settings
from bioskop.core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

CHARGE_OK_CODES = {"200", "201"}
# 202 = denied, 407 = expired: valid answers to a status lookup
STATUS_OK_CODES = {"200", "201", "202", "407"}


class MidtransClient:
    def __init__(
        self,
        server_key: str,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.server_key = server_key
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            auth=(server_key, ""),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=transport,
        )

    def _request(self, method: str, endpoint: str, ok_codes: set, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method=method, url=endpoint, **kwargs)
        except httpx.TimeoutException:
            logger.error("Midtrans %s %s timed out", method, endpoint)
            raise PaymentGatewayError("Payment gateway timeout")
        except httpx.HTTPError as e:
            logger.error("Midtrans %s %s failed: %s", method, endpoint, e)
            raise PaymentGatewayError("Payment gateway unreachable")

        try:
            body = response.json()
        except ValueError:
            logger.error("Midtrans returned non-JSON body (HTTP %s): %s", response.status_code, response.text[:200])
            raise PaymentGatewayError(f"Payment gateway error (HTTP {response.status_code})")
        if not isinstance(body, dict):
            raise PaymentGatewayError(f"Payment gateway error (HTTP {response.status_code})")

        status_code = str(body.get("status_code", response.status_code))
        if status_code not in ok_codes:
            message = body.get("status_message") or "Payment gateway rejected the request"
            logger.warning("Midtrans %s %s rejected: %s %s", method, endpoint, status_code, message)
            raise PaymentGatewayError(message, status_code=status_code)
        return body

    def charge(self, parameter: Dict[str, Any]) -> Dict[str, Any]:
        order_id = parameter.get("transaction_details", {}).get("order_id")
        logger.info("Midtrans charge for order %s", order_id)
        return self._request("POST", "/v2/charge", CHARGE_OK_CODES, json=parameter)

    def status(self, order_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/v2/{order_id}/status", STATUS_OK_CODES)

    def close(self) -> None:
        self._client.close()


def notification_signature(order_id: str, status_code: str, gross_amount: str, server_key: str) -> str:
    raw = f"{order_id}{status_code}{gross_amount}{server_key}".encode("utf-8")
    return hashlib.sha512(raw).hexdigest()


def verify_notification_signature(payload: Mapping[str, Any], server_key: str) -> bool:
    """Check the signature_key Midtrans attaches to HTTP notifications."""
    signature = payload.get("signature_key")
    if not signature or not server_key:
        return False
    expected = notification_signature(
        str(payload.get("order_id", "")),
        str(payload.get("status_code", "")),
        str(payload.get("gross_amount", "")),
        server_key,
    )
    return hmac.compare_digest(expected, str(signature))


_gateway_client: Optional[MidtransClient] = None
_gateway_lock = threading.Lock()


def get_payment_gateway() -> MidtransClient:
    """FastAPI dependency returning the shared gateway client."""
    global _gateway_client
    if _gateway_client is None:
        with _gateway_lock:
            if _gateway_client is None:
                if not settings.MIDTRANS_SERVER_KEY:
                    logger.warning("MIDTRANS_SERVER_KEY is not set; gateway calls will be rejected")
                _gateway_client = MidtransClient(
                    server_key=settings.MIDTRANS_SERVER_KEY,
                    base_url=settings.MIDTRANS_BASE_URL,
                    timeout=settings.MIDTRANS_TIMEOUT_SECONDS,
                )
    return _gateway_client


def close_payment_gateway() -> None:
    global _gateway_client
    with _gateway_lock:
        if _gateway_client is not None:
            _gateway_client.close()
            _gateway_client = None
