import base64
import time
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest

from bioskop.core.exceptions import PaymentGatewayError
from bioskop.services import payment_gateway
from bioskop.services.payment_gateway import (
    MidtransClient,
    notification_signature,
    verify_notification_signature,
)


def _client(handler):
    return MidtransClient("SB-Mid-server-key", "https://api.sandbox.midtrans.test", transport=httpx.MockTransport(handler))


def test_charge_uses_basic_auth_with_server_key():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["path"] = request.url.path
        return httpx.Response(200, json={"status_code": "201", "transaction_status": "pending"})

    result = _client(handler).charge({"transaction_details": {"order_id": "abc1", "gross_amount": 10}})

    expected = base64.b64encode(b"SB-Mid-server-key:").decode()
    assert seen["auth"] == f"Basic {expected}"
    assert seen["path"] == "/v2/charge"
    assert result["transaction_status"] == "pending"


def test_charge_rejection_raises_with_gateway_message():
    def handler(request):
        return httpx.Response(200, json={"status_code": "406", "status_message": "Duplicate order ID"})

    with pytest.raises(PaymentGatewayError) as excinfo:
        _client(handler).charge({"transaction_details": {"order_id": "abc1"}})
    assert excinfo.value.message == "Duplicate order ID"
    assert excinfo.value.status_code == "406"


def test_unauthorized_response_without_status_code_field():
    def handler(request):
        return httpx.Response(401, json={"error_messages": ["Access denied"]})

    with pytest.raises(PaymentGatewayError):
        _client(handler).status("abc1")


def test_non_json_body_raises():
    def handler(request):
        return httpx.Response(502, text="<html>Bad gateway</html>")

    with pytest.raises(PaymentGatewayError):
        _client(handler).status("abc1")


def test_timeout_raises():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PaymentGatewayError) as excinfo:
        _client(handler).charge({})
    assert excinfo.value.message == "Payment gateway timeout"


def test_expired_status_is_a_valid_answer():
    def handler(request):
        return httpx.Response(200, json={"status_code": "407", "transaction_status": "expire"})

    assert _client(handler).status("abc1")["transaction_status"] == "expire"


def test_notification_signature_roundtrip():
    payload = {"order_id": "abc1", "status_code": "200", "gross_amount": "10000.00"}
    payload["signature_key"] = notification_signature("abc1", "200", "10000.00", "server-key")

    assert verify_notification_signature(payload, "server-key")
    assert not verify_notification_signature(payload, "other-key")
    assert not verify_notification_signature({**payload, "gross_amount": "1.00"}, "server-key")
    assert not verify_notification_signature({k: v for k, v in payload.items() if k != "signature_key"}, "server-key")


def test_shared_client_is_built_once_under_concurrency(monkeypatch):
    built = []

    class SlowClient(MidtransClient):
        def __init__(self, *args, **kwargs):
            time.sleep(0.05)
            super().__init__(*args, **kwargs)
            built.append(self)

    monkeypatch.setattr(payment_gateway, "MidtransClient", SlowClient)
    payment_gateway.close_payment_gateway()
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            clients = list(pool.map(lambda _: payment_gateway.get_payment_gateway(), range(8)))
    finally:
        payment_gateway.close_payment_gateway()

    assert len(built) == 1
    assert all(c is built[0] for c in clients)
    assert payment_gateway._gateway_client is None
