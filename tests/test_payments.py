import json
from datetime import datetime

from bioskop.database.payment_models import Payment
from bioskop.services.payment_gateway import notification_signature
from tests.conftest import SERVER_KEY


def _create_transaction(client, auth_headers, ticket_id=7, gross_amount=50000, bank="bca"):
    return client.post(
        "/transaction/create-transaction",
        json={"ticket_id": ticket_id, "gross_amount": gross_amount, "bank": bank},
        headers=auth_headers,
    )


def _signed_notification(order_id, transaction_status, status_code="200", gross_amount="50000.00", **extra):
    payload = {
        "order_id": order_id,
        "status_code": status_code,
        "gross_amount": gross_amount,
        "transaction_status": transaction_status,
        "signature_key": notification_signature(order_id, status_code, gross_amount, SERVER_KEY),
    }
    payload.update(extra)
    return payload


# ---------------- Transactions ----------------
def test_create_transaction_charges_gateway_and_records_payment(client, auth_headers, fake_midtrans, db_session):
    response = _create_transaction(client, auth_headers)
    assert response.status_code == 201
    body = response.json()
    order_id = body["order_id"]
    assert len(order_id) == 16 and order_id.endswith("7") and order_id[:15].isalpha()
    assert body["transaction"]["transaction_status"] == "pending"

    sent = json.loads(fake_midtrans.requests[0].content)
    assert sent["payment_type"] == "bank_transfer"
    assert sent["transaction_details"] == {"order_id": order_id, "gross_amount": 50000}
    assert sent["bank_transfer"] == {"bank": "bca"}
    assert sent["customer_details"] == {"email": "budi@example.com", "phone": "+6281234567890"}

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.ticket_id == 7
    assert payment.payment_status == "pending"
    assert payment.va_number == "12345678901"
    assert payment.payment_method == "bank_transfer:bca"
    assert payment.payment_date == datetime(2024, 5, 1, 10, 0, 0)


def test_create_transaction_requires_token(client):
    response = client.post("/transaction/create-transaction", json={"ticket_id": 1, "gross_amount": 1, "bank": "bca"})
    assert response.status_code == 401


def test_create_transaction_validates_fields(client, auth_headers):
    for payload in (
        {"gross_amount": 50000, "bank": "bca"},
        {"ticket_id": 1, "gross_amount": 0, "bank": "bca"},
        {"ticket_id": 1, "gross_amount": "abc", "bank": "bca"},
        {"ticket_id": 1, "gross_amount": 50000},
    ):
        response = client.post("/transaction/create-transaction", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Ticket ID, valid gross amount, and bank are required"


def test_settled_ticket_cannot_be_paid_again(client, auth_headers, db_session, fake_midtrans):
    db_session.add(Payment(payment_id="PAIDORDER7", ticket_id=7, payment_method="bank_transfer:bni",
                           payment_status="settlement", amount=50000))
    db_session.commit()

    response = _create_transaction(client, auth_headers, ticket_id=7)
    assert response.status_code == 400
    assert response.json()["detail"] == "This ticket has already been purchased by someone else."
    assert fake_midtrans.requests == []


def test_gateway_rejection_is_502(client, auth_headers, fake_midtrans, db_session):
    fake_midtrans.charge_status_code = "402"
    response = _create_transaction(client, auth_headers, bank="unknownbank")
    assert response.status_code == 502
    assert response.json()["detail"] == "Bank is not supported"
    assert db_session.query(Payment).count() == 0


# ---------------- Payments ----------------
def test_get_payment(client, auth_headers):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]

    response = client.get(f"/payments/payment/{order_id}", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["payment_id"] == order_id
    assert body["ticket_id"] == 7
    assert body["payment_status"] == "pending"
    assert body["amount"] == 50000
    assert body["va_number"] == "12345678901"


def test_get_payment_not_found(client, auth_headers):
    response = client.get("/payments/payment/NOPE", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Payment not found for the provided payment_id"


def test_get_payment_requires_token(client):
    assert client.get("/payments/payment/ANY").status_code == 401


def test_status_poll_updates_payment(client, auth_headers, fake_midtrans, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]
    fake_midtrans.transaction_status = "settlement"

    response = client.get(f"/payments/status/{order_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["payment_status"] == "settlement"
    assert fake_midtrans.requests[-1].url.path == f"/v2/{order_id}/status"

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "settlement"
    assert payment.payment_date == datetime(2024, 5, 1, 10, 5, 0)

    # a settled ticket blocks a second purchase
    assert _create_transaction(client, auth_headers).status_code == 400


def test_status_poll_unknown_order(client, auth_headers, fake_midtrans):
    response = client.get("/payments/status/UNKNOWN", headers=auth_headers)
    assert response.status_code == 404
    assert fake_midtrans.requests == []


def test_notification_with_valid_signature(client, auth_headers, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]

    response = client.post("/payments/notification", json=_signed_notification(order_id, "settlement"))
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "settlement"


def test_notification_capture_accept_counts_as_settlement(client, auth_headers, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]

    payload = _signed_notification(order_id, "capture", fraud_status="accept")
    assert client.post("/payments/notification", json=payload).status_code == 200

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "settlement"


def test_notification_with_bad_signature(client, auth_headers, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]
    payload = _signed_notification(order_id, "settlement")
    payload["signature_key"] = "0" * 128

    response = client.post("/payments/notification", json=payload)
    assert response.status_code == 403

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "pending"


def test_notification_for_unknown_order(client):
    response = client.post("/payments/notification", json=_signed_notification("MISSING1", "expire"))
    assert response.status_code == 404


def test_notification_with_invalid_body(client):
    response = client.post("/payments/notification", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400


def test_settled_payment_ignores_replayed_pending_notification(client, auth_headers, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]
    assert client.post("/payments/notification", json=_signed_notification(order_id, "settlement")).status_code == 200

    replay = client.post("/payments/notification", json=_signed_notification(order_id, "pending", status_code="201"))
    assert replay.status_code == 200

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "settlement"
    assert _create_transaction(client, auth_headers).status_code == 400


def test_status_poll_does_not_reopen_settled_payment(client, auth_headers, fake_midtrans):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]
    client.post("/payments/notification", json=_signed_notification(order_id, "settlement"))
    fake_midtrans.transaction_status = "expire"

    response = client.get(f"/payments/status/{order_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["payment_status"] == "settlement"


def test_settled_payment_can_be_refunded(client, auth_headers, db_session):
    order_id = _create_transaction(client, auth_headers).json()["order_id"]
    client.post("/payments/notification", json=_signed_notification(order_id, "settlement"))

    response = client.post("/payments/notification", json=_signed_notification(order_id, "refund"))
    assert response.status_code == 200

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.payment_status == "refund"


# ---------------- Group payments ----------------
def _create_group(client, api_headers, auth_headers, showtime_id, seats):
    ticket_ids = []
    for seat in seats:
        response = client.post(
            "/tickets/add-ticket",
            json={"user_id": 1, "showtime_id": showtime_id, "seat_number": seat, "ticket_price": 50000, "status": "Booked"},
            headers=api_headers,
        )
        ticket_ids.append(response.json()["ticket_id"])
    response = client.post("/TicketGroup/add-group-ticket", json={"ticket_id": ticket_ids}, headers=auth_headers)
    return response.json()["data"]["group_ticket_id"]


def test_group_transaction_is_marked_with_group(client, api_headers, auth_headers, catalog, db_session):
    group_id = _create_group(client, api_headers, auth_headers, catalog["showtime_id"], ["M1", "M2"])

    response = client.post(
        "/transaction/create-transaction",
        json={"group_ticket_id": group_id, "gross_amount": 100000, "bank": "BNI"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    order_id = response.json()["order_id"]

    payment = db_session.query(Payment).filter(Payment.payment_id == order_id).one()
    assert payment.group_ticket_id == group_id
    assert payment.ticket_id == group_id
    assert payment.payment_method == "bank_transfer:bni"
    assert client.get(f"/payments/payment/{order_id}", headers=auth_headers).json()["group_ticket_id"] == group_id


def test_settled_group_does_not_block_ticket_with_same_id(client, api_headers, auth_headers, catalog):
    group_id = _create_group(client, api_headers, auth_headers, catalog["showtime_id"], ["N1"])
    order_id = client.post(
        "/transaction/create-transaction",
        json={"group_ticket_id": group_id, "gross_amount": 50000, "bank": "bca"},
        headers=auth_headers,
    ).json()["order_id"]
    client.post("/payments/notification", json=_signed_notification(order_id, "settlement"))

    again = client.post(
        "/transaction/create-transaction",
        json={"group_ticket_id": group_id, "gross_amount": 50000, "bank": "bca"},
        headers=auth_headers,
    )
    assert again.status_code == 400
    assert _create_transaction(client, auth_headers, ticket_id=group_id).status_code == 201


def test_group_transaction_for_unknown_group(client, auth_headers):
    response = client.post(
        "/transaction/create-transaction",
        json={"group_ticket_id": 999, "gross_amount": 50000, "bank": "bca"},
        headers=auth_headers,
    )
    assert response.status_code == 404
    assert response.json()["detail"] == "GroupTicket not found"


def test_transaction_takes_one_kind_of_id(client, auth_headers):
    response = client.post(
        "/transaction/create-transaction",
        json={"ticket_id": 1, "group_ticket_id": 1, "gross_amount": 50000, "bank": "bca"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Send either ticket_id or group_ticket_id, not both"
