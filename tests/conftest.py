import json
import os
from datetime import date, datetime

# Configure the app before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_APIKEY"] = "test-api-key"
os.environ["ACCESS_TOKEN_SECRET"] = "test-access-secret"
os.environ["REFRESH_TOKEN_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MIDTRANS_SERVER_KEY"] = "SB-Mid-server-test"
os.environ["MIDTRANS_BASE_URL"] = "https://api.sandbox.midtrans.test"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bioskop.database import models
from bioskop.database.database import Base, get_db
from bioskop.main import app
from bioskop.services.payment_gateway import MidtransClient, get_payment_gateway

API_KEY = "test-api-key"
SERVER_KEY = "SB-Mid-server-test"

USER_PAYLOAD = {
    "fullName": "Budi Santoso",
    "email": "budi@example.com",
    "password": "rahasia123",
    "phoneNumber": "+6281234567890",
    "address": "Jl. Merdeka No. 1, Jakarta",
}


class FakeMidtrans:
    """Stands in for the Midtrans Core API through httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.charge_status_code = "201"
        self.transaction_status = "settlement"

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST" and request.url.path == "/v2/charge":
            payload = json.loads(request.content)
            if self.charge_status_code != "201":
                return httpx.Response(
                    200, json={"status_code": self.charge_status_code, "status_message": "Bank is not supported"}
                )
            details = payload["transaction_details"]
            return httpx.Response(200, json={
                "status_code": "201",
                "status_message": "Success, Bank Transfer transaction is created",
                "transaction_id": "9aed5972-5b6a-401e-894b-a32c91ed1a3a",
                "order_id": details["order_id"],
                "gross_amount": f"{details['gross_amount']}.00",
                "payment_type": "bank_transfer",
                "transaction_time": "2024-05-01 10:00:00",
                "transaction_status": "pending",
                "fraud_status": "accept",
                "va_numbers": [{"bank": payload["bank_transfer"]["bank"], "va_number": "12345678901"}],
            })
        if request.method == "GET" and request.url.path.endswith("/status"):
            order_id = request.url.path.split("/")[2]
            return httpx.Response(200, json={
                "status_code": "200",
                "order_id": order_id,
                "transaction_status": self.transaction_status,
                "settlement_time": "2024-05-01 10:05:00",
                "gross_amount": "50000.00",
            })
        return httpx.Response(404, json={"status_code": "404", "status_message": "Not found"})

    def client(self) -> MidtransClient:
        return MidtransClient(
            server_key=SERVER_KEY,
            base_url="https://api.sandbox.midtrans.test",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def fake_midtrans():
    return FakeMidtrans()


@pytest.fixture
def client(session_factory, fake_midtrans):
    gateway = fake_midtrans.client()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    gateway.close()


@pytest.fixture
def api_headers():
    return {"x-api-key": API_KEY}


@pytest.fixture
def registered_user(client):
    response = client.post("/users/register", json=USER_PAYLOAD)
    assert response.status_code == 201
    return dict(USER_PAYLOAD)


@pytest.fixture
def tokens(client, registered_user):
    response = client.post(
        "/users/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(tokens):
    return {"Authorization": f"Bearer {tokens['accessToken']}"}


@pytest.fixture
def catalog(db_session):
    """A movie, a theater and one showtime linking them."""
    movie = models.Movie(
        movie_name="Agak Laen",
        age_rating="R13",
        duration=119,
        dimension="2D",
        language="Indonesia",
        release_date=date(2024, 2, 1),
        poster_link="https://example.com/posters/agak-laen.jpg",
        status="Tayang",
    )
    theater = models.Theater(theater_name="Studio 1", location="Jakarta", total_seats=100)
    db_session.add_all([movie, theater])
    db_session.flush()
    showtime = models.Showtime(
        movie_id=movie.movie_id,
        theater_id=theater.theater_id,
        showtime=datetime(2024, 5, 1, 19, 30),
        available_seats=100,
    )
    db_session.add(showtime)
    db_session.commit()
    return {"movie_id": movie.movie_id, "theater_id": theater.theater_id, "showtime_id": showtime.showtime_id}
