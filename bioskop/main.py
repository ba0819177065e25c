# bioskop/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bioskop.core.config import settings
from bioskop.database import models, payment_models  # noqa: F401  (register tables on Base)
from bioskop.database.database import Base, engine
from bioskop.routers import (
    film_routes,
    group_ticket_routes,
    health,
    payment_routes,
    seat_routes,
    showtime_routes,
    theater_routes,
    ticket_routes,
    transaction_routes,
    user_routes,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# Lifespan events (startup/shutdown)
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s %s starting", settings.PROJECT_NAME, settings.VERSION)
    if not settings.ADMIN_APIKEY:
        logger.warning("ADMIN_APIKEY is not set; admin endpoints will reject every request")

    yield

    try:
        from bioskop.services.payment_gateway import close_payment_gateway
        close_payment_gateway()
        logger.info("Payment gateway client closed")
    except Exception as e:
        logger.error(f"Error closing payment gateway client: {e}")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Cinema ticketing backend: catalog, seats, tickets, group tickets and payments",
    version=settings.VERSION,
    lifespan=lifespan,
)

# Ensure DB models/tables exist
Base.metadata.create_all(bind=engine)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        # drop the "body"/"path"/"query" prefix
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        errors.append({"field": field, "message": err.get("msg", "Invalid value"), "type": err.get("type")})
    logger.info("Validation failed for %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


# --- Register routers, one per resource ---
app.include_router(user_routes.router)
app.include_router(film_routes.router)
app.include_router(theater_routes.router)
app.include_router(showtime_routes.router)
app.include_router(seat_routes.router)
app.include_router(ticket_routes.router)
app.include_router(transaction_routes.router)
app.include_router(payment_routes.router)
app.include_router(group_ticket_routes.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"message": "Bioskop API is running"}
