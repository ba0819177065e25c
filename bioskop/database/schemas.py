# bioskop/database/schemas.py
# =========================================================
# Bioskop API Schemas (Pydantic v2)
# =========================================================

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


MovieDimension = Literal["2D", "3D", "IMAX"]
MovieStatus = Literal["Upcoming", "Tayang", "Archived"]
ReservationStatus = Literal["Available", "Reserved"]
TicketStatus = Literal["Completed", "Cancelled", "Booked"]

# group tickets store member seats space-joined
SEAT_NUMBER_PATTERN = r"^\S+$"


# =========================================================
# Base Config for ORM Compatibility
# =========================================================
class ConfigModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str


# =========================================================
# User Schemas
# =========================================================
class RegisterRequest(BaseModel):
    full_name: str = Field(..., alias="fullName", min_length=3)
    email: EmailStr
    password: str = Field(..., min_length=8)
    phone_number: str = Field(..., alias="phoneNumber", pattern=r"^\+?[0-9]{8,15}$")
    address: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    message: str
    accessToken: str
    refreshToken: str


class AccessTokenResponse(BaseModel):
    accessToken: str


class UserProfile(ConfigModel):
    user_id: int
    full_name: str
    email: EmailStr
    phone_number: str
    address: str
    created_at: Optional[datetime] = None


# =========================================================
# Movie Schemas
# =========================================================
class MovieCreate(BaseModel):
    movie_name: str = Field(..., min_length=1)
    age_rating: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1)  # minutes
    dimension: MovieDimension
    language: str = Field(..., min_length=1)
    release_date: date
    poster_link: HttpUrl
    status: MovieStatus
    genre: Optional[str] = None
    producer: Optional[str] = None
    director: Optional[str] = None
    trailer_link: Optional[HttpUrl] = None
    synopsis: Optional[str] = None

    model_config = {"json_schema_extra": {
        "example": {
            "movie_name": "Pengabdi Setan 2",
            "age_rating": "D17",
            "duration": 119,
            "dimension": "2D",
            "language": "Indonesia",
            "release_date": "2022-08-04",
            "poster_link": "https://example.com/posters/pengabdi-setan-2.jpg",
            "status": "Tayang",
        }
    }}


class MovieStatusUpdate(BaseModel):
    status: MovieStatus


class MovieResponse(ConfigModel):
    movie_id: int
    movie_name: str
    age_rating: str
    duration: int
    dimension: str
    language: str
    release_date: date
    poster_link: str
    status: str
    genre: Optional[str] = None
    producer: Optional[str] = None
    director: Optional[str] = None
    trailer_link: Optional[str] = None
    synopsis: Optional[str] = None


class MovieCreated(MessageResponse):
    movie_id: int


# =========================================================
# Theater Schemas
# =========================================================
class TheaterCreate(BaseModel):
    theater_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    total_seats: int = Field(..., ge=1)


class TheaterResponse(ConfigModel):
    theater_id: int
    theater_name: str
    location: str
    total_seats: int


class TheaterCreated(MessageResponse):
    theater_id: int


# =========================================================
# Showtime Schemas
# =========================================================
class ShowtimeCreate(BaseModel):
    movie_id: int = Field(..., ge=1)
    theater_id: int = Field(..., ge=1)
    showtime: datetime
    available_seats: int = Field(..., ge=1)


class ShowtimeResponse(ConfigModel):
    showtime_id: int
    movie_id: int
    theater_id: int
    showtime: datetime
    available_seats: int


class ShowtimeCreated(MessageResponse):
    showtime_id: int


# =========================================================
# Seat Reservation Schemas
# =========================================================
class SeatReservationCreate(BaseModel):
    showtime_id: int
    seat_number: str = Field(..., min_length=1, max_length=10, pattern=SEAT_NUMBER_PATTERN)
    reservation_status: ReservationStatus


class SeatReservationResponse(ConfigModel):
    showtime_id: int
    seat_number: str
    user_id: int
    reservation_status: str


# =========================================================
# Ticket Schemas
# =========================================================
class TicketCreate(BaseModel):
    user_id: int
    showtime_id: int
    seat_number: str = Field(..., min_length=1, max_length=10, pattern=SEAT_NUMBER_PATTERN)
    ticket_price: float = Field(..., ge=0)
    status: TicketStatus


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class TicketResponse(ConfigModel):
    ticket_id: int
    user_id: int
    showtime_id: int
    seat_number: str
    ticket_price: float
    status: str
    created_at: Optional[datetime] = None


class TicketCreated(MessageResponse):
    ticket_id: int


# =========================================================
# Group Ticket Schemas
# =========================================================
class GroupTicketCreate(BaseModel):
    ticket_id: List[int] = Field(..., min_length=1, description="Ticket ids bought together")


class GroupTicketData(BaseModel):
    group_ticket_id: int
    user_id: int
    showtime_id: int
    seat_number: str
    total_price: float
    status: str


class GroupTicketCreated(MessageResponse):
    data: GroupTicketData


class GroupTicketDetail(BaseModel):
    ticket_id: int
    movie_name: str
    theater_name: str
    showtime: datetime
    seat_number: str
    ticket_price: float
    status: str


class GroupTicketDeleted(MessageResponse):
    deleted_payments: int
    deleted_ticket_ids: List[int]
    deleted_seat_numbers: List[str]


# =========================================================
# Payment Schemas
# =========================================================
class PaymentResponse(ConfigModel):
    payment_id: str
    ticket_id: int
    group_ticket_id: Optional[int] = None
    payment_method: str
    payment_status: str
    amount: float
    va_number: Optional[str] = None
    payment_date: Optional[datetime] = None
