# bioskop/database/models.py
from sqlalchemy import Column, Integer, String, DateTime, Date, ForeignKey, Text, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from bioskop.database.database import Base

# ==========================
# USER MODEL
# ==========================
class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(20), nullable=False)
    address = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete")


# ==========================
# REFRESH TOKEN MODEL
# ==========================
class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    token = Column(String(500), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="refresh_tokens")


# ==========================
# MOVIE MODEL
# ==========================
class Movie(Base):
    __tablename__ = "movies"

    movie_id = Column(Integer, primary_key=True, index=True)
    movie_name = Column(String(150), nullable=False)
    age_rating = Column(String(10), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    dimension = Column(String(10), nullable=False)  # 2D, 3D, IMAX
    language = Column(String(50), nullable=False)
    release_date = Column(Date, nullable=False)
    poster_link = Column(String(500), nullable=False)
    status = Column(String(20), nullable=False, default="Upcoming")  # Upcoming, Tayang, Archived
    genre = Column(String(100), nullable=True)
    producer = Column(String(150), nullable=True)
    director = Column(String(150), nullable=True)
    trailer_link = Column(String(500), nullable=True)
    synopsis = Column(Text, nullable=True)

    showtimes = relationship("Showtime", back_populates="movie", cascade="all, delete")


# ==========================
# THEATER MODEL
# ==========================
class Theater(Base):
    __tablename__ = "theaters"

    theater_id = Column(Integer, primary_key=True, index=True)
    theater_name = Column(String(150), nullable=False)
    location = Column(String(255), nullable=False)
    total_seats = Column(Integer, nullable=False)

    showtimes = relationship("Showtime", back_populates="theater", cascade="all, delete")


# ==========================
# SHOWTIME MODEL
# ==========================
class Showtime(Base):
    __tablename__ = "showtimes"

    showtime_id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.movie_id"), nullable=False, index=True)
    theater_id = Column(Integer, ForeignKey("theaters.theater_id"), nullable=False, index=True)
    showtime = Column(DateTime, nullable=False)
    available_seats = Column(Integer, nullable=False)

    movie = relationship("Movie", back_populates="showtimes")
    theater = relationship("Theater", back_populates="showtimes")
    seat_reservations = relationship("SeatReservation", back_populates="showtime", cascade="all, delete")


# ==========================
# SEAT RESERVATION MODEL
# ==========================
class SeatReservation(Base):
    __tablename__ = "seat_reservations"
    __table_args__ = (
        UniqueConstraint("showtime_id", "seat_number", name="uq_seat_reservation_showtime_seat"),
    )

    reservation_id = Column(Integer, primary_key=True, index=True)
    showtime_id = Column(Integer, ForeignKey("showtimes.showtime_id"), nullable=False, index=True)
    seat_number = Column(String(10), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    reservation_status = Column(String(20), nullable=False, default="Reserved")  # Available, Reserved

    showtime = relationship("Showtime", back_populates="seat_reservations")


# ==========================
# TICKET MODEL
# ==========================
class Ticket(Base):
    __tablename__ = "tickets"

    ticket_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    showtime_id = Column(Integer, nullable=False, index=True)
    seat_number = Column(String(10), nullable=False)
    ticket_price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False, default="Booked")  # Booked, Completed, Cancelled
    created_at = Column(DateTime, default=datetime.utcnow)


# ==========================
# GROUP TICKET MODEL
# ==========================
class GroupTicket(Base):
    __tablename__ = "group_tickets"

    ticket_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    showtime_id = Column(Integer, nullable=False)
    seat_number = Column(String(500), nullable=False)  # member seat numbers joined by a single space
    price = Column(Float, nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
