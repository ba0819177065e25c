from typing import List

from sqlalchemy.orm import Session

from bioskop.core.exceptions import NotFoundError
from bioskop.database import models, schemas

# --------- Movie Management ---------

def list_movies(db: Session) -> List[models.Movie]:
    return db.query(models.Movie).order_by(models.Movie.movie_id).all()


def get_movie(db: Session, movie_id: int) -> models.Movie:
    movie = db.query(models.Movie).filter(models.Movie.movie_id == movie_id).first()
    if not movie:
        raise NotFoundError("Movie not found")
    return movie


def create_movie(db: Session, data: schemas.MovieCreate) -> models.Movie:
    values = data.model_dump()
    # URLs are stored as plain strings
    values["poster_link"] = str(data.poster_link)
    values["trailer_link"] = str(data.trailer_link) if data.trailer_link else None

    new_movie = models.Movie(**values)
    db.add(new_movie)
    db.commit()
    db.refresh(new_movie)
    return new_movie


def update_movie_status(db: Session, movie_id: int, status: str) -> models.Movie:
    movie = get_movie(db, movie_id)
    movie.status = status
    db.commit()
    db.refresh(movie)
    return movie


def delete_movie(db: Session, movie_id: int) -> None:
    movie = get_movie(db, movie_id)
    db.delete(movie)
    db.commit()

# --------- Theater Management ---------

def list_theaters(db: Session) -> List[models.Theater]:
    return db.query(models.Theater).order_by(models.Theater.theater_id).all()


def create_theater(db: Session, data: schemas.TheaterCreate) -> models.Theater:
    theater = models.Theater(**data.model_dump())
    db.add(theater)
    db.commit()
    db.refresh(theater)
    return theater


def delete_theater(db: Session, theater_id: int) -> None:
    theater = db.query(models.Theater).filter(models.Theater.theater_id == theater_id).first()
    if not theater:
        raise NotFoundError("Theater not found")
    db.delete(theater)
    db.commit()

# --------- Showtime Management ---------

def list_showtimes(db: Session, theater_id: int, movie_id: int) -> List[models.Showtime]:
    return (
        db.query(models.Showtime)
        .filter(models.Showtime.theater_id == theater_id, models.Showtime.movie_id == movie_id)
        .order_by(models.Showtime.showtime)
        .all()
    )


def get_showtime(db: Session, showtime_id: int) -> models.Showtime:
    showtime = db.query(models.Showtime).filter(models.Showtime.showtime_id == showtime_id).first()
    if not showtime:
        raise NotFoundError("Showtime not found")
    return showtime


def create_showtime(db: Session, data: schemas.ShowtimeCreate) -> models.Showtime:
    get_movie(db, data.movie_id)
    if not db.query(models.Theater).filter(models.Theater.theater_id == data.theater_id).first():
        raise NotFoundError("Theater not found")

    showtime = models.Showtime(**data.model_dump())
    db.add(showtime)
    db.commit()
    db.refresh(showtime)
    return showtime


def delete_showtime(db: Session, showtime_id: int) -> None:
    showtime = get_showtime(db, showtime_id)
    db.delete(showtime)
    db.commit()
