"""Seed the database with example movies, theaters and showtimes.

Run from the project root:
python scripts/seed_catalog.py
"""
from datetime import date, datetime, timedelta

from bioskop.database.database import SessionLocal, Base, engine
from bioskop.database import models, payment_models  # noqa: F401


def seed():
    # ensure tables exist
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = db.query(models.Movie).count()
        if existing:
            print(f"DB already has {existing} movie(s); skipping seeding.")
            return

        movies = [
            models.Movie(movie_name="Agak Laen", age_rating="R13", duration=119, dimension="2D",
                         language="Indonesia", release_date=date(2024, 2, 1),
                         poster_link="https://example.com/posters/agak-laen.jpg", status="Tayang"),
            models.Movie(movie_name="Dune: Part Two", age_rating="R13", duration=166, dimension="IMAX",
                         language="English", release_date=date(2024, 2, 28),
                         poster_link="https://example.com/posters/dune-2.jpg", status="Tayang"),
            models.Movie(movie_name="Jumbo", age_rating="SU", duration=102, dimension="3D",
                         language="Indonesia", release_date=date(2025, 3, 31),
                         poster_link="https://example.com/posters/jumbo.jpg", status="Upcoming"),
        ]
        theaters = [
            models.Theater(theater_name="Studio 1", location="Grand Indonesia, Jakarta", total_seats=120),
            models.Theater(theater_name="Studio IMAX", location="Paris Van Java, Bandung", total_seats=250),
        ]
        db.add_all(movies + theaters)
        db.flush()

        start = datetime.now().replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
        for offset, (movie, theater) in enumerate([(movies[0], theaters[0]), (movies[1], theaters[1])]):
            db.add(models.Showtime(movie_id=movie.movie_id, theater_id=theater.theater_id,
                                   showtime=start + timedelta(hours=3 * offset),
                                   available_seats=theater.total_seats))
        db.commit()
        print("Seeded catalog successfully.")
    finally:
        db.close()


if __name__ == '__main__':
    seed()
