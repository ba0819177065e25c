import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Load environment variables
load_dotenv()


def _build_database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    if os.getenv("DB_HOST"):
        driver = os.getenv("DB_DRIVER", "mssql+pyodbc")
        return (
            f"{driver}://{os.getenv('DB_USER')}:{os.getenv('DB_PASSWORD')}@"
            f"{os.getenv('DB_HOST')}:{os.getenv('DB_PORT', '1433')}/{os.getenv('DB_NAME', 'bioskop')}"
        )
    return "sqlite:///./bioskop.db"


SQLALCHEMY_DATABASE_URL = _build_database_url()

# SQLite connections are used across the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base model for all ORM classes
Base = declarative_base()


# Dependency for FastAPI routes
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
