"""
Application configuration and settings
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# JWT Configuration
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "access-secret-change-me")
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "refresh-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

# Admin endpoints are guarded by a static key sent as x-api-key
ADMIN_APIKEY = os.getenv("ADMIN_APIKEY", "")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

# Midtrans Configuration
MIDTRANS_SERVER_KEY = os.getenv("MIDTRANS_SERVER_KEY", "")
MIDTRANS_IS_PRODUCTION = _env_bool("MIDTRANS_IS_PRODUCTION", False)
MIDTRANS_BASE_URL = os.getenv("MIDTRANS_BASE_URL") or (
    "https://api.midtrans.com" if MIDTRANS_IS_PRODUCTION else "https://api.sandbox.midtrans.com"
)
MIDTRANS_TIMEOUT_SECONDS = float(os.getenv("MIDTRANS_TIMEOUT_SECONDS", "30"))

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]


class Settings:
    PROJECT_NAME: str = "Bioskop API"
    VERSION: str = "1.0.0"
    LOG_LEVEL = LOG_LEVEL
    ACCESS_TOKEN_SECRET = ACCESS_TOKEN_SECRET
    REFRESH_TOKEN_SECRET = REFRESH_TOKEN_SECRET
    JWT_ALGORITHM = JWT_ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES = ACCESS_TOKEN_EXPIRE_MINUTES
    REFRESH_TOKEN_EXPIRE_DAYS = REFRESH_TOKEN_EXPIRE_DAYS
    ADMIN_APIKEY = ADMIN_APIKEY
    BCRYPT_ROUNDS = BCRYPT_ROUNDS
    MIDTRANS_SERVER_KEY = MIDTRANS_SERVER_KEY
    MIDTRANS_IS_PRODUCTION = MIDTRANS_IS_PRODUCTION
    MIDTRANS_BASE_URL = MIDTRANS_BASE_URL
    MIDTRANS_TIMEOUT_SECONDS = MIDTRANS_TIMEOUT_SECONDS
    CORS_ORIGINS = CORS_ORIGINS

settings = Settings()
