# bioskop/auth.py

import hmac
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from bioskop.core.config import settings
from bioskop.database import models
from bioskop.utils import verify_password

logger = logging.getLogger(__name__)

# =====================================
# JWT Helpers
# =====================================
# auto_error is off so a missing header maps to 401 and a bad token to 403
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/users/login", auto_error=False)


def token_claims(user: models.User) -> Dict[str, Any]:
    """Claims carried by both access and refresh tokens."""
    return {"id": user.user_id, "email": user.email, "phone": user.phone_number}


def create_access_token(data: dict) -> str:
    """Create a short-lived JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(data: dict) -> str:
    """Create a refresh token. Its expiry is tracked by the refresh_tokens row, not a claim."""
    to_encode = data.copy()
    to_encode.update({"jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.REFRESH_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify an access token."""
    try:
        return jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Token verification error: %s", e)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")


def decode_refresh_token(token: str) -> dict:
    """Decode and verify a refresh token."""
    try:
        return jwt.decode(token, settings.REFRESH_TOKEN_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning("Refresh token verification error: %s", e)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid refresh token")


# =====================================
# Current User Fetcher
# =====================================
def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """Return the decoded claims of the bearer token."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = decode_access_token(token)
    if claims.get("id") is None:
        logger.warning("Token without user id claim rejected")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token")
    return claims


# =====================================
# Admin API key
# =====================================
def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Dependency guarding admin endpoints with the static x-api-key header."""
    expected = settings.ADMIN_APIKEY
    if not x_api_key or not expected or not hmac.compare_digest(x_api_key, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden: Invalid API Key")


# =====================================
# Local credential strategy
# =====================================
def authenticate_user(db: Session, email: str, password: str) -> Optional[models.User]:
    """Look up a user by email and check the password. Returns None on any mismatch."""
    user = db.query(models.User).filter(models.User.email == email).first()
    if not user:
        logger.warning("Authentication failed: user not found for %s", email)
        return None

    if not verify_password(password, str(user.password_hash)):
        logger.warning("Authentication failed: invalid password for %s", email)
        return None

    return user
