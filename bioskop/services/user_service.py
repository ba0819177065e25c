import logging
from datetime import datetime, timedelta
from typing import Tuple

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bioskop.auth import create_access_token, create_refresh_token, decode_refresh_token, token_claims
from bioskop.core.config import settings
from bioskop.core.exceptions import ConflictError, NotFoundError, TokenError
from bioskop.database import models, schemas
from bioskop.utils import hash_password

logger = logging.getLogger(__name__)


def register_user(db: Session, data: schemas.RegisterRequest) -> models.User:
    existing = db.query(models.User).filter(models.User.email == data.email).first()
    if existing:
        raise ConflictError("Email already registered")

    new_user = models.User(
        full_name=data.full_name,
        email=data.email,
        password_hash=hash_password(data.password),
        phone_number=data.phone_number,
        address=data.address,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")
    db.refresh(new_user)
    return new_user


def issue_tokens(db: Session, user: models.User) -> Tuple[str, str]:
    """Create an access/refresh pair. Any earlier refresh token of the user is revoked."""
    claims = token_claims(user)
    access_token = create_access_token(claims)
    refresh_token = create_refresh_token(claims)

    db.query(models.RefreshToken).filter(models.RefreshToken.user_id == user.user_id).delete(
        synchronize_session=False
    )
    db.add(
        models.RefreshToken(
            user_id=user.user_id,
            token=refresh_token,
            expires_at=datetime.utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
    )
    db.commit()
    return access_token, refresh_token


def refresh_access_token(db: Session, token: str) -> str:
    record = db.query(models.RefreshToken).filter(models.RefreshToken.token == token).first()
    if not record:
        raise TokenError("Invalid refresh token")

    if record.expires_at < datetime.utcnow():
        user_id = record.user_id
        db.delete(record)
        db.commit()
        logger.info("Expired refresh token removed for user_id=%s", user_id)
        raise TokenError("Refresh token expired")

    try:
        claims = decode_refresh_token(token)
    except HTTPException:
        raise TokenError("Invalid refresh token")

    return create_access_token({"id": claims.get("id"), "email": claims.get("email"), "phone": claims.get("phone")})


def revoke_refresh_token(db: Session, token: str) -> None:
    record = db.query(models.RefreshToken).filter(models.RefreshToken.token == token).first()
    if not record:
        raise NotFoundError("Refresh token not found")
    user_id = record.user_id
    db.delete(record)
    db.commit()
    logger.info("Refresh token revoked for user_id=%s", user_id)
