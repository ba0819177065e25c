# bioskop/routers/user_routes.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bioskop.auth import authenticate_user, get_current_user
from bioskop.core.exceptions import ConflictError, NotFoundError, TokenError
from bioskop.database import models, schemas
from bioskop.database.database import get_db
from bioskop.services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


# -------------------- Login --------------------
@router.post("/login", response_model=schemas.LoginResponse)
def login(credentials: schemas.LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange email/password for an access token (1 hour) and a refresh token.
    Any refresh token issued to the user before is revoked.
    """
    logger.info("Login attempt: email=%s", credentials.email)
    try:
        user = authenticate_user(db, credentials.email, credentials.password)
        if not user:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

        access_token, refresh_token = user_service.issue_tokens(db, user)
        logger.info("Login successful for user: %s", user.email)
        return {"message": "Login successful", "accessToken": access_token, "refreshToken": refresh_token}
    except HTTPException:
        raise
    except Exception:
        db.rollback()
        logger.exception("Error storing refresh token for %s", credentials.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error storing refresh token")


# -------------------- Profile --------------------
@router.get("/profile", response_model=schemas.UserProfile)
def profile(current_user: Dict[str, Any] = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        user = db.query(models.User).filter(models.User.user_id == current_user["id"]).first()
    except Exception:
        logger.exception("Error fetching user profile")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching profile")

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


# -------------------- Register --------------------
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.MessageResponse)
def register(data: schemas.RegisterRequest, db: Session = Depends(get_db)):
    try:
        user = user_service.register_user(db, data)
        logger.info("User registered successfully: %s", user.email)
        return {"message": "User registered successfully"}
    except ConflictError as e:
        logger.warning("Attempt to register with existing email: %s", data.email)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error registering user %s", data.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error registering user")


# -------------------- Refresh --------------------
@router.post("/token", response_model=schemas.AccessTokenResponse)
def refresh_token(data: schemas.RefreshTokenRequest, db: Session = Depends(get_db)):
    try:
        return {"accessToken": user_service.refresh_access_token(db, data.token)}
    except TokenError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except Exception:
        logger.exception("Error validating refresh token")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error validating refresh token")


# -------------------- Logout --------------------
@router.post("/logout", response_model=schemas.MessageResponse)
def logout(data: schemas.RefreshTokenRequest, db: Session = Depends(get_db)):
    """Revoke a refresh token."""
    try:
        user_service.revoke_refresh_token(db, data.token)
        return {"message": "Logged out successfully"}
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception:
        db.rollback()
        logger.exception("Error deleting refresh token")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting refresh token")
