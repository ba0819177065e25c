from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from bioskop.database.database import get_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/db")
def db_health(db: Session = Depends(get_db)):
    """
    Lightweight health check for the database connection.
    """
    try:
        db.execute(text("SELECT 1")).scalar()
        return {"ok": True}
    except Exception as e:
        raise HTTPException(status_code=503, detail="Database unavailable") from e
