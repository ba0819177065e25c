"""
Utility to clean up expired refresh tokens.
Run this periodically (e.g., via cron job) so the refresh_tokens table does not grow indefinitely.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from bioskop.database.database import SessionLocal
from bioskop.database import models
import logging

logger = logging.getLogger(__name__)


def cleanup_expired_refresh_tokens(db: Optional[Session] = None) -> int:
    """
    Remove refresh tokens whose expiry has passed.

    Args:
        db: Database session (optional, will create one if not provided)

    Returns:
        Number of tokens removed
    """
    close_db = False
    if db is None:
        db = SessionLocal()
        close_db = True

    try:
        now = datetime.utcnow()
        count = (
            db.query(models.RefreshToken)
            .filter(models.RefreshToken.expires_at < now)
            .delete(synchronize_session=False)
        )
        db.commit()

        if count:
            logger.info("Cleaned up %d expired refresh tokens", count)
        else:
            logger.info("No expired refresh tokens to clean up")
        return count
    except Exception:
        logger.exception("Error cleaning up expired refresh tokens")
        db.rollback()
        raise
    finally:
        if close_db:
            db.close()


if __name__ == "__main__":
    # Example: python -m bioskop.utils.cleanup_tokens
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    logger.info("Starting refresh token cleanup...")
    removed = cleanup_expired_refresh_tokens()
    logger.info("Refresh token cleanup complete. Removed %d expired tokens.", removed)
