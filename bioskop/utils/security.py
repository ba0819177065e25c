import logging
import secrets
import string

import bcrypt

from bioskop.core.config import BCRYPT_ROUNDS

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX_LENGTH = 15


# ---------------- Password Hashing ----------------
def _normalize_password(password: str | bytes) -> bytes:
    if isinstance(password, str):
        password_bytes = password.encode("utf-8")
    elif isinstance(password, bytes):
        password_bytes = password
    else:
        raise TypeError("Password must be str or bytes")

    if len(password_bytes) > 72:
        logger.debug("Truncating password to 72 bytes for bcrypt compatibility")
        password_bytes = password_bytes[:72]
    return password_bytes


def hash_password(password: str | bytes) -> str:
    """Hash a password using bcrypt."""
    secret = _normalize_password(password)
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(secret, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str | bytes, hashed_password: str | bytes) -> bool:
    """Verify the provided password against the stored bcrypt hash."""
    if not hashed_password:
        return False

    secret = _normalize_password(plain_password)
    hashed = hashed_password.encode("utf-8") if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(secret, hashed)
    except ValueError:
        # Occurs if hashed value is not a valid bcrypt hash
        logger.exception("Failed to verify bcrypt hash due to invalid stored value")
        return False


# ---------------- Order ids ----------------
def generate_random_string(length: int) -> str:
    return "".join(secrets.choice(string.ascii_letters) for _ in range(length))


def generate_order_id(ticket_id: int | str) -> str:
    """Gateway order id: random letters followed by the ticket id."""
    return f"{generate_random_string(ORDER_ID_PREFIX_LENGTH)}{ticket_id}"
