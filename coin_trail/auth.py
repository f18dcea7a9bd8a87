from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
from typing import Optional, Tuple

from coin_trail.database import get_user_by_username

logger = logging.getLogger(__name__)

HASH_SCHEME = "pbkdf2_sha256"
HASH_ITERATIONS = 260_000


def hash_password(password: str, salt: str | None = None, iterations: int = HASH_ITERATIONS) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    encoded = base64.urlsafe_b64encode(digest).decode("utf-8")
    return f"{HASH_SCHEME}${iterations}${salt}${encoded}"


def verify_password(password: str, stored: str) -> bool:
    try:
        scheme, iterations, salt, _ = stored.split("$", 3)
    except ValueError:
        return False
    if scheme != HASH_SCHEME:
        return False
    expected = hash_password(password, salt=salt, iterations=int(iterations))
    return hmac.compare_digest(expected, stored)


def _extract_basic_credentials(header_value: str | None) -> Optional[Tuple[str, str]]:
    if not header_value or not header_value.startswith("Basic "):
        return None
    token = header_value[6:].strip()
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None
    if ":" not in decoded:
        return None
    username, password = decoded.split(":", 1)
    return username, password


def get_current_user_id(db_path: str, header_value: str | None) -> Optional[int]:
    """Resolve the signed-in user from an ``Authorization`` header, or None."""
    credentials = _extract_basic_credentials(header_value)
    if credentials is None:
        return None
    username, password = credentials
    user = get_user_by_username(db_path, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Rejected credentials for %r", username)
        return None
    return user.id
