"""Password hashing (bcrypt) and access-token issuing (PyJWT)."""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from articlehub.config import settings
from articlehub.exceptions import UnauthorizedError


def hash_password(raw_password: str) -> str:
    """Hash a raw password using bcrypt and return the utf-8 string."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw_password.encode(), salt).decode()


def verify_password(raw_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    return bcrypt.checkpw(raw_password.encode(), password_hash.encode("utf-8"))


def create_access_token(user_id: int, email: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.JWT_EXPIRES_IN_MINUTES)).timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate a token, raising ``UnauthorizedError`` on any failure."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc
