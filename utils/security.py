"""Password hashing and credential token helpers."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

JWT_ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class TokenIssueError(RuntimeError):
    """Raised when a credential token cannot be signed."""


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed_password.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def create_access_token(user_id: int, secret: str | None, expires_days: int = 1) -> str:
    """
    Sign a credential token for `user_id`.

    The payload mirrors what clients expect: the user id plus issue and
    expiry times. A missing secret only surfaces here, on first use.
    """
    if not secret:
        raise TokenIssueError("JWT_SECRET is not configured")

    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": now,
        "exp": now + timedelta(days=expires_days),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)
