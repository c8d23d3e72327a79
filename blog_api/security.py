"""
Token issuing/verification (PyJWT) and password hashing (passlib bcrypt).

Both are treated as black boxes by the rest of the application: services
only ever call ``create_access_token``, ``decode_access_token``,
``hash_password`` and ``verify_password``.
"""
from datetime import datetime, timezone

import jwt
from passlib.hash import bcrypt
from starlette.concurrency import run_in_threadpool

from blog_api.config import settings


class TokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def create_access_token(user_id: int) -> str:
    """Sign a token carrying *user_id* that expires after ``JWT_EXPIRES_IN``."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": now,
        "exp": now + settings.token_lifetime,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify *token* and return the user id it was issued for.

    Any failure (bad signature, malformed, expired, missing id claim) is
    reported as ``TokenError``.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id"]},
        )
    except jwt.PyJWTError as exc:
        raise TokenError(str(exc)) from exc

    user_id = payload["id"]
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise TokenError("Token id claim is not a user id")
    return user_id


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def _hash_sync(password: str) -> str:
    return bcrypt.using(rounds=settings.BCRYPT_ROUNDS).hash(password)


def _verify_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.verify(password, password_hash)
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


async def hash_password(password: str) -> str:
    """Salted bcrypt hash, computed off the event loop."""
    return await run_in_threadpool(_hash_sync, password)


async def verify_password(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(_verify_sync, password, password_hash)
