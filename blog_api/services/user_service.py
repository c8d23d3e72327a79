"""
User service: registration and login for the User aggregate.

Login failures are deliberately uniform: an unknown email and a wrong
password both raise the same ``InvalidCredentials`` so the response does
not reveal which accounts exist.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blog_api.database import is_storable_id
from blog_api.exceptions import Conflict, InvalidCredentials
from blog_api.models import User
from blog_api.schemas import LoginRequest, RegisterRequest
from blog_api.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_email(email: str) -> str:
    return email.strip().lower()


def user_to_public(user: User | None) -> dict | None:
    """Public projection of a user; the password hash never leaves here."""
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "email": user.email}


def _auth_result(user: User) -> dict:
    return {"token": create_access_token(user.id), "user": user_to_public(user)}


async def get_user(db: AsyncSession, user_id: int) -> User | None:
    if not is_storable_id(user_id):
        return None
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def register(db: AsyncSession, data: RegisterRequest) -> dict:
    """
    Create an account and return ``{token, user}``.

    Raises ``Conflict`` when the normalised email is already taken,
    including the case where a concurrent registration wins the race and
    the unique constraint fires at flush time.
    """
    email = normalize_email(data.email)
    if await get_user_by_email(db, email) is not None:
        raise Conflict("Email already registered")

    user = User(
        name=data.name,
        email=email,
        password_hash=await hash_password(data.password),
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise Conflict("Email already registered") from exc

    logger.info("Registered user id=%s", user.id)
    return _auth_result(user)


async def login(db: AsyncSession, data: LoginRequest) -> dict:
    """Verify credentials and return ``{token, user}``."""
    user = await get_user_by_email(db, data.email)
    if user is None:
        logger.info("Login failed: unknown email")
        raise InvalidCredentials()

    if not await verify_password(data.password, user.password_hash):
        logger.info("Login failed: bad password for user id=%s", user.id)
        raise InvalidCredentials()

    logger.info("User id=%s logged in", user.id)
    return _auth_result(user)
