"""
Engine, session factory and declarative base for the blog store.

Every request gets one ``AsyncSession`` from ``get_db``; services only
flush, so the whole request commits or rolls back as a unit.
"""
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import settings
from blog_api.middleware import install_query_counter

# Primary keys are plain INTEGER columns (int4 on Postgres).
MAX_ROW_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """True when *value* could be the primary key of a stored row."""
    return 1 <= value <= MAX_ROW_ID


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)
install_query_counter(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    """Declarative base shared by users, posts and comments."""


async def get_db():
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
