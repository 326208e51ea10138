"""
Async SQLAlchemy engine and the marketplace's session factory.

Each marketplace operation opens exactly one session from
``async_session_factory`` and commits or rolls it back as a whole.
``expire_on_commit`` is off because snapshots are built from rows after the
commit.  Pool sizing comes from settings; connections are pinged on checkout
so a database restart does not surface as a failed operation.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ridemarket.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for the marketplace tables."""
