"""Async SQLAlchemy engine, session creation, and read snapshots."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pkgmatch.config import settings
from pkgmatch.errors.exceptions import RecordStoreError

logger = logging.getLogger(__name__)

# Drivers such as asyncpg raise plain OSError when the server is unreachable
RECORD_STORE_ERRORS = (SQLAlchemyError, OSError)


def create_db_engine(url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine."""
    db_url = url or settings.effective_database_url
    engine_kwargs: dict = {"echo": False}

    # SQLite does not support pool_size / max_overflow
    if "sqlite" not in db_url:
        engine_kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )
    return create_async_engine(db_url, **engine_kwargs)


def create_session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def snapshot_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Yield a read-only session whose queries all run in one transaction.

    On backends other than SQLite the connection is opened with
    ``settings.snapshot_isolation_level`` so a concurrent finalize or upload
    cannot be observed half-applied. The transaction is always rolled back.

    Raises:
        RecordStoreError: The connection could not be opened, or the closing
            rollback failed after an otherwise successful request.
    """
    async with session_factory() as session:
        bind = session.bind
        if bind is not None and bind.dialect.name != "sqlite":
            try:
                await session.connection(
                    execution_options={"isolation_level": settings.snapshot_isolation_level}
                )
            except RECORD_STORE_ERRORS as exc:
                logger.warning("record store unavailable: %s", exc)
                raise RecordStoreError("Record store unavailable") from exc
        try:
            yield session
        except BaseException:
            # Keep the request's own error; a failed rollback is only logged
            try:
                await session.rollback()
            except RECORD_STORE_ERRORS as rollback_exc:
                logger.warning("snapshot rollback failed: %s", rollback_exc)
            raise
        try:
            await session.rollback()
        except RECORD_STORE_ERRORS as exc:
            logger.warning("snapshot rollback failed: %s", exc)
            raise RecordStoreError("Record store unavailable") from exc
