"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pkgmatch.db.base import Base
# Import all models to register with Base.metadata
import pkgmatch.db.models  # noqa: F401
from pkgmatch.services.matching.memory_lookup import InMemoryPackageLookup

from seed_data import RELEASE


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def app(db_engine):
    """Create a test application instance with in-memory DB."""
    from pkgmatch.main import create_app

    _app = create_app()
    _app.state.db_engine = db_engine
    _app.state.db_session_factory = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def lookup() -> InMemoryPackageLookup:
    """In-memory record store with a finalized fake-release-name v1."""
    store = InMemoryPackageLookup()
    store.add_release_version(RELEASE, "1", finalized=True)
    return store
