"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from pkgmatch.db.engine import snapshot_session
from pkgmatch.services.matching.lookup import PackageLookup, RepositoryPackageLookup


async def get_snapshot_db(request: Request) -> AsyncGenerator:
    """Yield a read-only session pinned to one transaction."""
    async with snapshot_session(request.app.state.db_session_factory) as session:
        yield session


async def get_package_lookup(
    session: AsyncSession = Depends(get_snapshot_db),
) -> PackageLookup:
    """Return the record lookup used by the matchers for this request."""
    return RepositoryPackageLookup(session)


# Type aliases for dependency injection
Lookup = Annotated[PackageLookup, Depends(get_package_lookup)]
