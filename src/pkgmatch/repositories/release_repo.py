"""Release and release version repositories."""

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pkgmatch.db.models.release import ReleaseRow, ReleaseVersionRow
from pkgmatch.repositories.base import BaseRepository


class ReleaseRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ReleaseRow)


class ReleaseVersionRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ReleaseVersionRow)

    async def get_for_release(self, release_name: str, version: str) -> ReleaseVersionRow | None:
        """Get the version row of a named release, or None if either is unknown."""
        stmt = (
            select(ReleaseVersionRow)
            .join(ReleaseRow, ReleaseRow.id == ReleaseVersionRow.release_id)
            .where(
                and_(
                    ReleaseRow.name == release_name,
                    ReleaseVersionRow.version == version,
                )
            )
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
