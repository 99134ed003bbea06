"""Package and compiled package repositories."""

from collections.abc import Iterable

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from pkgmatch.db.models.package import CompiledPackageRow, PackageRow
from pkgmatch.db.models.release import ReleaseRow
from pkgmatch.models.target_image import TargetImage
from pkgmatch.repositories.base import BaseRepository


class PackageRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, PackageRow)

    async def list_with_artifact_by_fingerprints(
        self, release_name: str, fingerprints: Iterable[str]
    ) -> list[PackageRow]:
        """List packages of a release whose source artifact is stored.

        Rows are returned in creation order. Packages whose ``artifact_id``
        is NULL are excluded.
        """
        wanted = list(fingerprints)
        if not wanted:
            return []
        stmt = (
            select(PackageRow)
            .join(ReleaseRow, ReleaseRow.id == PackageRow.release_id)
            .where(
                and_(
                    ReleaseRow.name == release_name,
                    PackageRow.fingerprint.in_(wanted),
                    PackageRow.artifact_id.is_not(None),
                )
            )
            .order_by(PackageRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_exact(
        self, release_name: str, name: str, version: str, fingerprint: str
    ) -> list[PackageRow]:
        """All packages of a release with this name, version, and fingerprint."""
        stmt = (
            select(PackageRow)
            .join(ReleaseRow, ReleaseRow.id == PackageRow.release_id)
            .where(
                and_(
                    ReleaseRow.name == release_name,
                    PackageRow.name == name,
                    PackageRow.version == version,
                    PackageRow.fingerprint == fingerprint,
                )
            )
            .order_by(PackageRow.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class CompiledPackageRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, CompiledPackageRow)

    async def list_by_package(self, package_id: int) -> list[CompiledPackageRow]:
        return await self.list_by_field("package_id", package_id)

    async def record(
        self,
        package: PackageRow,
        target_image: TargetImage,
        dependency_key: str,
        artifact_id: str,
        sha1: str | None = None,
    ) -> CompiledPackageRow:
        """Store a compiled artifact for ``package``.

        ``dependency_key`` must come from ``serialize_dependency_key`` and is
        stored verbatim.
        """
        return await self.create(
            package_id=package.id,
            artifact_id=artifact_id,
            sha1=sha1,
            image_os=target_image.os,
            image_version=target_image.version,
            dependency_key=dependency_key,
        )
