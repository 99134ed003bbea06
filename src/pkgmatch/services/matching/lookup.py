"""Read-only record lookups consumed by the matchers."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from pkgmatch.db.engine import RECORD_STORE_ERRORS
from pkgmatch.db.models.package import CompiledPackageRow, PackageRow
from pkgmatch.errors.exceptions import RecordStoreError
from pkgmatch.models.target_image import TargetImage
from pkgmatch.repositories.package_repo import CompiledPackageRepository, PackageRepository
from pkgmatch.repositories.release_repo import ReleaseVersionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseVersionRecord:
    release_name: str
    version: str
    finalized: bool


@dataclass(frozen=True)
class PackageRecord:
    id: int
    release_name: str
    name: str
    version: str
    fingerprint: str | None
    artifact_id: str | None


@dataclass(frozen=True)
class CompiledPackageRecord:
    id: int
    package_id: int
    artifact_id: str
    target_image: TargetImage
    dependency_key: str


class PackageLookup(Protocol):
    """Narrow read-only view of the record store."""

    async def get_release_version(
        self, release_name: str, version: str
    ) -> ReleaseVersionRecord | None: ...

    async def packages_with_artifact(
        self, release_name: str, fingerprints: Iterable[str]
    ) -> list[PackageRecord]: ...

    async def find_packages(
        self, release_name: str, name: str, version: str, fingerprint: str
    ) -> list[PackageRecord]: ...

    async def compiled_packages_for(self, package_id: int) -> list[CompiledPackageRecord]: ...


def _package_record(row: PackageRow, release_name: str) -> PackageRecord:
    return PackageRecord(
        id=row.id,
        release_name=release_name,
        name=row.name,
        version=row.version,
        fingerprint=row.fingerprint,
        artifact_id=row.artifact_id,
    )


def _compiled_record(row: CompiledPackageRow) -> CompiledPackageRecord:
    return CompiledPackageRecord(
        id=row.id,
        package_id=row.package_id,
        artifact_id=row.artifact_id,
        target_image=TargetImage(os=row.image_os, version=row.image_version),
        dependency_key=row.dependency_key,
    )


def _store_error(message: str, exc: Exception) -> RecordStoreError:
    # Driver messages carry SQL text and parameters; keep them in the log only
    logger.warning("%s: %s", message, exc)
    return RecordStoreError(message)


class RepositoryPackageLookup:
    """PackageLookup backed by the SQLAlchemy repositories.

    Every query runs on the given session, so callers get a consistent view
    by handing in a snapshot session. Store failures surface as
    ``RecordStoreError``; nothing is retried here.
    """

    def __init__(self, session: AsyncSession):
        self._versions = ReleaseVersionRepository(session)
        self._packages = PackageRepository(session)
        self._compiled = CompiledPackageRepository(session)

    async def get_release_version(
        self, release_name: str, version: str
    ) -> ReleaseVersionRecord | None:
        try:
            row = await self._versions.get_for_release(release_name, version)
        except RECORD_STORE_ERRORS as exc:
            raise _store_error("Release version lookup failed", exc) from exc
        if row is None:
            return None
        return ReleaseVersionRecord(
            release_name=release_name, version=row.version, finalized=row.finalized
        )

    async def packages_with_artifact(
        self, release_name: str, fingerprints: Iterable[str]
    ) -> list[PackageRecord]:
        try:
            rows = await self._packages.list_with_artifact_by_fingerprints(
                release_name, fingerprints
            )
        except RECORD_STORE_ERRORS as exc:
            raise _store_error("Package lookup failed", exc) from exc
        return [_package_record(row, release_name) for row in rows]

    async def find_packages(
        self, release_name: str, name: str, version: str, fingerprint: str
    ) -> list[PackageRecord]:
        try:
            rows = await self._packages.find_exact(release_name, name, version, fingerprint)
        except RECORD_STORE_ERRORS as exc:
            raise _store_error("Package lookup failed", exc) from exc
        return [_package_record(row, release_name) for row in rows]

    async def compiled_packages_for(self, package_id: int) -> list[CompiledPackageRecord]:
        try:
            rows = await self._compiled.list_by_package(package_id)
        except RECORD_STORE_ERRORS as exc:
            raise _store_error("Compiled package lookup failed", exc) from exc
        return [_compiled_record(row) for row in rows]
