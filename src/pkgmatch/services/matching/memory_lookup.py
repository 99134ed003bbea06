"""In-memory PackageLookup for tests and local tooling."""

from collections.abc import Iterable

from pkgmatch.models.target_image import TargetImage
from pkgmatch.services.matching.lookup import (
    CompiledPackageRecord,
    PackageRecord,
    ReleaseVersionRecord,
)


class InMemoryPackageLookup:
    """Holds records in lists; list order is record creation order."""

    def __init__(self) -> None:
        self.release_versions: list[ReleaseVersionRecord] = []
        self.packages: list[PackageRecord] = []
        self.compiled_packages: list[CompiledPackageRecord] = []

    def add_release_version(
        self, release_name: str, version: str, finalized: bool = True
    ) -> ReleaseVersionRecord:
        record = ReleaseVersionRecord(release_name, version, finalized)
        self.release_versions = [
            rv for rv in self.release_versions
            if (rv.release_name, rv.version) != (release_name, version)
        ]
        self.release_versions.append(record)
        return record

    def add_package(
        self,
        release_name: str,
        name: str,
        version: str,
        fingerprint: str | None,
        artifact_id: str | None = None,
    ) -> PackageRecord:
        record = PackageRecord(
            id=len(self.packages) + 1,
            release_name=release_name,
            name=name,
            version=version,
            fingerprint=fingerprint,
            artifact_id=artifact_id,
        )
        self.packages.append(record)
        return record

    def add_compiled_package(
        self,
        package: PackageRecord,
        target_image: TargetImage,
        dependency_key: str,
        artifact_id: str = "compiled-artifact",
    ) -> CompiledPackageRecord:
        record = CompiledPackageRecord(
            id=len(self.compiled_packages) + 1,
            package_id=package.id,
            artifact_id=artifact_id,
            target_image=target_image,
            dependency_key=dependency_key,
        )
        self.compiled_packages.append(record)
        return record

    async def get_release_version(
        self, release_name: str, version: str
    ) -> ReleaseVersionRecord | None:
        for record in self.release_versions:
            if record.release_name == release_name and record.version == version:
                return record
        return None

    async def packages_with_artifact(
        self, release_name: str, fingerprints: Iterable[str]
    ) -> list[PackageRecord]:
        wanted = set(fingerprints)
        return [
            p for p in self.packages
            if p.release_name == release_name
            and p.fingerprint in wanted
            and p.artifact_id is not None
        ]

    async def find_packages(
        self, release_name: str, name: str, version: str, fingerprint: str
    ) -> list[PackageRecord]:
        return [
            p for p in self.packages
            if (p.release_name, p.name, p.version, p.fingerprint)
            == (release_name, name, version, fingerprint)
        ]

    async def compiled_packages_for(self, package_id: int) -> list[CompiledPackageRecord]:
        return [c for c in self.compiled_packages if c.package_id == package_id]
