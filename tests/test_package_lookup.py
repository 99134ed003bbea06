"""Tests for the repository-backed lookup against SQLite."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pkgmatch.db.base import Base
from pkgmatch.db.engine import snapshot_session
from pkgmatch.db.models.release import ReleaseRow
from pkgmatch.errors.exceptions import RecordStoreError
from pkgmatch.repositories.release_repo import ReleaseVersionRepository
from pkgmatch.services.matching.lookup import RepositoryPackageLookup

from seed_data import (
    PKG1_KEY,
    RELEASE,
    TRUSTY,
    StubPostgresSession,
    seed_compiled_release,
    seed_package,
    seed_release,
    stub_session_factory,
)


async def test_release_version_lookup(db_session):
    await seed_release(db_session, finalized=False)
    lookup = RepositoryPackageLookup(db_session)

    record = await lookup.get_release_version(RELEASE, "1")
    assert record is not None
    assert record.finalized is False
    assert await lookup.get_release_version(RELEASE, "2") is None
    assert await lookup.get_release_version("unknown", "1") is None


async def test_packages_with_artifact_skip_missing_artifacts(db_session):
    release = await seed_release(db_session)
    await seed_package(db_session, release, "fake-pkg3", "f3", artifact_id="blob-3")
    await seed_package(db_session, release, "fake-pkg2", "f2")
    await seed_package(db_session, release, "fake-pkg1", "f1", artifact_id="blob-1")
    lookup = RepositoryPackageLookup(db_session)

    packages = await lookup.packages_with_artifact(RELEASE, ["f1", "f2", "f3"])
    assert [p.fingerprint for p in packages] == ["f3", "f1"]
    assert await lookup.packages_with_artifact(RELEASE, []) == []


async def test_packages_are_scoped_by_release(db_session):
    other = await seed_release(db_session, name="other-release")
    await seed_package(db_session, other, "fake-pkg1", "f1", artifact_id="blob-1")
    await seed_release(db_session)
    lookup = RepositoryPackageLookup(db_session)

    assert await lookup.packages_with_artifact(RELEASE, ["f1"]) == []
    assert len(await lookup.packages_with_artifact("other-release", ["f1"])) == 1


async def test_compiled_packages_round_trip(db_session):
    await seed_compiled_release(db_session)
    lookup = RepositoryPackageLookup(db_session)

    [package] = await lookup.find_packages(
        RELEASE, "fake-pkg1", "fake-pkg1-version", "fake-pkg1-fingerprint"
    )
    [compiled] = await lookup.compiled_packages_for(package.id)
    assert compiled.target_image == TRUSTY
    assert compiled.dependency_key == PKG1_KEY
    assert compiled.artifact_id == "cpkg1_blobstore_id"
    assert await lookup.find_packages(RELEASE, "fake-pkg1", "other", "fake-pkg1-fingerprint") == []


async def test_store_failure_raises_record_store_error(db_engine, db_session):
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    lookup = RepositoryPackageLookup(db_session)

    with pytest.raises(RecordStoreError) as exc_info:
        await lookup.get_release_version(RELEASE, "1")
    assert exc_info.value.status_code == 503
    assert exc_info.value.details is None
    assert "SELECT" not in exc_info.value.message
    assert "no such table" not in exc_info.value.message


@pytest.mark.parametrize(
    "error",
    [
        OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused")),
        ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 5432)"),
    ],
)
async def test_snapshot_session_unreachable_store(error):
    session = StubPostgresSession(connect_error=error)

    with pytest.raises(RecordStoreError) as exc_info:
        async with snapshot_session(stub_session_factory(session)):
            pytest.fail("session should not be handed out")
    assert exc_info.value.status_code == 503
    assert exc_info.value.__cause__ is error


async def test_snapshot_session_rollback_failure_after_clean_body():
    session = StubPostgresSession(rollback_error=ConnectionResetError("connection lost"))

    with pytest.raises(RecordStoreError):
        async with snapshot_session(stub_session_factory(session)):
            pass
    assert session.rollbacks == 1


async def test_snapshot_session_rollback_failure_keeps_request_error():
    session = StubPostgresSession(
        rollback_error=OperationalError("ROLLBACK", {}, ConnectionResetError("connection lost"))
    )

    with pytest.raises(ValueError, match="matcher failed"):
        async with snapshot_session(stub_session_factory(session)):
            raise ValueError("matcher failed")
    assert session.rollbacks == 1


async def test_snapshot_session_discards_writes(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with snapshot_session(factory) as session:
        session.add(ReleaseRow(name="scratch"))
        await session.flush()

    async with factory() as session:
        result = await session.execute(select(ReleaseRow).where(ReleaseRow.name == "scratch"))
        assert result.scalar_one_or_none() is None


async def test_reset_version_is_seen_as_not_finalized(db_session):
    release = await seed_release(db_session)
    versions = ReleaseVersionRepository(db_session)
    row = await versions.get_for_release(RELEASE, "1")
    await versions.update(row, finalized=False)
    lookup = RepositoryPackageLookup(db_session)

    record = await lookup.get_release_version(RELEASE, "1")
    assert record.finalized is False
    assert (await versions.get_by_id(row.id)).release_id == release.id
