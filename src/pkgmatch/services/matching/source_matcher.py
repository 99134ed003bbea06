"""Matching of source packages against stored source artifacts."""

import logging
from collections.abc import Iterable

from pkgmatch.services.matching.lookup import PackageLookup
from pkgmatch.services.matching.release_gate import is_finalized

logger = logging.getLogger(__name__)


async def match_source_packages(
    lookup: PackageLookup,
    release_name: str,
    version: str,
    fingerprints: Iterable[str | None],
) -> list[str]:
    """Return the fingerprints whose source artifact is already stored.

    Null fingerprints are ignored. A package record without an artifact does
    not count as a match. Results follow the creation order of the matching
    package records and contain each fingerprint once.
    """
    if not await is_finalized(lookup, release_name, version):
        return []

    wanted = list(dict.fromkeys(fp for fp in fingerprints if fp is not None))
    if not wanted:
        return []

    packages = await lookup.packages_with_artifact(release_name, wanted)
    matched = list(dict.fromkeys(package.fingerprint for package in packages))

    logger.debug(
        "source match for %s/%s: %d of %d fingerprints",
        release_name, version, len(matched), len(wanted),
    )
    return matched
