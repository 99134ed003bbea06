"""Matching of compiled packages against stored compiled artifacts.

A compiled artifact is reusable only for the same package (name, version and
fingerprint), built against the same target image, with the same dependency
closure in the same order.
"""

import logging
from collections import defaultdict
from collections.abc import Sequence

from pkgmatch.models.manifest import CompiledPackageEntry
from pkgmatch.services.matching.dependency_key import serialize_dependency_key
from pkgmatch.services.matching.lookup import PackageLookup
from pkgmatch.services.matching.release_gate import is_finalized

logger = logging.getLogger(__name__)


def ambiguous_fingerprints(entries: Sequence[CompiledPackageEntry]) -> set[str]:
    """Fingerprints claimed by more than one distinct name in one request."""
    names_by_fingerprint: dict[str, set[str]] = defaultdict(set)
    for entry in entries:
        if entry.fingerprint is not None:
            names_by_fingerprint[entry.fingerprint].add(entry.name)
    return {fp for fp, names in names_by_fingerprint.items() if len(names) > 1}


async def match_compiled_packages(
    lookup: PackageLookup,
    release_name: str,
    version: str,
    entries: Sequence[CompiledPackageEntry],
) -> list[str]:
    """Return fingerprints of entries whose compiled artifact is already stored.

    Results keep manifest order without duplicates. A fingerprint shared by
    entries with different names is never reported, even for the entry whose
    name would resolve on its own; upload clients rely on this to re-send
    renamed packages.
    """
    if not await is_finalized(lookup, release_name, version):
        return []

    # Later entries win when a name repeats
    request_index = {entry.name: entry for entry in entries}
    ambiguous = ambiguous_fingerprints(entries)
    if ambiguous:
        logger.debug("suppressing ambiguous fingerprints: %s", sorted(ambiguous))

    matched: list[str] = []
    for entry in entries:
        fingerprint = entry.fingerprint
        if fingerprint is None or fingerprint in ambiguous or fingerprint in matched:
            continue
        if await _has_compiled_artifact(lookup, release_name, entry, request_index):
            matched.append(fingerprint)

    logger.debug(
        "compiled match for %s/%s: %d of %d entries",
        release_name, version, len(matched), len(entries),
    )
    return matched


async def _has_compiled_artifact(
    lookup: PackageLookup,
    release_name: str,
    entry: CompiledPackageEntry,
    request_index: dict[str, CompiledPackageEntry],
) -> bool:
    desired_key = serialize_dependency_key(entry, request_index)

    packages = await lookup.find_packages(
        release_name, entry.name, entry.version, entry.fingerprint
    )
    if len(packages) != 1:
        return False

    for compiled in await lookup.compiled_packages_for(packages[0].id):
        if compiled.target_image == entry.target_image and compiled.dependency_key == desired_key:
            return True
    return False
