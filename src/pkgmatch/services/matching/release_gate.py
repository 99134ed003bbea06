"""Release version gate shared by both matchers."""

import logging

from pkgmatch.services.matching.lookup import PackageLookup

logger = logging.getLogger(__name__)


async def is_finalized(lookup: PackageLookup, release_name: str, version: str) -> bool:
    """Whether the last upload of ``release_name/version`` completed cleanly.

    Unknown releases and versions count as not finalized.
    """
    release_version = await lookup.get_release_version(release_name, version)
    if release_version is None:
        logger.debug("release version %s/%s not found", release_name, version)
        return False
    if not release_version.finalized:
        logger.debug("release version %s/%s is not finalized", release_name, version)
        return False
    return True
