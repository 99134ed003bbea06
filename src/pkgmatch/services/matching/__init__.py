"""Package provenance matching: which uploaded packages already exist."""

from pkgmatch.services.matching.compiled_matcher import match_compiled_packages
from pkgmatch.services.matching.dependency_key import serialize_dependency_key
from pkgmatch.services.matching.lookup import PackageLookup, RepositoryPackageLookup
from pkgmatch.services.matching.release_gate import is_finalized
from pkgmatch.services.matching.source_matcher import match_source_packages

__all__ = [
    "PackageLookup",
    "RepositoryPackageLookup",
    "is_finalized",
    "match_compiled_packages",
    "match_source_packages",
    "serialize_dependency_key",
]
