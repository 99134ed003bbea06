"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from pkgmatch.db.models.release import ReleaseRow, ReleaseVersionRow
from pkgmatch.db.models.package import CompiledPackageRow, PackageRow

__all__ = [
    "ReleaseRow",
    "ReleaseVersionRow",
    "PackageRow",
    "CompiledPackageRow",
]
