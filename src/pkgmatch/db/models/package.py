"""Package and compiled package tables."""

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pkgmatch.db.base import Base, TimestampMixin


class PackageRow(Base, TimestampMixin):
    __tablename__ = "packages"

    # Autoincrement id doubles as record creation order
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    release_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("releases.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    version: Mapped[str] = mapped_column(String(200), nullable=False)
    fingerprint: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    # NULL when the package was declared but its source never stored
    artifact_id: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sha1: Mapped[str | None] = mapped_column(String(128), nullable=True)


class CompiledPackageRow(Base, TimestampMixin):
    __tablename__ = "compiled_packages"
    __table_args__ = (
        UniqueConstraint("package_id", "image_os", "image_version", "dependency_key"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("packages.id"), nullable=False, index=True
    )
    artifact_id: Mapped[str] = mapped_column(String(200), nullable=False)
    sha1: Mapped[str | None] = mapped_column(String(128), nullable=True)
    image_os: Mapped[str] = mapped_column(String(100), nullable=False)
    image_version: Mapped[str] = mapped_column(String(100), nullable=False)
    # Immutable once recorded; compared byte-for-byte
    dependency_key: Mapped[str] = mapped_column(Text, nullable=False)
