"""Release and release version tables."""

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pkgmatch.db.base import Base, TimestampMixin


class ReleaseRow(Base, TimestampMixin):
    __tablename__ = "releases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)


class ReleaseVersionRow(Base, TimestampMixin):
    __tablename__ = "release_versions"
    __table_args__ = (UniqueConstraint("release_id", "version"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    release_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("releases.id"), nullable=False, index=True
    )
    version: Mapped[str] = mapped_column(String(100), nullable=False)
    # True once the last upload of this version completed without error
    finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
