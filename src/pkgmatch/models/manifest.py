"""Pydantic models for match request manifests."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pkgmatch.models.target_image import TargetImage


def _as_version_string(value: Any) -> Any:
    # YAML manifests carry bare integers for versions like 1 or 3000
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        # 1.10 arrives as 1.1; the written version is already lost
        raise ValueError("version must be a string or integer; quote dotted versions")
    if isinstance(value, int):
        return str(value)
    return value


class SourcePackageEntry(BaseModel):
    """One source package in a match manifest. Only the fingerprint matters."""

    model_config = ConfigDict(extra="ignore")

    fingerprint: str | None = None


class CompiledPackageEntry(BaseModel):
    """One compiled package in a match manifest."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    version: str
    fingerprint: str | None = None
    target_image: TargetImage = Field(
        ..., validation_alias=AliasChoices("target_image", "stemcell")
    )
    dependencies: list[str] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        return _as_version_string(value)

    @field_validator("target_image", mode="before")
    @classmethod
    def _parse_target_image(cls, value: Any) -> Any:
        if isinstance(value, str):
            return TargetImage.parse(value)
        return value

    @field_validator("dependencies", mode="before")
    @classmethod
    def _default_dependencies(cls, value: Any) -> Any:
        return [] if value is None else value


class _ReleaseScopedRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        return _as_version_string(value)


class SourceMatchRequest(_ReleaseScopedRequest):
    """Body of ``POST /packages/matches``."""

    packages: list[SourcePackageEntry]


class CompiledMatchRequest(_ReleaseScopedRequest):
    """Body of ``POST /packages/matches_compiled``."""

    compiled_packages: list[CompiledPackageEntry]
