"""Package match routes used by upload clients to skip existing artifacts."""

import json

import yaml
from fastapi import APIRouter, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from pkgmatch.dependencies import Lookup
from pkgmatch.errors.exceptions import BadManifestError, ValidationError
from pkgmatch.models.manifest import CompiledMatchRequest, SourceMatchRequest
from pkgmatch.services.matching.compiled_matcher import match_compiled_packages
from pkgmatch.services.matching.source_matcher import match_source_packages

router = APIRouter(prefix="/packages", tags=["Packages"])


async def _read_manifest(request: Request) -> object:
    body = await request.body()
    if not body.strip():
        return None
    content_type = request.headers.get("content-type", "")
    try:
        if "yaml" in content_type:
            return yaml.safe_load(body)
        return json.loads(body)
    except (yaml.YAMLError, ValueError) as exc:
        raise BadManifestError() from exc


def _parse(manifest: object, section: str, model: type[BaseModel]):
    if not isinstance(manifest, dict) or not isinstance(manifest.get(section), list):
        raise BadManifestError()
    try:
        return model.model_validate(manifest)
    except PydanticValidationError as exc:
        details = [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid match request", details) from exc


@router.post("/matches", status_code=200)
async def match_packages(request: Request, lookup: Lookup) -> list[str]:
    manifest = await _read_manifest(request)
    match_request = _parse(manifest, "packages", SourceMatchRequest)
    return await match_source_packages(
        lookup,
        match_request.name,
        match_request.version,
        [entry.fingerprint for entry in match_request.packages],
    )


@router.post("/matches_compiled", status_code=200)
async def match_compiled(request: Request, lookup: Lookup) -> list[str]:
    manifest = await _read_manifest(request)
    match_request = _parse(manifest, "compiled_packages", CompiledMatchRequest)
    return await match_compiled_packages(
        lookup,
        match_request.name,
        match_request.version,
        match_request.compiled_packages,
    )
