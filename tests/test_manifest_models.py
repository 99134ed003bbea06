"""Tests for manifest models and target images."""

import pytest
from pydantic import ValidationError

from pkgmatch.models.manifest import CompiledMatchRequest, CompiledPackageEntry, SourceMatchRequest
from pkgmatch.models.target_image import TargetImage


def test_target_image_parse_and_render():
    image = TargetImage.parse("ubuntu-trusty/3000")
    assert image == TargetImage("ubuntu-trusty", "3000")
    assert str(image) == "ubuntu-trusty/3000"


@pytest.mark.parametrize("value", ["ubuntu-trusty", "/3000", "ubuntu-trusty/", ""])
def test_target_image_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        TargetImage.parse(value)


def test_compiled_entry_accepts_stemcell_alias():
    entry = CompiledPackageEntry.model_validate(
        {"name": "p1", "version": 3, "fingerprint": "f1", "stemcell": "centos-7/3001"}
    )
    assert entry.target_image == TargetImage("centos-7", "3001")
    assert entry.version == "3"
    assert entry.dependencies == []


def test_compiled_entry_accepts_target_image_name():
    entry = CompiledPackageEntry.model_validate(
        {"name": "p1", "version": "v1", "target_image": "centos-7/3001", "dependencies": None}
    )
    assert entry.fingerprint is None
    assert entry.dependencies == []


def test_compiled_entry_rejects_malformed_image():
    with pytest.raises(ValidationError):
        CompiledPackageEntry.model_validate(
            {"name": "p1", "version": "v1", "stemcell": "centos-7"}
        )


def test_release_version_numbers_become_strings():
    request = SourceMatchRequest.model_validate(
        {"name": "r", "version": 1, "packages": [{"fingerprint": None}, {"sha1": "x"}]}
    )
    assert request.version == "1"
    assert [p.fingerprint for p in request.packages] == [None, None]


def test_compiled_request_requires_release_name():
    with pytest.raises(ValidationError):
        CompiledMatchRequest.model_validate({"version": "1", "compiled_packages": []})


@pytest.mark.parametrize(
    "model, payload",
    [
        (SourceMatchRequest, {"name": "r", "version": 1.10, "packages": []}),
        (CompiledPackageEntry, {"name": "p1", "version": 1.10, "stemcell": "ubuntu-trusty/3000"}),
    ],
)
def test_float_versions_are_rejected(model, payload):
    with pytest.raises(ValidationError, match="quote dotted versions"):
        model.model_validate(payload)
