# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for checksum generation and build verification.
"""

import json
from pathlib import Path

import pytest

from relpack.release.checksums.integrity import compute_asset_record, verify_manifest
from relpack.release.packaging.packager import build_release
from relpack.utils.hashing import compute_sha512


@pytest.fixture()
def built_version_dir(tmp_path: Path, source_tree: Path) -> Path:
    return build_release("1.0.0", source_tree, tmp_path / "dist").output_dir


def test_compute_asset_record(tmp_path: Path):
    """The record names the file relative to its directory."""
    archive = tmp_path / "data.zip"
    archive.write_bytes(b"\x00\x01\x02")

    record = compute_asset_record(archive)
    assert record.url == "data.zip"
    assert record.size == 3
    assert record.sha512 == compute_sha512(archive)


def test_verification_passes_for_fresh_build(built_version_dir: Path):
    result = verify_manifest(built_version_dir)
    assert result.is_valid
    assert result.checked_count == 2
    assert not result.mismatches
    assert not result.missing_files
    assert not result.errors


def test_verification_detects_corruption(built_version_dir: Path):
    (built_version_dir / "tools.zip").write_bytes(b"not the original archive")

    result = verify_manifest(built_version_dir)
    assert not result.is_valid
    assert result.mismatches == ["tools.zip"]


def test_verification_detects_missing_archive(built_version_dir: Path):
    (built_version_dir / "templates.zip").unlink()

    result = verify_manifest(built_version_dir)
    assert not result.is_valid
    assert result.missing_files == ["templates.zip"]
    assert result.checked_count == 1


def test_verification_without_manifest(tmp_path: Path):
    result = verify_manifest(tmp_path)
    assert not result.is_valid
    assert "info.json not found" in result.errors[0]


def test_verification_with_malformed_manifest(tmp_path: Path):
    (tmp_path / "info.json").write_text("[]", encoding="utf-8")

    result = verify_manifest(tmp_path)
    assert not result.is_valid
    assert "Failed to parse" in result.errors[0]


def test_verification_rejects_paths_outside_build(built_version_dir: Path):
    manifest_path = built_version_dir / "info.json"
    data = json.loads(manifest_path.read_text(encoding="utf-8"))
    data["files"].append({"url": "../../escape.zip", "sha512": "AAAA", "size": 1})
    manifest_path.write_text(json.dumps(data), encoding="utf-8")

    result = verify_manifest(built_version_dir)
    assert not result.is_valid
    assert len(result.errors) == 1
    assert result.checked_count == 2
