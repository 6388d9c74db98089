# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for info.json creation and parsing.
"""

import json
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from relpack.release.exceptions import ManifestFormatError, ManifestNotFoundError
from relpack.release.manifests.manifest import (
    AssetRecord,
    create_manifest,
    load_manifest,
    utc_timestamp,
    write_manifest,
)

_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _records() -> list[AssetRecord]:
    return [
        AssetRecord(url="templates.zip", sha512="AAAA", size=10),
        AssetRecord(url="tools.zip", sha512="BBBB", size=20),
    ]


def test_manifest_round_trip(tmp_path: Path):
    """Test writing and reading back a manifest."""
    path = tmp_path / "info.json"
    manifest = create_manifest("1.0.0", _records(), release_date="2024-01-02T03:04:05.678Z")

    write_manifest(manifest, path)
    loaded = load_manifest(path)

    assert loaded == manifest
    assert loaded.total_size == 30


def test_manifest_file_layout(tmp_path: Path):
    """Keys are written in a fixed order with two-space indentation and a trailing newline."""
    path = tmp_path / "info.json"
    write_manifest(create_manifest("1.0.0", _records()), path)

    text = path.read_text(encoding="utf-8")
    data = json.loads(text)

    assert list(data.keys()) == ["version", "files", "releaseDate"]
    assert list(data["files"][0].keys()) == ["url", "sha512", "size"]
    assert text.endswith("}\n")
    assert '\n  "version": "1.0.0"' in text


def test_release_date_defaults_to_now():
    before = datetime.now(tz=timezone.utc) - timedelta(seconds=1)
    manifest = create_manifest("1.0.0", [])
    after = datetime.now(tz=timezone.utc) + timedelta(seconds=1)

    assert _TIMESTAMP_PATTERN.match(manifest.release_date)
    stamped = datetime.fromisoformat(manifest.release_date.replace("Z", "+00:00"))
    assert before <= stamped <= after


def test_utc_timestamp_converts_offsets():
    moment = datetime(2024, 5, 6, 9, 30, 0, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert utc_timestamp(moment) == "2024-05-06T07:30:00.123Z"


def test_load_missing_manifest_raises(tmp_path: Path):
    with pytest.raises(ManifestNotFoundError):
        load_manifest(tmp_path / "info.json")


def test_load_invalid_json_raises(tmp_path: Path):
    path = tmp_path / "info.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ManifestFormatError, match="not valid JSON"):
        load_manifest(path)


def test_load_missing_fields_raises(tmp_path: Path):
    path = tmp_path / "info.json"
    path.write_text(json.dumps({"version": "1.0.0", "files": []}), encoding="utf-8")
    with pytest.raises(ManifestFormatError, match="releaseDate"):
        load_manifest(path)


def test_load_asset_missing_fields_raises(tmp_path: Path):
    path = tmp_path / "info.json"
    payload = {"version": "1.0.0", "files": [{"url": "a.zip"}], "releaseDate": "x"}
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ManifestFormatError, match="files\\[0\\]"):
        load_manifest(path)


@pytest.mark.parametrize("size", [-1, "12", True, 1.5])
def test_load_rejects_bad_sizes(tmp_path: Path, size):
    path = tmp_path / "info.json"
    payload = {
        "version": "1.0.0",
        "files": [{"url": "a.zip", "sha512": "AAAA", "size": size}],
        "releaseDate": "2024-01-01T00:00:00.000Z",
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ManifestFormatError, match="size"):
        load_manifest(path)


def test_manifest_format_error_is_a_value_error():
    assert issubclass(ManifestFormatError, ValueError)
