# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release manifest (info.json) generation and loading.

The manifest is the contract between `relpack build` and `relpack release`:
the packager writes it once, the publisher reads it back verbatim and uploads
exactly the assets it lists. Its layout is fixed:

    {
      "version": "1.2.3",
      "files": [
        {"url": "tools.zip", "sha512": "<base64>", "size": 12345},
        ...
      ],
      "releaseDate": "2026-10-18T09:30:00.123Z"
    }

`url` is the archive's file name relative to the manifest's directory. Keys
keep this order on disk; the manifest is never rewritten after the build.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from relpack.logging.logger import get_logger
from relpack.release.exceptions import ManifestFormatError, ManifestNotFoundError
from relpack.utils.filesystem import atomic_write, safe_read

_logger: logging.Logger = get_logger(__name__)

MANIFEST_FILENAME = "info.json"

_REQUIRED_MANIFEST_FIELDS: frozenset[str] = frozenset({"version", "files", "releaseDate"})
_REQUIRED_ASSET_FIELDS: frozenset[str] = frozenset({"url", "sha512", "size"})


@dataclass(frozen=True)
class AssetRecord:
    """One archive in the release: its file name, base64 SHA-512 and byte size."""

    url: str
    sha512: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "sha512": self.sha512, "size": self.size}


@dataclass(frozen=True)
class Manifest:
    """
    Everything a release consists of. Built once per `relpack build` and
    treated as read-only from then on.
    """

    version: str
    files: tuple[AssetRecord, ...]
    release_date: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "files": [record.to_dict() for record in self.files],
            "releaseDate": self.release_date,
        }

    @property
    def total_size(self) -> int:
        return sum(record.size for record in self.files)


def utc_timestamp(moment: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(tz=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_manifest(
    version: str,
    files: list[AssetRecord],
    release_date: str | None = None,
) -> Manifest:
    """
    Create a manifest for a freshly built release.

    Args:
        version: Release version string.
        files: Asset records in build order.
        release_date: Override for the timestamp (defaults to now, UTC).
    """
    manifest = Manifest(
        version=version,
        files=tuple(files),
        release_date=release_date or utc_timestamp(),
    )
    _logger.debug(
        "Manifest created",
        extra={"version": version, "asset_count": len(manifest.files)},
    )
    return manifest


def write_manifest(manifest: Manifest, path: Path) -> None:
    """
    Serialize a manifest to JSON and write it atomically.

    Args:
        manifest: The manifest to write.
        path: Target file path (usually <version_dir>/info.json).
    """
    content = json.dumps(manifest.to_dict(), indent=2) + "\n"
    atomic_write(path, content)

    _logger.info(
        "Manifest written",
        extra={"path": str(path), "version": manifest.version, "asset_count": len(manifest.files)},
    )


def _parse_asset(item: Any, index: int) -> AssetRecord:
    if not isinstance(item, dict):
        raise ManifestFormatError(f"Manifest files[{index}] is not an object")

    missing = _REQUIRED_ASSET_FIELDS - set(item.keys())
    if missing:
        raise ManifestFormatError(
            f"Manifest files[{index}] is missing required fields: {', '.join(sorted(missing))}"
        )

    size = item["size"]
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ManifestFormatError(f"Manifest files[{index}].size must be a non-negative integer")

    return AssetRecord(url=str(item["url"]), sha512=str(item["sha512"]), size=size)


def load_manifest(path: Path) -> Manifest:
    """
    Load a manifest from an info.json file.

    Raises:
        ManifestNotFoundError: If the file doesn't exist.
        ManifestFormatError: If the JSON is invalid or required fields are missing.
    """
    if not path.is_file():
        raise ManifestNotFoundError(f"Manifest file not found: {path}")

    try:
        data = json.loads(safe_read(path))
    except json.JSONDecodeError as err:
        raise ManifestFormatError(f"Manifest {path} is not valid JSON: {err}") from err

    if not isinstance(data, dict):
        raise ManifestFormatError(f"Manifest {path} root is not a JSON object")

    missing = _REQUIRED_MANIFEST_FIELDS - set(data.keys())
    if missing:
        raise ManifestFormatError(
            f"Manifest is missing required fields: {', '.join(sorted(missing))}"
        )

    if not isinstance(data["files"], list):
        raise ManifestFormatError("Manifest 'files' must be a list")

    manifest = Manifest(
        version=str(data["version"]),
        files=tuple(_parse_asset(item, i) for i, item in enumerate(data["files"])),
        release_date=str(data["releaseDate"]),
    )

    _logger.debug(
        "Manifest loaded",
        extra={"path": str(path), "version": manifest.version},
    )
    return manifest
