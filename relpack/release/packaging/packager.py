# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release packager: turns a tree of asset directories into versioned archives
plus an info.json manifest.

Given a source root and a version, the layout produced is:

    <source_root>/              <output_root>/<version>/
    ├─ tools/           →       ├─ tools.zip
    ├─ templates/       →       ├─ templates.zip
    └─ README.md (ignored)      └─ info.json

Only immediate subdirectories become assets; loose files in the source root
are ignored. Directories are processed one at a time in name order, so the
manifest lists assets in a stable order across platforms.

A build either completes or leaves no manifest behind. If archiving or
hashing fails, the archives written by this run are deleted again before the
error propagates.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from relpack.logging.logger import get_logger
from relpack.release.checksums.integrity import compute_asset_record
from relpack.release.exceptions import BuildConfigurationError
from relpack.release.manifests.manifest import (
    MANIFEST_FILENAME,
    AssetRecord,
    Manifest,
    create_manifest,
    write_manifest,
)
from relpack.release.packaging.archive import zip_directory
from relpack.utils.filesystem import safe_delete
from relpack.utils.paths import ensure_directory

_logger: logging.Logger = get_logger(__name__)

_BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a build. `manifest` is None for dry runs."""

    version: str
    output_dir: Path
    source_directories: tuple[str, ...]
    manifest: Manifest | None = None

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / MANIFEST_FILENAME


def find_source_directories(source_root: Path) -> list[Path]:
    """
    List the immediate subdirectories of `source_root`, sorted by name.

    Raises:
        BuildConfigurationError: If source_root is missing or has no subdirectories.
    """
    if not source_root.is_dir():
        raise BuildConfigurationError(f"Source directory not found: {source_root}")

    folders = sorted((p for p in source_root.iterdir() if p.is_dir()), key=lambda p: p.name)
    if not folders:
        raise BuildConfigurationError(f"No asset directories found in {source_root}")

    return folders


def _archive_folder(folder: Path, output_dir: Path) -> AssetRecord:
    archive_path = output_dir / f"{folder.name}.zip"
    _logger.info("Compressing directory", extra={"directory": folder.name})

    file_count = zip_directory(folder, archive_path)
    record = compute_asset_record(archive_path)

    _logger.info(
        "Archive written",
        extra={
            "archive": record.url,
            "files": file_count,
            "size_bytes": record.size,
            "size_mb": round(record.size / _BYTES_PER_MB, 2),
        },
    )
    return record


def build_release(
    version: str,
    source_root: Path,
    output_root: Path,
    dry_run: bool = False,
) -> BuildResult:
    """
    Archive every asset directory and write the manifest for `version`.

    Existing archives with the same names in <output_root>/<version>/ are
    overwritten. A previous info.json is removed before archiving starts and
    only replaced once every archive has been written and hashed.

    Args:
        version: Release version; also the name of the output subdirectory.
        source_root: Directory whose immediate subdirectories become assets.
        output_root: Parent of the per-version output directory.
        dry_run: Log what would be built without writing anything.

    Returns:
        BuildResult describing the written release.

    Raises:
        BuildConfigurationError: If there is nothing to archive.
        OSError: If compression, hashing or writing fails.
    """
    folders = find_source_directories(source_root)
    output_dir = output_root / version
    names = tuple(folder.name for folder in folders)

    _logger.info(
        "Starting build",
        extra={
            "version": version,
            "source": str(source_root),
            "output_dir": str(output_dir),
            "directories": list(names),
        },
    )

    if dry_run:
        _logger.info("Dry run, would archive directories", extra={"count": len(folders)})
        return BuildResult(version=version, output_dir=output_dir, source_directories=names)

    ensure_directory(output_dir)
    # A stale manifest must not outlive a rebuild that fails halfway.
    safe_delete(output_dir / MANIFEST_FILENAME)

    written: list[Path] = []
    try:
        records: list[AssetRecord] = []
        for folder in folders:
            written.append(output_dir / f"{folder.name}.zip")
            records.append(_archive_folder(folder, output_dir))

        manifest = create_manifest(version, records)
        write_manifest(manifest, output_dir / MANIFEST_FILENAME)

    except Exception:
        # Never leave archives from a half-finished build next to an old manifest.
        for archive_path in written:
            safe_delete(archive_path)
        _logger.warning(
            "Cleaned up partial build after failure",
            extra={"output_dir": str(output_dir), "removed": [p.name for p in written]},
        )
        raise

    _logger.info(
        "Build complete",
        extra={
            "version": version,
            "output_dir": str(output_dir),
            "assets": [record.url for record in manifest.files],
            "total_size_mb": round(manifest.total_size / _BYTES_PER_MB, 2),
        },
    )

    return BuildResult(
        version=version,
        output_dir=output_dir,
        source_directories=names,
        manifest=manifest,
    )
