# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Asset checksum generation and verification.

Every AssetRecord in info.json must describe the archive exactly as it sits
on disk: SHA-512 (base64) and byte size are both read back from the written
file. Verification recomputes the same two values and reports every mismatch
and missing file, not just the first one.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from relpack.logging.logger import get_logger
from relpack.release.exceptions import ManifestFormatError
from relpack.release.manifests.manifest import MANIFEST_FILENAME, AssetRecord, load_manifest
from relpack.utils.hashing import compute_sha512
from relpack.utils.paths import validate_path_within

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a manifest verification run."""

    is_valid: bool
    checked_count: int
    mismatches: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def compute_asset_record(archive_path: Path) -> AssetRecord:
    """
    Describe a written archive for the manifest.

    Raises:
        FileNotFoundError: If the archive doesn't exist.
        OSError: If the archive can't be read.
    """
    digest = compute_sha512(archive_path)
    size = archive_path.stat().st_size
    _logger.debug(
        "Computed checksum",
        extra={"file": archive_path.name, "sha512": digest[:16] + "...", "size": size},
    )
    return AssetRecord(url=archive_path.name, sha512=digest, size=size)


def verify_manifest(version_dir: Path) -> VerificationResult:
    """
    Verify every asset listed in <version_dir>/info.json against the files on disk.

    Args:
        version_dir: Build output directory for one version.

    Returns:
        VerificationResult with pass/fail status and details.
    """
    manifest_path = version_dir / MANIFEST_FILENAME
    if not manifest_path.is_file():
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"{MANIFEST_FILENAME} not found in {version_dir}"],
        )

    try:
        manifest = load_manifest(manifest_path)
    except ManifestFormatError as err:
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"Failed to parse {MANIFEST_FILENAME}: {err}"],
        )

    mismatches: list[str] = []
    missing_files: list[str] = []
    errors: list[str] = []
    checked = 0

    for record in manifest.files:
        try:
            file_path = validate_path_within(version_dir / record.url, version_dir)
        except ValueError as err:
            errors.append(str(err))
            continue

        if not file_path.is_file():
            missing_files.append(record.url)
            _logger.error("File missing during verification", extra={"file": record.url})
            continue

        actual = compute_asset_record(file_path)
        checked += 1

        if actual.sha512 != record.sha512 or actual.size != record.size:
            mismatches.append(record.url)
            _logger.error(
                "Checksum mismatch",
                extra={
                    "file": record.url,
                    "expected_size": record.size,
                    "actual_size": actual.size,
                    "expected": record.sha512[:16] + "...",
                    "actual": actual.sha512[:16] + "...",
                },
            )
        else:
            _logger.debug("Checksum verified", extra={"file": record.url})

    is_valid = not mismatches and not missing_files and not errors

    if is_valid:
        _logger.info("All checksums verified", extra={"checked_count": checked})
    else:
        _logger.error(
            "Checksum verification failed",
            extra={
                "mismatches": len(mismatches),
                "missing": len(missing_files),
                "errors": len(errors),
            },
        )

    return VerificationResult(
        is_valid=is_valid,
        checked_count=checked,
        mismatches=mismatches,
        missing_files=missing_files,
        errors=errors,
    )
