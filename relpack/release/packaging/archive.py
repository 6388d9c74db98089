# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
ZIP archiving of a single asset directory.

The archive holds the directory's contents, not the directory itself:
extracting tools.zip yields tools' children directly. Entry names always use
"/" separators and are written in sorted order, so the same tree produces
the same entry list on every platform.
"""

import zipfile
from pathlib import Path

from relpack.utils.filesystem import atomic_binary_output

COMPRESSION = zipfile.ZIP_DEFLATED
COMPRESSION_LEVEL = 9


def _iter_entries(source_dir: Path) -> list[Path]:
    return sorted(source_dir.rglob("*"), key=lambda p: p.relative_to(source_dir).as_posix())


def zip_directory(source_dir: Path, target_path: Path) -> int:
    """
    Compress everything under `source_dir` into `target_path` at maximum compression.

    Subdirectories get their own entries so empty directories survive the
    round trip. The archive is written through a temp file and only replaces
    `target_path` once complete.

    Args:
        source_dir: Directory whose contents get archived.
        target_path: Destination .zip file.

    Returns:
        Number of file entries written (directories not counted).

    Raises:
        FileNotFoundError: If source_dir doesn't exist.
        OSError: On any read or write failure.
    """
    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    file_count = 0
    with atomic_binary_output(target_path) as fh:
        with zipfile.ZipFile(
            fh, mode="w", compression=COMPRESSION, compresslevel=COMPRESSION_LEVEL
        ) as archive:
            for entry in _iter_entries(source_dir):
                arcname = entry.relative_to(source_dir).as_posix()
                if entry.is_dir():
                    archive.write(entry, arcname + "/")
                else:
                    archive.write(entry, arcname)
                    file_count += 1

    return file_count
