# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Safe filesystem operations for relpack.

Build outputs are consumed by a second command (and by anyone downloading the
release), so writes must be all-or-nothing:
  - writes go to a temp file in the target directory, then get renamed
  - failures never leave a truncated archive or manifest behind
  - file handles are always closed

Rename on the same filesystem is atomic on POSIX. If the process crashes
mid-write, you get a leftover temp file instead of a corrupted target file.
"""

import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

TEMP_PREFIX = ".relpack_tmp_"


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """Text flavour of atomic_binary_output; used for info.json."""
    with atomic_binary_output(target_path) as fh:
        fh.write(content.encode(encoding))


@contextmanager
def atomic_binary_output(target_path: Path) -> Iterator[IO[bytes]]:
    """
    Yield a binary file handle whose contents replace `target_path` on success.

    The temp file lives in the same directory as the target so the final
    replace is a same-filesystem rename. An existing target is overwritten
    only once the new content is complete. If the body raises, the temp file
    is deleted and the target is left untouched.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # delete=False because the file must survive closing so we can rename it.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="wb",
        dir=str(target_path.parent),
        prefix=TEMP_PREFIX,
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        yield temp_fd
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_read(file_path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file, naming the path in the error when it isn't one.

    Raises:
        FileNotFoundError: Nothing exists at `file_path`.
        IsADirectoryError: `file_path` is a directory.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    if file_path.is_dir():
        raise IsADirectoryError(f"Expected a file, got a directory: {file_path}")
    return file_path.read_text(encoding=encoding)


def safe_delete(file_path: Path) -> bool:
    """Remove `file_path` if present. True when something was removed."""
    try:
        file_path.unlink()
    except FileNotFoundError:
        return False
    return True
