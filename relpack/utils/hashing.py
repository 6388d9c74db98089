# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Hashing utilities for relpack.

Release assets are identified by their SHA-512 digest encoded as standard
base64 (the format update clients compare against). Digests are always taken
from the bytes on disk, never from an in-memory buffer that might differ from
what was written.
"""

import base64
import hashlib
from pathlib import Path

HASH_ALGORITHM = "sha512"
HASH_BUFFER_SIZE = 65536  # 64 KiB


def compute_sha512(file_path: Path) -> str:
    """
    Compute the base64-encoded SHA-512 digest of a file.

    Reads the file in 64 KiB chunks so large archives never need to fit in
    memory.

    Args:
        file_path: Path to the file to hash.

    Returns:
        Standard base64 string (with padding) of the raw 64-byte digest.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: If the file can't be read.
    """
    hasher = hashlib.sha512()
    with open(file_path, "rb") as f:
        while True:
            chunk = f.read(HASH_BUFFER_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
    return base64.b64encode(hasher.digest()).decode("ascii")


def compute_sha512_bytes(data: bytes) -> str:
    """Base64-encoded SHA-512 digest of raw bytes."""
    return base64.b64encode(hashlib.sha512(data).digest()).decode("ascii")


def verify_checksum(file_path: Path, expected_digest: str) -> bool:
    """
    Check whether a file's SHA-512 matches the expected base64 digest.

    Base64 is case-sensitive, so unlike hex digests the comparison is exact.
    """
    return compute_sha512(file_path) == expected_digest
