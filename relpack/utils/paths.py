# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for relpack.

Config paths are relative to the project root, and asset names read back from
a manifest must never point outside the build's version directory.
"""

from pathlib import Path


def resolve_against(root: Path, configured: str) -> Path:
    """Resolve a configured path; absolute paths are kept, relative ones join `root`."""
    path = Path(configured)
    if path.is_absolute():
        return path
    return root / path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def validate_path_within(target: Path, root: Path) -> Path:
    """
    Make sure a path doesn't escape the given root directory.

    Both paths are resolved to their absolute forms before comparing, so
    names like ../../etc/passwd get caught.

    Returns:
        The resolved absolute path if it's safe.

    Raises:
        ValueError: If the path escapes the root.
    """
    resolved_target = target.resolve()
    resolved_root = root.resolve()

    if not resolved_target.is_relative_to(resolved_root):
        raise ValueError(
            f"Path '{target}' resolves to '{resolved_target}' which is outside "
            f"'{resolved_root}'. This is not allowed."
        )

    return resolved_target
