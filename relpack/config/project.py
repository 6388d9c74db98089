# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release version resolution.

The version string names the output directory, the release tag and the
manifest, so both pipelines must agree on it. It comes from relpack.yaml when
set there, and from the project manifest (pyproject.toml) otherwise.
"""

import tomllib
from pathlib import Path

from relpack.config.exceptions import ProjectVersionError
from relpack.config.schema import ProjectConfig

PYPROJECT_FILENAME = "pyproject.toml"


def read_pyproject_version(project_root: Path) -> str | None:
    """Return [project].version from pyproject.toml, or None when absent."""
    pyproject = project_root / PYPROJECT_FILENAME
    if not pyproject.is_file():
        return None

    try:
        with open(pyproject, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as err:
        raise ProjectVersionError(f"Cannot read {pyproject}: {err}") from err

    version = data.get("project", {}).get("version")
    if version is None:
        return None
    return str(version)


def resolve_project_version(project: ProjectConfig, project_root: Path) -> str:
    """
    Pick the release version for this run.

    Raises:
        ProjectVersionError: If neither the config nor pyproject.toml names a version.
    """
    version = project.version or read_pyproject_version(project_root)
    if not version or not version.strip():
        raise ProjectVersionError(
            f"No release version configured. Set project.version in relpack.yaml "
            f"or [project].version in {project_root / PYPROJECT_FILENAME}."
        )
    return version.strip()
