# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for release version resolution (config first, pyproject.toml second).
"""

from pathlib import Path

import pytest

from relpack.config.exceptions import ProjectVersionError
from relpack.config.project import read_pyproject_version, resolve_project_version
from relpack.config.schema import ProjectConfig


def _write_pyproject(root: Path, body: str) -> None:
    (root / "pyproject.toml").write_text(body, encoding="utf-8")


class TestReadPyprojectVersion:
    def test_reads_project_version(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, '[project]\nname = "demo"\nversion = "3.4.5"\n')
        assert read_pyproject_version(tmp_path) == "3.4.5"

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert read_pyproject_version(tmp_path) is None

    def test_missing_version_returns_none(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, '[project]\nname = "demo"\n')
        assert read_pyproject_version(tmp_path) is None

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, "[project\nversion = ")
        with pytest.raises(ProjectVersionError):
            read_pyproject_version(tmp_path)


class TestResolveProjectVersion:
    def test_config_version_wins(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, '[project]\nversion = "3.4.5"\n')
        project = ProjectConfig(version="1.0.0")
        assert resolve_project_version(project, tmp_path) == "1.0.0"

    def test_falls_back_to_pyproject(self, tmp_path: Path) -> None:
        _write_pyproject(tmp_path, '[project]\nversion = "3.4.5"\n')
        assert resolve_project_version(ProjectConfig(), tmp_path) == "3.4.5"

    def test_no_version_anywhere_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ProjectVersionError, match="No release version"):
            resolve_project_version(ProjectConfig(), tmp_path)

    def test_blank_version_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ProjectVersionError):
            resolve_project_version(ProjectConfig(version="   "), tmp_path)
