# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the config loader and config discovery.

We test:
  1. Valid YAML loads into a frozen, correct config object
  2. Missing sections fall back to defaults
  3. Unknown fields raise ConfigValidationError (extra="forbid")
  4. Broken YAML raises ConfigLoadError
  5. discover_config picks the right file and project root
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from relpack.config.exceptions import ConfigLoadError, ConfigValidationError
from relpack.config.loader import discover_config, load_config
from relpack.config.schema import RelpackConfig


class TestLoadValidConfig:
    def test_loads_fixture_config(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.project.version == "1.2.3"
        assert config.project.log_level == "DEBUG"
        assert config.build.source_directory == "src/files"
        assert config.publish.repository == "acme/widgets"

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "minimal.yaml"
        config_file.write_text("project:\n  version: '0.1.0'\n", encoding="utf-8")

        config = load_config(config_file)
        assert config.build.source_directory == "src/files"
        assert config.build.output_directory == "dist"
        assert config.publish.token_env == "GH_TOKEN"
        assert config.publish.fail_on_error is False
        assert config.project.min_python_version == "3.11.0"

    def test_empty_file_is_all_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")

        assert load_config(config_file) == RelpackConfig()

    def test_explicit_nulls_are_accepted_for_optional_keys(self, tmp_path: Path) -> None:
        config_file = tmp_path / "nulls.yaml"
        config_file.write_text(
            "project:\n  version: null\n  log_file: null\npublish:\n  repository: null\n",
            encoding="utf-8",
        )

        config = load_config(config_file)
        assert config.project.version is None
        assert config.project.log_file is None
        assert config.publish.repository is None

    def test_log_level_is_normalised_to_upper_case(self, tmp_path: Path) -> None:
        config_file = tmp_path / "lower.yaml"
        config_file.write_text("project:\n  log_level: debug\n", encoding="utf-8")

        assert load_config(config_file).project.log_level == "DEBUG"


class TestInvalidConfig:
    def test_unknown_field_raises(self, invalid_config_file: Path) -> None:
        with pytest.raises(ConfigValidationError, match="colour"):
            load_config(invalid_config_file)

    def test_bad_log_level_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "level.yaml"
        config_file.write_text("project:\n  log_level: LOUD\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_bad_repository_slug_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "repo.yaml"
        config_file.write_text("publish:\n  repository: not-a-slug\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_non_positive_timeout_raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "timeout.yaml"
        config_file.write_text("publish:\n  timeout_seconds: 0\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            load_config(config_file)

    def test_broken_yaml_raises_load_error(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_config(broken_yaml_file)

    def test_non_mapping_root_raises_load_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- one\n- two\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(config_file)

    def test_missing_file_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_directory_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not a file"):
            load_config(tmp_path)


class TestImmutability:
    def test_config_is_frozen(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        with pytest.raises(ValidationError):
            config.project.version = "9.9.9"  # type: ignore[misc]


class TestDiscoverConfig:
    def test_explicit_path_sets_project_root(self, tmp_path: Path) -> None:
        nested = tmp_path / "ci"
        nested.mkdir()
        config_file = nested / "release.yaml"
        config_file.write_text(
            textwrap.dedent("""\
                project:
                  version: "2.0.0"
            """),
            encoding="utf-8",
        )

        config, root = discover_config(str(config_file), tmp_path)
        assert config.project.version == "2.0.0"
        assert root == nested.resolve()

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            discover_config(str(tmp_path / "missing.yaml"), tmp_path)

    def test_default_file_in_working_dir_is_used(self, tmp_config_file: Path) -> None:
        config, root = discover_config(None, tmp_config_file.parent)
        assert config.project.version == "1.2.3"
        assert root == tmp_config_file.parent

    def test_defaults_without_any_file(self, tmp_path: Path) -> None:
        config, root = discover_config(None, tmp_path)
        assert config == RelpackConfig()
        assert root == tmp_path
