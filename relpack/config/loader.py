# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads relpack.yaml and produces a validated, frozen RelpackConfig.

YAML is parsed with safe_load and handed to pydantic as a plain dict; a
problem at either stage stops the command before it touches any file or
the network. There are no environment-variable overrides apart from the
access token, whose variable name is itself part of the config.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from relpack.config.exceptions import ConfigLoadError, ConfigValidationError
from relpack.config.schema import RelpackConfig

DEFAULT_CONFIG_FILENAME = "relpack.yaml"


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Parse `config_path` into a dict. An empty file yields {} so every
    section falls back to its defaults.

    Raises:
        ConfigLoadError: Missing, unreadable, not YAML, or not a mapping.
    """
    if not config_path.is_file():
        reason = "is not a file" if config_path.exists() else "not found"
        raise ConfigLoadError(f"Config file {reason}: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"{config_path} must hold a YAML mapping at the top level, got {type(parsed).__name__}"
        )
    return parsed


def load_config(config_path: Path) -> RelpackConfig:
    """
    Load, validate, and freeze a config file into a RelpackConfig object.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A fully validated, frozen RelpackConfig instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (wrong types, unknown keys).
    """
    raw_data = _read_yaml_file(config_path)

    try:
        config = RelpackConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    return config


def discover_config(explicit_path: str | None, working_dir: Path) -> tuple[RelpackConfig, Path]:
    """
    Find the config for a command run and the project root it applies to.

    An explicit --config path must exist. Without one, relpack.yaml in the
    working directory is used when present, and built-in defaults otherwise.

    Returns:
        (config, project_root) where project_root is the directory relative
        paths in the config resolve against.
    """
    if explicit_path is not None:
        path = Path(explicit_path)
        return load_config(path), path.resolve().parent

    default_path = working_dir / DEFAULT_CONFIG_FILENAME
    if default_path.is_file():
        return load_config(default_path), working_dir

    return RelpackConfig(), working_dir
