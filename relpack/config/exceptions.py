# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Configuration failures. The CLI turns every ConfigError into exit code 2
before any file is written or any request is made.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """relpack.yaml is missing, unreadable, or not a YAML mapping."""


class ConfigValidationError(ConfigError):
    """relpack.yaml parsed but has unknown keys or values of the wrong type."""


class ProjectVersionError(ConfigError):
    """Neither relpack.yaml nor pyproject.toml names a release version."""
