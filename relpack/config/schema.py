# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for relpack.

Each section of relpack.yaml gets its own frozen pydantic model. Frozen means
once you create it, you cannot mutate it. A command reads its settings once at
startup and never changes them afterwards.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Every section has defaults, so an empty file (or no file at all) is a valid
configuration for a project laid out the conventional way:

    src/files/<asset>/...   → dist/<version>/<asset>.zip + info.json
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class ProjectConfig(BaseModel):
    """
    Project identity and cross-cutting settings: release version, the minimum
    interpreter version the pipelines accept, and log output.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        default="1.0.0", description="Schema version for compatibility tracking"
    )
    version: str | None = Field(
        default=None,
        description="Release version; falls back to [project].version in pyproject.toml",
    )
    min_python_version: str = Field(
        default="3.11.0",
        description="Minimum interpreter version accepted by the pre-flight gate",
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional path for file-based log output, relative to project root",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return upper


class BuildConfig(BaseModel):
    """Where the packager reads asset directories from and writes archives to."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    source_directory: str = Field(
        default="src/files",
        description="Each immediate subdirectory becomes one <name>.zip asset",
    )
    output_directory: str = Field(
        default="dist",
        description="Archives and info.json land in <output_directory>/<version>/",
    )


class PublishConfig(BaseModel):
    """
    GitHub release settings. Publishing is skipped entirely when the
    environment variable named by `token_env` is not set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    repository: str | None = Field(
        default=None,
        pattern=r"^[^/\s]+/[^/\s]+$",
        description="'owner/name' override; defaults to the origin git remote",
    )
    token_env: str = Field(
        default="GH_TOKEN", description="Environment variable holding the access token"
    )
    api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    release_body: str = Field(
        default="Release version {version}",
        description="Body of newly created draft releases; {version} is substituted",
    )
    timeout_seconds: float = Field(
        default=60.0, gt=0.0, description="Per-request HTTP timeout"
    )
    fail_on_error: bool = Field(
        default=False,
        description="Exit nonzero when the release cannot be located, created or reached",
    )


class RelpackConfig(BaseModel):
    """Top-level config container. Sections missing from the YAML get defaults."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    publish: PublishConfig = Field(default_factory=PublishConfig)
