# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the relpack CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Fatal errors are logged and turned into a nonzero code; nothing escapes
as a traceback.

No print() calls. Everything goes through the structured logger.
"""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from relpack.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from relpack.config.exceptions import ConfigError
from relpack.config.loader import discover_config
from relpack.config.project import resolve_project_version
from relpack.config.schema import RelpackConfig
from relpack.logging.logger import get_logger
from relpack.release.checksums.integrity import verify_manifest
from relpack.release.exceptions import (
    BuildConfigurationError,
    GitHubAPIError,
    ManifestFormatError,
    ManifestNotFoundError,
    ReleaseError,
    VersionIncompatibleError,
)
from relpack.release.packaging.packager import build_release
from relpack.release.publishing.publisher import load_build_result, publish_release, read_token
from relpack.runtime.bootstrap import bootstrap
from relpack.utils.paths import resolve_against


@dataclass(frozen=True)
class CommandContext:
    """Everything a handler needs once setup has succeeded."""

    config: RelpackConfig
    project_root: Path
    version: str

    @property
    def source_root(self) -> Path:
        return resolve_against(self.project_root, self.config.build.source_directory)

    @property
    def output_root(self) -> Path:
        return resolve_against(self.project_root, self.config.build.output_directory)


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, CommandContext | None, logging.Logger]:
    """
    The shared setup every command needs: load config, run the version gate,
    resolve the release version.

    Returns a tuple of (exit_code, context, logger). If exit_code is not
    SUCCESS, the caller should return it immediately.
    """
    logger = get_logger(f"relpack.cli.{command_name}", log_level=args.log_level or "INFO")

    try:
        config, project_root = discover_config(args.config, Path.cwd())
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    try:
        bootstrap(config.project, project_root, log_level=args.log_level)
    except VersionIncompatibleError as err:
        logger.error("Version check failed", extra={"command": command_name, "error": str(err)})
        return VALIDATION_ERROR, None, logger

    try:
        version = resolve_project_version(config.project, project_root)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": command_name, "error": str(err)})
        return CONFIG_ERROR, None, logger

    return SUCCESS, CommandContext(config=config, project_root=project_root, version=version), logger


def handle_build(args: argparse.Namespace) -> int:
    """Archive every asset directory and write info.json."""
    exit_code, context, logger = _load_and_bootstrap(args, "build")
    if exit_code != SUCCESS or context is None:
        return exit_code

    try:
        result = build_release(
            version=context.version,
            source_root=context.source_root,
            output_root=context.output_root,
            dry_run=args.dry_run,
        )
    except BuildConfigurationError as err:
        logger.error("Nothing to build", extra={"error": str(err)})
        return CONFIG_ERROR
    except Exception as err:
        logger.error("Build failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info(
        "Build finished",
        extra={
            "version": result.version,
            "output_dir": str(result.output_dir),
            "assets": len(result.source_directories),
            "dry_run": args.dry_run,
        },
    )
    return SUCCESS


def handle_release(args: argparse.Namespace) -> int:
    """Upload a finished build to a draft GitHub release."""
    exit_code, context, logger = _load_and_bootstrap(args, "release")
    if exit_code != SUCCESS or context is None:
        return exit_code

    settings = context.config.publish

    try:
        build = load_build_result(context.output_root, context.version)
    except (ManifestNotFoundError, ManifestFormatError) as err:
        logger.error("Cannot read build output", extra={"error": str(err)})
        return VALIDATION_ERROR

    logger.info(
        "Build output loaded",
        extra={
            "version": build.version,
            "output_dir": str(build.output_dir),
            "assets": [record.url for record in build.files],
        },
    )

    try:
        result = publish_release(
            build,
            settings,
            project_root=context.project_root,
            token=read_token(settings),
            dry_run=args.dry_run,
        )
    except (ReleaseError, httpx.HTTPError, OSError) as err:
        logger.error("GitHub release failed", extra={"error": str(err)}, exc_info=True)
        if isinstance(err, GitHubAPIError) and err.status_code == 401:
            logger.error(
                "GitHub rejected the access token",
                extra={"hint": f"check that {settings.token_env} is set correctly"},
            )
        return RUNTIME_ERROR if settings.fail_on_error else SUCCESS

    logger.info(
        "Release finished",
        extra={
            "skipped": result.skipped,
            "url": result.release_url,
            "uploaded": len(result.uploaded),
            "failed": len(result.failed),
        },
    )
    return SUCCESS


def handle_verify(args: argparse.Namespace) -> int:
    """Recompute checksums of a build and compare them with its info.json."""
    exit_code, context, logger = _load_and_bootstrap(args, "verify")
    if exit_code != SUCCESS or context is None:
        return exit_code

    version_dir = context.output_root / context.version
    try:
        result = verify_manifest(version_dir)
    except OSError as err:
        logger.error("Verification failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    if not result.is_valid:
        logger.error(
            "Integrity check failed",
            extra={
                "path": str(version_dir),
                "mismatches": result.mismatches,
                "missing": result.missing_files,
                "errors": result.errors,
            },
        )
        return VALIDATION_ERROR

    logger.info(
        "Integrity check passed",
        extra={"path": str(version_dir), "checked": result.checked_count},
    )
    return SUCCESS
