# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for relpack.

This module handles the one-time setup that happens before any real work
begins. The bootstrap sequence is:
  1. Apply the configured log level and log file to every relpack logger
  2. Run the version gate against the running interpreter
  3. Log a startup line with basic system information

Every pipeline command goes through this before reading or writing anything.
"""

from pathlib import Path

from relpack.config.schema import ProjectConfig
from relpack.logging.logger import configure_logging, get_logger
from relpack.release.environment.validator import require_python_version
from relpack.runtime.environment import get_system_info
from relpack.utils.paths import resolve_against


def bootstrap(config: ProjectConfig, project_root: Path, log_level: str | None = None) -> None:
    """
    Run the full bootstrap sequence.

    Args:
        config: The validated project section of the configuration.
        project_root: Directory that relative config paths resolve against.
        log_level: Command-line override for config.log_level.

    Raises:
        VersionIncompatibleError: If the interpreter is older than
            config.min_python_version.
    """
    level = log_level or config.log_level
    log_file = None
    if config.log_file is not None:
        log_file = resolve_against(project_root, config.log_file)
    configure_logging(level, log_file)

    require_python_version(config.min_python_version)

    logger = get_logger("relpack.runtime", log_level=level, log_file=log_file)
    system_info = get_system_info()
    logger.info(
        "relpack bootstrap complete",
        extra={
            "python_version": system_info.python_version,
            "implementation": system_info.implementation,
            "platform": system_info.platform,
            "machine": system_info.machine,
            "project_root": str(project_root),
        },
    )
