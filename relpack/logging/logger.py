# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logging for relpack.

A build or release run emits nothing but JSON lines on stdout, one object
per event, so CI logs can be grepped or fed to jq:

  {"ts": "2026-10-18T09:30:00.123Z", "level": "INFO",
   "module": "relpack.release.packaging.packager", "msg": "Archive written",
   "archive": "tools.zip", "size_bytes": 5120}

Modules call `get_logger(__name__)` at import time. Because that happens
before any config file is read, each command calls `configure_logging`
after loading relpack.yaml to apply the configured level and log file to
every relpack logger that already exists.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "relpack"

# Attributes every LogRecord carries; anything else on a record came in via `extra`.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """
    Render a record as one JSON object.

    Fixed keys come first (ts, level, module, msg), then every `extra` field
    in the order it was passed. Values json can't encode are stringified, so
    Paths and exceptions can go straight into `extra`.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_"):
                continue
            entry[key] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _resolve_log_level(level_name: str) -> int:
    upper = level_name.upper()
    if upper not in _LEVEL_NAMES:
        raise ValueError(f"Invalid log level '{level_name}'. Must be one of: {', '.join(_LEVEL_NAMES)}")
    return logging.getLevelName(upper)


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Path | None = None,
) -> logging.Logger:
    """
    Return the JSON logger called `name`, creating its handlers on first use.

    Args:
        name: Dotted logger name, normally the caller's __name__.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (any case).
        log_file: Also append every line to this file.

    Raises:
        ValueError: For an unknown level name.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Repeated calls for the same name only change the level.
    if logger.handlers:
        return logger

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(level)
    console.setFormatter(JsonFormatter())
    logger.addHandler(console)

    if log_file is not None:
        _attach_file_handler(logger, log_file, level)

    logger.propagate = False
    return logger


def _attach_file_handler(logger: logging.Logger, log_file: Path, level: int) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(JsonFormatter())
    logger.addHandler(file_handler)


def configure_logging(log_level: str = "INFO", log_file: Path | None = None) -> None:
    """
    Apply a level (and optional log file) to every relpack logger created so far.

    Module loggers are created at import time with the default level, before
    the command line or config file has been read. This walks the logger
    registry and retunes them in place.

    Args:
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional file that receives a copy of every log line.
    """
    level = _resolve_log_level(log_level)
    resolved_file = str(log_file.resolve()) if log_file is not None else None

    for name in list(logging.Logger.manager.loggerDict):
        if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
            continue
        logger = logging.getLogger(name)
        if not logger.handlers:
            continue
        logger.setLevel(level)
        has_file = False
        for handler in logger.handlers:
            handler.setLevel(level)
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == resolved_file:
                has_file = True
        if log_file is not None and not has_file:
            _attach_file_handler(logger, log_file, level)
