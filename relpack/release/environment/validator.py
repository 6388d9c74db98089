# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-flight version gate.

Both pipelines check the running interpreter against the configured minimum
before touching any file or the network. A too-old runtime fails with an
actionable message up front instead of a confusing error halfway through a
build.

Versions are compared component-wise as major.minor.patch. A leading "v" and
any pre-release or build suffix ("3.12.0rc1", "20.1.0-beta") are ignored.
"""

import logging
import re
from dataclasses import dataclass

from relpack.logging.logger import get_logger
from relpack.release.exceptions import VersionIncompatibleError
from relpack.runtime.environment import get_python_version

_logger: logging.Logger = get_logger(__name__)

_VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")

DEFAULT_MIN_PYTHON_VERSION = "3.11.0"


@dataclass(frozen=True, order=True)
class SemanticVersion:
    """A parsed major.minor.patch triple. Ordering compares major, minor, then patch."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class EnvironmentCheck:
    """Result of a single environment check."""

    name: str
    passed: bool
    message: str
    value: str


def parse_version(text: str) -> SemanticVersion | None:
    """Parse "v1.2.3" / "1.2.3-rc1" style strings. Returns None when unparseable."""
    match = _VERSION_PATTERN.match(text.strip())
    if match is None:
        return None
    return SemanticVersion(
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
    )


def is_compatible(current: SemanticVersion, required: SemanticVersion) -> bool:
    """True when `current` is the same as or newer than `required`."""
    return current >= required


def check_version_compatibility(
    current: str,
    required: str,
    component: str = "runtime",
) -> SemanticVersion:
    """
    Fail fast unless `current` satisfies `required`.

    Args:
        current: The version actually present.
        required: The minimum acceptable version.
        component: Human-readable name used in the error message.

    Returns:
        The parsed current version.

    Raises:
        VersionIncompatibleError: If either version is unparseable or current < required.
    """
    parsed_current = parse_version(current)
    if parsed_current is None:
        raise VersionIncompatibleError(f"Cannot parse current {component} version: {current!r}")

    parsed_required = parse_version(required)
    if parsed_required is None:
        raise VersionIncompatibleError(
            f"Cannot parse required {component} version: {required!r}"
        )

    if not is_compatible(parsed_current, parsed_required):
        raise VersionIncompatibleError(
            f"{component} version {current} is not supported; "
            f">= {required} is required. Please upgrade {component} to {required} or newer."
        )

    return parsed_current


def check_python_version(required: str = DEFAULT_MIN_PYTHON_VERSION) -> EnvironmentCheck:
    """Report whether the running interpreter meets `required`, without raising."""
    current = get_python_version()
    try:
        check_version_compatibility(current, required, component="Python")
    except VersionIncompatibleError as err:
        return EnvironmentCheck(name="python_version", passed=False, message=str(err), value=current)
    return EnvironmentCheck(
        name="python_version",
        passed=True,
        message=f"Python {current} meets minimum {required}",
        value=current,
    )


def require_python_version(required: str = DEFAULT_MIN_PYTHON_VERSION) -> EnvironmentCheck:
    """
    Gate the running interpreter.

    Raises:
        VersionIncompatibleError: If the interpreter is older than `required`.
    """
    check = check_python_version(required)
    if not check.passed:
        _logger.error(
            "Runtime version check failed",
            extra={"current": check.value, "required": required},
        )
        raise VersionIncompatibleError(check.message)

    _logger.info(
        "Runtime version check passed",
        extra={"current": check.value, "required": required},
    )
    return check
