# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the build, release and verify pipelines.

The CLI maps these onto exit codes. Anything not listed here that escapes a
pipeline (OSError from a full disk, for example) is a runtime error.
"""


class ReleaseError(Exception):
    """Base for all pipeline errors."""


class BuildConfigurationError(ReleaseError):
    """The source tree is missing or has no asset directories to archive."""


class ManifestNotFoundError(ReleaseError):
    """The build output directory or its info.json does not exist."""


class ManifestFormatError(ReleaseError, ValueError):
    """info.json exists but is not a valid manifest."""


class VersionIncompatibleError(ReleaseError):
    """The running interpreter (or another component) is older than required."""


class RepositoryResolutionError(ReleaseError):
    """The GitHub owner/name could not be determined from config or git."""


class GitHubAPIError(ReleaseError):
    """A GitHub REST call returned a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
