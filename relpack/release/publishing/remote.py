# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
GitHub repository coordinates (owner/name) for the release target.

Taken from the `publish.repository` setting when present, otherwise parsed
from the URL of the `origin` git remote. Both HTTPS and SSH remotes work:

    https://github.com/acme/widgets.git
    git@github.com:acme/widgets.git
"""

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from relpack.release.exceptions import RepositoryResolutionError

_GITHUB_REMOTE_PATTERN = re.compile(r"github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$")
_GIT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class RepositoryCoordinates:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def parse_remote_url(url: str) -> RepositoryCoordinates:
    """
    Extract owner/name from a GitHub remote URL.

    Raises:
        RepositoryResolutionError: If the URL does not point at github.com.
    """
    match = _GITHUB_REMOTE_PATTERN.search(url.strip())
    if match is None:
        raise RepositoryResolutionError(f"Cannot parse GitHub repository from remote URL: {url!r}")
    return RepositoryCoordinates(owner=match.group(1), name=match.group(2))


def parse_repository_slug(slug: str) -> RepositoryCoordinates:
    """Split an "owner/name" string."""
    owner, sep, name = slug.strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise RepositoryResolutionError(f"Expected 'owner/name', got {slug!r}")
    return RepositoryCoordinates(owner=owner, name=name)


def get_origin_url(cwd: Path) -> str:
    """
    Read the URL of the `origin` remote.

    Raises:
        RepositoryResolutionError: If git is missing, times out, or has no origin.
    """
    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=_GIT_TIMEOUT_SECONDS,
            check=False,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as err:
        raise RepositoryResolutionError(f"Cannot run git to find the origin remote: {err}") from err

    if result.returncode != 0:
        raise RepositoryResolutionError(
            f"git remote get-url origin failed: {result.stderr.strip() or result.returncode}"
        )
    return result.stdout.strip()


def resolve_repository(override: str | None, cwd: Path) -> RepositoryCoordinates:
    """Pick the release target: the configured override, else the origin remote."""
    if override:
        return parse_repository_slug(override)
    return parse_remote_url(get_origin_url(cwd))
