# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Minimal GitHub REST client for release management.

Only the three calls the publisher needs are implemented:

    GET  /repos/{owner}/{repo}/releases/tags/{tag}   look up a release
    POST /repos/{owner}/{repo}/releases              create a draft release
    POST {upload_url}?name={asset}                   attach an asset

Requests are made one at a time over a single httpx.Client. There is no
retry: a failed call raises GitHubAPIError (non-2xx) or an httpx transport
error and the caller decides what that means.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from relpack import __version__
from relpack.logging.logger import get_logger
from relpack.release.exceptions import GitHubAPIError
from relpack.release.publishing.remote import RepositoryCoordinates

_logger: logging.Logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.github.com"
_UPLOADS_URL = "https://uploads.github.com"
_API_VERSION = "2022-11-28"


@dataclass(frozen=True)
class ReleaseRecord:
    """The subset of a GitHub release object the publisher uses."""

    id: int
    tag_name: str
    html_url: str
    upload_url: str
    draft: bool

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReleaseRecord":
        return cls(
            id=int(data["id"]),
            tag_name=str(data.get("tag_name", "")),
            html_url=str(data.get("html_url", "")),
            upload_url=str(data.get("upload_url", "")),
            draft=bool(data.get("draft", False)),
        )


def _build_headers(token: str) -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "User-Agent": f"relpack/{__version__}",
        "X-GitHub-Api-Version": _API_VERSION,
    }


def _raise_for_status(response: httpx.Response, action: str) -> None:
    if response.is_success:
        return
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = str(body.get("message", ""))
    else:
        detail = response.text[:200]
    raise GitHubAPIError(
        f"{action} failed: HTTP {response.status_code} {detail}".rstrip(),
        status_code=response.status_code,
    )


def _parse_release(response: httpx.Response, action: str) -> ReleaseRecord:
    """Decode a release object, turning a malformed body into GitHubAPIError."""
    try:
        body = response.json()
        if not isinstance(body, dict):
            raise TypeError(f"expected a JSON object, got {type(body).__name__}")
        return ReleaseRecord.from_api(body)
    except (ValueError, KeyError, TypeError) as err:
        raise GitHubAPIError(
            f"{action} returned an unusable body (HTTP {response.status_code}): {err}",
            status_code=response.status_code,
        ) from err


class GitHubClient:
    """
    Thin wrapper around httpx.Client with GitHub auth and API headers.

    Use as a context manager so the connection pool is closed when the
    publish run ends.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=api_url,
            headers=_build_headers(token),
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_release_by_tag(self, repository: RepositoryCoordinates, tag: str) -> ReleaseRecord | None:
        """Return the release for `tag`, or None when GitHub reports 404."""
        response = self._client.get(
            f"/repos/{repository.full_name}/releases/tags/{quote(tag, safe='')}"
        )
        if response.status_code == 404:
            return None
        _raise_for_status(response, f"Looking up release {tag}")
        return _parse_release(response, f"Looking up release {tag}")

    def create_release(
        self,
        repository: RepositoryCoordinates,
        tag: str,
        name: str,
        body: str,
        draft: bool = True,
        prerelease: bool = False,
    ) -> ReleaseRecord:
        response = self._client.post(
            f"/repos/{repository.full_name}/releases",
            json={
                "tag_name": tag,
                "name": name,
                "body": body,
                "draft": draft,
                "prerelease": prerelease,
            },
        )
        _raise_for_status(response, f"Creating release {tag}")
        return _parse_release(response, f"Creating release {tag}")

    def upload_asset(
        self,
        repository: RepositoryCoordinates,
        release: ReleaseRecord,
        name: str,
        path: Path,
    ) -> None:
        """
        Attach the file at `path` to `release` as asset `name`.

        The upload URL GitHub hands back is a URI template
        (".../assets{?name,label}"); the template part is dropped and the
        name passed as a query parameter. The file is streamed from disk, so
        archives of any size upload in constant memory. Any 2xx counts as
        success; the response body is not inspected.

        Raises:
            GitHubAPIError: On a non-2xx response.
            httpx.HTTPError: On transport failures.
            OSError: If the file can't be opened.
        """
        upload_url = release.upload_url.split("{", 1)[0]
        if not upload_url:
            upload_url = f"{_UPLOADS_URL}/repos/{repository.full_name}/releases/{release.id}/assets"

        size = path.stat().st_size
        with open(path, "rb") as fh:
            response = self._client.post(
                upload_url,
                params={"name": name},
                content=fh,
                headers={
                    "Content-Type": "application/octet-stream",
                    "Content-Length": str(size),
                },
            )
        _raise_for_status(response, f"Uploading {name}")
        _logger.debug("Asset uploaded", extra={"asset": name, "bytes": size})
