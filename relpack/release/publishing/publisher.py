# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release publisher: pushes a finished build to a draft GitHub release.

The publish flow for a version V is:
  1. Read <output_root>/V/info.json (missing → ManifestNotFoundError, nothing else happens)
  2. No token in the environment → log and stop, nothing is sent anywhere
  3. Resolve owner/name from config or the origin git remote
  4. Fetch release "vV", or create it as a draft named "V"
  5. Upload every listed archive that exists on disk, then info.json itself

Uploads run strictly one after another because GitHub rejects concurrent
asset creation on the same release. A failed upload is logged and counted as
processed; the remaining assets still go up. Errors in steps 3 and 4 abort
the publish and propagate to the caller.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import httpx

from relpack.config.schema import PublishConfig
from relpack.logging.logger import get_logger
from relpack.release.exceptions import GitHubAPIError, ManifestNotFoundError
from relpack.release.manifests.manifest import MANIFEST_FILENAME, AssetRecord, load_manifest
from relpack.release.publishing.github import GitHubClient, ReleaseRecord
from relpack.release.publishing.progress import ProgressObserver, ProgressTracker, log_progress
from relpack.release.publishing.remote import RepositoryCoordinates, resolve_repository
from relpack.utils.paths import validate_path_within

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class BuildOutput:
    """A build read back from disk: what the manifest says and where it lives."""

    version: str
    files: tuple[AssetRecord, ...]
    output_dir: Path

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / MANIFEST_FILENAME


@dataclass(frozen=True)
class UploadItem:
    name: str
    path: Path
    size: int


@dataclass(frozen=True)
class PublishResult:
    """Outcome of a publish run. `skipped` means no remote call was made."""

    skipped: bool
    release_url: str | None = None
    uploaded: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()


def release_tag(version: str) -> str:
    return f"v{version}"


def load_build_result(output_root: Path, version: str) -> BuildOutput:
    """
    Read the manifest written by `relpack build` for `version`.

    Raises:
        ManifestNotFoundError: If the version directory or info.json is missing.
        ManifestFormatError: If info.json is malformed.
    """
    output_dir = output_root / version
    if not output_dir.is_dir():
        raise ManifestNotFoundError(
            f"Build directory not found: {output_dir}. Run `relpack build` first."
        )

    manifest = load_manifest(output_dir / MANIFEST_FILENAME)
    return BuildOutput(version=manifest.version, files=manifest.files, output_dir=output_dir)


def collect_upload_items(build: BuildOutput) -> list[UploadItem]:
    """
    Build the upload set: listed archives present on disk, then info.json.

    Missing archives are dropped without error. Names that would resolve
    outside the build directory are dropped with a warning.
    """
    items: list[UploadItem] = []
    for record in build.files:
        try:
            path = validate_path_within(build.output_dir / record.url, build.output_dir)
        except ValueError:
            _logger.warning("Skipping asset outside build directory", extra={"asset": record.url})
            continue
        if path.is_file():
            items.append(UploadItem(name=record.url, path=path, size=record.size))

    if build.manifest_path.is_file():
        items.append(
            UploadItem(
                name=MANIFEST_FILENAME,
                path=build.manifest_path,
                size=build.manifest_path.stat().st_size,
            )
        )
    return items


def read_token(settings: PublishConfig, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the access token from the configured environment variable, if set."""
    env = os.environ if environ is None else environ
    token = env.get(settings.token_env, "").strip()
    return token or None


def find_or_create_release(
    client: GitHubClient,
    repository: RepositoryCoordinates,
    version: str,
    body_template: str,
) -> ReleaseRecord:
    """
    Return the release tagged v<version>, creating it as a draft if absent.

    Raises:
        GitHubAPIError: If the lookup fails with anything but 404, or creation fails.
    """
    tag = release_tag(version)
    release = client.get_release_by_tag(repository, tag)
    if release is not None:
        _logger.info("Found existing release", extra={"tag": tag, "url": release.html_url})
        return release

    release = client.create_release(
        repository,
        tag=tag,
        name=version,
        body=body_template.format(version=version),
        draft=True,
        prerelease=False,
    )
    _logger.info("Created draft release", extra={"tag": tag, "url": release.html_url})
    return release


def upload_assets(
    client: GitHubClient,
    repository: RepositoryCoordinates,
    release: ReleaseRecord,
    items: list[UploadItem],
    on_progress: ProgressObserver | None = None,
) -> tuple[list[str], list[str]]:
    """
    Upload `items` one at a time.

    Returns:
        (uploaded_names, failed_names)
    """
    tracker = ProgressTracker(
        files_total=len(items),
        bytes_total=sum(item.size for item in items),
    )
    _logger.info(
        "Uploading assets",
        extra={"count": tracker.files_total, "total_bytes": tracker.bytes_total},
    )

    uploaded: list[str] = []
    failed: list[str] = []
    for item in items:
        try:
            client.upload_asset(repository, release, item.name, item.path)
        except (GitHubAPIError, httpx.HTTPError, OSError) as err:
            _logger.error("Upload failed", extra={"asset": item.name, "error": str(err)})
            failed.append(item.name)
            succeeded = False
        else:
            uploaded.append(item.name)
            succeeded = True

        progress = tracker.advance(item.name, item.size, succeeded)
        if on_progress is not None:
            on_progress(progress)

    _logger.info(
        "Upload finished",
        extra={"uploaded": len(uploaded), "failed": len(failed), "total": tracker.files_total},
    )
    return uploaded, failed


def publish_release(
    build: BuildOutput,
    settings: PublishConfig,
    project_root: Path,
    token: str | None,
    client: GitHubClient | None = None,
    on_progress: ProgressObserver | None = log_progress,
    dry_run: bool = False,
) -> PublishResult:
    """
    Make sure a draft release for `build` exists with all assets attached.

    Args:
        build: The build read back by load_build_result.
        settings: The publish section of the configuration.
        project_root: Where to run git when resolving the origin remote.
        token: GitHub access token; None skips publishing entirely.
        client: Pre-built client (tests); one is created from settings otherwise.
        on_progress: Observer called after every processed asset.
        dry_run: Log the upload plan without contacting GitHub.

    Raises:
        RepositoryResolutionError: If owner/name cannot be determined.
        GitHubAPIError: If the release cannot be looked up or created.
        httpx.HTTPError: On transport failures outside individual uploads.
    """
    if dry_run:
        items = collect_upload_items(build)
        _logger.info(
            "Dry run, would upload assets",
            extra={
                "tag": release_tag(build.version),
                "assets": [item.name for item in items],
                "total_bytes": sum(item.size for item in items),
            },
        )
        return PublishResult(skipped=True)

    if token is None:
        _logger.warning(
            "No access token set, skipping GitHub release",
            extra={"token_env": settings.token_env},
        )
        return PublishResult(skipped=True)

    repository = resolve_repository(settings.repository, project_root)
    _logger.info("Publishing to GitHub", extra={"repository": repository.full_name})

    owns_client = client is None
    if client is None:
        client = GitHubClient(token, api_url=settings.api_url, timeout=settings.timeout_seconds)

    try:
        release = find_or_create_release(client, repository, build.version, settings.release_body)
        items = collect_upload_items(build)
        uploaded, failed = upload_assets(client, repository, release, items, on_progress)
    finally:
        if owns_client:
            client.close()

    _logger.info(
        "GitHub release ready",
        extra={"url": release.html_url, "uploaded": len(uploaded), "failed": len(failed)},
    )
    return PublishResult(
        skipped=False,
        release_url=release.html_url,
        uploaded=tuple(uploaded),
        failed=tuple(failed),
    )
