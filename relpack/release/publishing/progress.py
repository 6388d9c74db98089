# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Aggregate upload progress.

Every asset counts toward progress once it has been processed, whether the
upload succeeded or not, so the counters always end at total/total.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from relpack.logging.logger import get_logger

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadProgress:
    asset_name: str
    succeeded: bool
    files_done: int
    files_total: int
    bytes_done: int
    bytes_total: int

    @property
    def file_percent(self) -> float:
        if self.files_total == 0:
            return 100.0
        return round(self.files_done / self.files_total * 100, 1)

    @property
    def byte_percent(self) -> float:
        if self.bytes_total == 0:
            return 100.0
        return round(self.bytes_done / self.bytes_total * 100, 1)


ProgressObserver = Callable[[UploadProgress], None]


class ProgressTracker:
    """Running totals for one batch of uploads."""

    def __init__(self, files_total: int, bytes_total: int) -> None:
        self.files_total = files_total
        self.bytes_total = bytes_total
        self.files_done = 0
        self.bytes_done = 0

    def advance(self, asset_name: str, size: int, succeeded: bool) -> UploadProgress:
        self.files_done += 1
        self.bytes_done += size
        return UploadProgress(
            asset_name=asset_name,
            succeeded=succeeded,
            files_done=self.files_done,
            files_total=self.files_total,
            bytes_done=self.bytes_done,
            bytes_total=self.bytes_total,
        )


def log_progress(progress: UploadProgress) -> None:
    """Default observer: one structured log line per processed asset."""
    _logger.info(
        "Upload progress",
        extra={
            "asset": progress.asset_name,
            "succeeded": progress.succeeded,
            "files": f"{progress.files_done}/{progress.files_total}",
            "file_percent": progress.file_percent,
            "byte_percent": progress.byte_percent,
        },
    )
