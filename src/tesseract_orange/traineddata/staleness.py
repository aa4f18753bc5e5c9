from __future__ import annotations

import dataclasses
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..config import ToolchainConfig
from ..errors import FilesystemError, RemoteMetadataError
from ..sources.fetcher import DefaultDownloader, Downloader
from .assets import BASE_URL, TraineddataAsset

logger = logging.getLogger(__name__)

Outcome = Literal["downloaded", "up_to_date", "replaced"]

BACKUP_MARKER = ".old."

_NON_NEGATIVE_INT = re.compile(r"^(0|[1-9][0-9]*)$")


@dataclass(frozen=True, slots=True)
class StalenessResult:
    asset: TraineddataAsset
    outcome: Outcome
    backup_path: Path | None = None


def parse_content_length(headers, url: str) -> int:
    raw = None
    for k, v in headers.items():
        if k.lower() == "content-length":
            raw = v
    if raw is None:
        raise RemoteMetadataError(f"No content-length in the response headers of {url}")

    value = raw.strip().rstrip("\r")
    if not _NON_NEGATIVE_INT.match(value):
        raise RemoteMetadataError(f'Invalid remote filesize "{value}" retrieved from {url}')
    return int(value)


def backup_path_for(path: Path, timestamp: str) -> Path:
    return path.with_name(f"{path.name}{BACKUP_MARKER}{timestamp}")


class StalenessChecker:
    """
    Keep one installed traineddata file current.

    A local copy is stale when its byte size differs from the remote
    content-length. Two different payloads of the same size look fresh; only
    sizes are compared. Stale copies are renamed, never deleted.
    """

    def __init__(
        self,
        downloader: Downloader | None = None,
        config: ToolchainConfig | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self._config = config if config is not None else ToolchainConfig.from_env()
        self._downloader = (
            downloader if downloader is not None else DefaultDownloader(progress=self._config.progress)
        )
        self._base_url = base_url

    def ensure(
        self,
        identifier: str,
        tier: str,
        tessdata_dir: Path,
        category: str | None = None,
    ) -> StalenessResult:
        asset = TraineddataAsset.locate(
            identifier, tier, tessdata_dir, category=category, base_url=self._base_url
        )

        if not asset.local_path.exists():
            logger.info("The %s traineddata file does not exist locally", asset.identifier)
            self._download(asset)
            return StalenessResult(asset=asset, outcome="downloaded")

        local_size = asset.local_path.stat().st_size
        remote_size = parse_content_length(self._downloader.head(asset.url), asset.url)
        asset = dataclasses.replace(asset, local_size=local_size, remote_size=remote_size)
        logger.debug(
            "%s: local size %d, remote size %d", asset.identifier, local_size, remote_size
        )

        if local_size == remote_size:
            logger.info("The local %s traineddata file is up-to-date, skipping", asset.identifier)
            return StalenessResult(asset=asset, outcome="up_to_date")

        logger.info("The local %s traineddata file seems to be outdated, moving", asset.identifier)
        backup = self._move_aside(asset.local_path)
        self._download(asset)
        return StalenessResult(asset=asset, outcome="replaced", backup_path=backup)

    def _move_aside(self, path: Path) -> Path:
        backup = backup_path_for(path, self._config.operation_timestamp)
        if backup.exists():
            raise FilesystemError(f"Backup file already exists, refusing to overwrite: {backup}")
        try:
            path.rename(backup)
        except OSError as e:
            raise FilesystemError(f"Unable to move the old traineddata file {path} to {backup}") from e
        logger.info("Renamed %s -> %s", path, backup)
        return backup

    def _download(self, asset: TraineddataAsset) -> None:
        try:
            asset.local_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Unable to create the directory {asset.local_path.parent}") from e

        logger.info("Downloading the %s traineddata of the %s set", asset.identifier, asset.tier)
        self._downloader.download_to_path(asset.url, asset.local_path)
