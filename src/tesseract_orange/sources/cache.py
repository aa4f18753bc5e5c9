from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..config import get_cache_root
from ..errors import FilesystemError
from .descriptors import ArtifactSpec
from .fetcher import DefaultDownloader, Downloader
from .filenames import FilenameResolver, is_cacheable_filename

logger = logging.getLogger(__name__)

INDEX_FILENAME = ".index.json"
INDEX_SCHEMA_VERSION = 1


@dataclass(frozen=True, slots=True)
class CacheEntry:
    path: Path
    url: str
    exists: bool


class ArtifactCache:
    """
    Flat directory of downloaded source archives.

    The resolved filename is the only cache key; an existing file is trusted
    without any integrity check. .index.json remembers which filename each URL
    resolved to so that a warm cache needs no network call at all.
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        downloader: Downloader | None = None,
    ) -> None:
        self.cache_dir = (cache_dir if cache_dir is not None else get_cache_root()).resolve()
        self._downloader = downloader if downloader is not None else DefaultDownloader()
        self._filenames = FilenameResolver(self._downloader)

    def lookup(self, url: str) -> CacheEntry:
        known = self._read_index().get(url)
        if known is not None:
            path = self.cache_dir / known
            if path.is_file():
                return CacheEntry(path=path, url=url, exists=True)

        path = self.cache_dir / self._filenames.resolve(url)
        return CacheEntry(path=path, url=url, exists=path.is_file())

    def acquire(self, spec: ArtifactSpec, version: str) -> Path:
        """
        Ensure the archive of spec at version is cached and return its path.

        Re-running with the same version and an unchanged cache directory
        performs zero network traffic.
        """
        url = spec.render_url(version)
        self._ensure_dir()

        entry = self.lookup(url)
        if entry.exists:
            logger.info("Using cached %s archive: %s", spec.name, entry.path)
            self._remember(url, entry.path.name)
            return entry.path

        logger.info("Fetching %s %s from %s", spec.name, version, url)
        # download_to_path stages into a temp file; a failure leaves nothing at entry.path
        self._downloader.download_to_path(url, entry.path)
        self._remember(url, entry.path.name)
        return entry.path

    def _ensure_dir(self) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Unable to create the cache directory: {self.cache_dir}") from e

    def _index_path(self) -> Path:
        return self.cache_dir / INDEX_FILENAME

    def _read_index(self) -> dict[str, str]:
        path = self._index_path()
        try:
            data: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError):
            return {}

        if not isinstance(data, dict) or data.get("schema_version") != INDEX_SCHEMA_VERSION:
            return {}
        urls = data.get("urls")
        if not isinstance(urls, dict):
            return {}

        out: dict[str, str] = {}
        for k, v in urls.items():
            # Only bare, non-hidden filenames; anything else is ignored
            if isinstance(k, str) and isinstance(v, str) and is_cacheable_filename(v):
                out[k] = v
        return out

    def _remember(self, url: str, filename: str) -> None:
        urls = self._read_index()
        if urls.get(url) == filename:
            return
        urls[url] = filename

        path = self._index_path()
        try:
            path.write_text(
                json.dumps(
                    {"schema_version": INDEX_SCHEMA_VERSION, "urls": urls},
                    indent=2,
                    sort_keys=True,
                ),
                encoding="utf-8",
            )
        except OSError as e:
            raise FilesystemError(f"Failed to write cache index: {path}") from e
