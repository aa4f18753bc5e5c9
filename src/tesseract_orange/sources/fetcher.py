from __future__ import annotations

import logging
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from http.client import HTTPException
from pathlib import Path
from typing import Protocol
from urllib.error import URLError

from tqdm.auto import tqdm

from ..errors import FilesystemError, NetworkError
from ..util import format_bytes, staged_file

logger = logging.getLogger(__name__)

_CHUNK = 1024 * 1024


class Downloader(Protocol):
    def head(self, url: str) -> Mapping[str, str]:
        """Return the response headers of a header-only request (redirects followed)."""
        raise NotImplementedError

    def read_bytes(self, url: str) -> bytes:
        """Return the body of a GET request (redirects followed)."""
        raise NotImplementedError

    def download_to_path(self, url: str, dest: Path) -> None:
        """Download the content at url into dest (creating parent dirs if needed)."""
        raise NotImplementedError


class _KeepMethodRedirectHandler(urllib.request.HTTPRedirectHandler):
    # urllib turns a redirected HEAD into a GET on some Python versions
    def redirect_request(self, req, fp, code, msg, headers, newurl):
        new = super().redirect_request(req, fp, code, msg, headers, newurl)
        if new is not None and req.get_method() == "HEAD":
            new.method = "HEAD"
        return new


@dataclass(frozen=True, slots=True)
class DefaultDownloader:
    """
    Default downloader using stdlib urllib.

    Supports:
      - https://, http://
      - file:///... (useful for offline tests)

    No retries: a failed request or read raises NetworkError, a failure to
    stage or move the file locally raises FilesystemError.
    """

    timeout_seconds: float = 60.0
    progress: bool = False
    user_agent: str = "tesseract-orange"

    def _open(self, url: str, method: str = "GET"):
        opener = urllib.request.build_opener(_KeepMethodRedirectHandler())
        req = urllib.request.Request(url, method=method, headers={"User-Agent": self.user_agent})
        return opener.open(req, timeout=self.timeout_seconds)

    def head(self, url: str) -> Mapping[str, str]:
        try:
            with self._open(url, method="HEAD") as r:
                return {k.lower(): v for k, v in r.headers.items()}
        except (OSError, URLError, ValueError) as e:
            raise NetworkError(f"Header request failed: {url} ({e})", url=url) from e

    def read_bytes(self, url: str) -> bytes:
        try:
            with self._open(url) as r:
                return r.read()
        except (OSError, URLError, ValueError) as e:
            raise NetworkError(f"Request failed: {url} ({e})", url=url) from e

    def download_to_path(self, url: str, dest: Path) -> None:
        try:
            r = self._open(url)
        except (OSError, URLError, ValueError) as e:
            raise NetworkError(f"Failed to download: {url} ({e})", url=url) from e

        with r:
            total = _content_length(r.headers.get("Content-Length"))
            logger.info("Downloading %s (%s)", url, format_bytes(total))
            try:
                with staged_file(dest) as tmp, tmp.open("wb") as f, tqdm(
                    total=total,
                    unit="B",
                    unit_scale=True,
                    desc=dest.name,
                    disable=not self.progress,
                ) as bar:
                    for chunk in iter(lambda: _read_chunk(r, url), b""):
                        f.write(chunk)
                        bar.update(len(chunk))
            except OSError as e:
                # staging dir, temp file, writes and the final move are all local
                raise FilesystemError(f"Failed to write download to {dest} ({e})") from e


def _read_chunk(r, url: str) -> bytes:
    try:
        return r.read(_CHUNK)
    except (OSError, HTTPException, ValueError) as e:
        raise NetworkError(f"Failed to download: {url} ({e})", url=url) from e


def _content_length(raw: str | None) -> int | None:
    if raw is None:
        return None
    raw = raw.strip()
    return int(raw) if raw.isdigit() else None
