from __future__ import annotations

import re
from pathlib import PurePosixPath
from urllib.parse import unquote, urlsplit

from ..errors import FilenameInferenceError
from .fetcher import DefaultDownloader, Downloader

_FILENAME_STAR = re.compile(r"filename\*\s*=\s*([^;]+)", re.IGNORECASE)
_FILENAME = re.compile(r"""filename\s*=\s*(?:"([^"]*)"|([^;]+))""", re.IGNORECASE)


def filename_from_content_disposition(value: str | None) -> str | None:
    """
    Extract the filename of an attachment-style Content-Disposition value.

    Accepts:
      attachment; filename=foo.tar.gz
      attachment; filename="foo.tar.gz"
      attachment; filename*=UTF-8''foo.tar.gz

    Returns None for inline dispositions, when no filename is present, or
    when the name is hidden (".", "..", ".index.json", ...).
    """
    if not value:
        return None

    value = value.strip().rstrip("\r")
    disposition = value.split(";", 1)[0].strip().lower()
    if disposition != "attachment":
        return None

    name: str | None = None
    m = _FILENAME_STAR.search(value)
    if m:
        raw = m.group(1).strip().strip('"')
        # charset'language'percent-encoded
        name = unquote(raw.split("'", 2)[-1])
    else:
        m = _FILENAME.search(value)
        if m:
            name = m.group(1) if m.group(1) is not None else m.group(2)

    if name is None:
        return None

    name = PurePosixPath(name.strip().rstrip("\r").replace("\\", "/")).name
    return name if is_cacheable_filename(name) else None


def filename_from_url(url: str) -> str:
    """
    Last path segment of url, query string and fragment removed.

    A path that ends in "/" has no discernible filename; neither has a
    segment that is empty or starts with ".".
    """
    path = urlsplit(url).path
    if not path or path.endswith("/"):
        raise FilenameInferenceError(f"Unable to infer a filename from URL: {url}")

    name = unquote(path.rsplit("/", 1)[-1])
    if not is_cacheable_filename(name):
        raise FilenameInferenceError(f"Unable to infer a filename from URL: {url}")
    return name


class FilenameResolver:
    """Decide the local filename for a download from server headers or the URL."""

    def __init__(self, downloader: Downloader | None = None) -> None:
        self._downloader = downloader if downloader is not None else DefaultDownloader()

    def resolve(self, url: str) -> str:
        # NetworkError from the header request is fatal and propagates as-is
        headers = self._downloader.head(url)
        disposition = _header(headers, "content-disposition")

        name = filename_from_content_disposition(disposition)
        if name:
            return name
        return filename_from_url(url)


def _header(headers, key: str) -> str | None:
    for k, v in headers.items():
        if k.lower() == key:
            return v
    return None


def is_cacheable_filename(name: str) -> bool:
    # Dot names are reserved for the cache index and staged downloads
    return bool(name) and not name.startswith(".") and "/" not in name and "\\" not in name
