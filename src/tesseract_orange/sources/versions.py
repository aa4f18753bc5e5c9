from __future__ import annotations

import json
import logging
from typing import Any

from ..errors import NetworkError, ResolutionError
from .descriptors import LATEST, ArtifactSpec
from .fetcher import DefaultDownloader, Downloader

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"
TAG_NAME_PREFIX = "v"


def tag_to_version(ref: str) -> str:
    """
    Turn a tag reference into a version string.

    Example:
      refs/tags/v5.3.4 -> 5.3.4
    """
    name = ref.strip()
    if name.startswith(TAG_REF_PREFIX):
        name = name[len(TAG_REF_PREFIX) :]
    if name.startswith(TAG_NAME_PREFIX):
        name = name[len(TAG_NAME_PREFIX) :]
    return name


def parse_tag_listing(raw: bytes, source: str) -> list[str]:
    """
    Parse a tag listing response into tag references, in response order.

    Accepts the GitHub git refs API shape ([{"ref": "refs/tags/1.0"}, ...])
    or a plain JSON array of reference strings.
    """
    try:
        data: Any = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ResolutionError(f"Tag listing is not valid JSON: {source}") from e

    # A single ref comes back as an object, not a list
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ResolutionError(f"Tag listing must be a JSON array: {source}")

    refs: list[str] = []
    for i, item in enumerate(data):
        if isinstance(item, str):
            refs.append(item)
        elif isinstance(item, dict) and isinstance(item.get("ref"), str):
            refs.append(item["ref"])
        else:
            raise ResolutionError(f"Tag listing entry [{i}] has no ref: {source}")
    return refs


class VersionResolver:
    """
    Resolve a version request into a concrete version.

    Results are not memoized; every "latest" request queries the listing.
    """

    def __init__(self, downloader: Downloader | None = None) -> None:
        self._downloader = downloader if downloader is not None else DefaultDownloader()

    def resolve(self, spec: ArtifactSpec, request: str | None = None) -> str:
        request = (spec.version if request is None else request).strip()
        if not request:
            raise ResolutionError(f"Empty version request for {spec.name}")

        if request != LATEST:
            return request

        if not spec.tags_url:
            raise ResolutionError(f"No tag listing configured for {spec.name}; pin a version")

        return self.latest(spec.tags_url, name=spec.name)

    def latest(self, tags_url: str, name: str = "") -> str:
        label = name or tags_url
        try:
            raw = self._downloader.read_bytes(tags_url)
        except NetworkError as e:
            raise ResolutionError(f"Unable to query the tag listing of {label}: {tags_url}") from e

        refs = parse_tag_listing(raw, tags_url)
        if not refs:
            raise ResolutionError(f"Tag listing of {label} is empty: {tags_url}")

        # Listing is assumed chronological-ascending; newest is last
        version = tag_to_version(refs[-1])
        if not version:
            raise ResolutionError(f"Latest tag of {label} is not a version: {refs[-1]!r}")

        logger.info("Latest %s version determined to be %s", label, version)
        return version
