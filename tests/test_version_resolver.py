from __future__ import annotations

import json
from pathlib import Path

import pytest

from tesseract_orange.errors import NetworkError, ResolutionError
from tesseract_orange.sources.descriptors import ArtifactSpec
from tesseract_orange.sources.versions import VersionResolver, parse_tag_listing, tag_to_version


class ListingDownloader:
    def __init__(self, body: bytes) -> None:
        self.body = body
        self.gets: list[str] = []

    def head(self, url: str) -> dict[str, str]:
        raise AssertionError("unexpected HEAD")

    def read_bytes(self, url: str) -> bytes:
        self.gets.append(url)
        return self.body

    def download_to_path(self, url: str, dest: Path) -> None:
        raise AssertionError("unexpected download")


class UnreachableDownloader(ListingDownloader):
    def read_bytes(self, url: str) -> bytes:
        raise NetworkError(f"Request failed: {url}", url=url)


TAGS_URL = "https://api.github.com/repos/example/pkg/git/refs/tags"
SPEC = ArtifactSpec(
    name="pkg",
    url_template="https://example.com/pkg-{version}.tar.gz",
    tags_url=TAGS_URL,
)


def _listing(refs: list[str]) -> bytes:
    return json.dumps([{"ref": r, "object": {"type": "commit"}} for r in refs]).encode()


def test_literal_version_is_returned_without_network() -> None:
    d = ListingDownloader(b"")
    assert VersionResolver(d).resolve(SPEC, "5.3.4") == "5.3.4"
    assert d.gets == []


def test_latest_selects_last_tag() -> None:
    d = ListingDownloader(json.dumps(["refs/tags/1.0.0", "refs/tags/1.1.0"]).encode())
    assert VersionResolver(d).resolve(SPEC, "latest") == "1.1.0"
    assert d.gets == [TAGS_URL]


def test_spec_default_request_is_latest() -> None:
    d = ListingDownloader(_listing(["refs/tags/1.82.0", "refs/tags/1.84.1"]))
    assert VersionResolver(d).resolve(SPEC) == "1.84.1"


def test_latest_strips_v_prefix() -> None:
    d = ListingDownloader(_listing(["refs/tags/v0.9", "refs/tags/v1.0"]))
    assert VersionResolver(d).resolve(SPEC, "latest") == "1.0"


def test_latest_is_deterministic_and_requeries() -> None:
    d = ListingDownloader(_listing(["refs/tags/4.1.0", "refs/tags/5.0.0"]))
    r = VersionResolver(d)
    assert [r.resolve(SPEC, "latest") for _ in range(3)] == ["5.0.0"] * 3
    assert len(d.gets) == 3


@pytest.mark.parametrize("body", [b"[]", b"not json", b'"refs/tags/1.0"', b'[{"sha": "abc"}]'])
def test_latest_bad_listing_raises(body: bytes) -> None:
    with pytest.raises(ResolutionError):
        _ = VersionResolver(ListingDownloader(body)).resolve(SPEC, "latest")


def test_latest_unreachable_listing_raises_resolution_error() -> None:
    with pytest.raises(ResolutionError) as exc:
        _ = VersionResolver(UnreachableDownloader(b"")).resolve(SPEC, "latest")
    assert isinstance(exc.value.__cause__, NetworkError)


def test_latest_without_tags_url_raises() -> None:
    spec = ArtifactSpec(name="pinned", url_template="https://example.com/p-{version}.tgz")
    with pytest.raises(ResolutionError):
        _ = VersionResolver(ListingDownloader(b"[]")).resolve(spec, "latest")


def test_empty_request_raises() -> None:
    with pytest.raises(ResolutionError):
        _ = VersionResolver(ListingDownloader(b"[]")).resolve(SPEC, "  ")


def test_single_ref_object_listing() -> None:
    assert parse_tag_listing(b'{"ref": "refs/tags/2.0"}', "x") == ["refs/tags/2.0"]


@pytest.mark.parametrize(
    "ref,expected",
    [("refs/tags/5.3.4", "5.3.4"), ("refs/tags/v1.2", "1.2"), ("v3", "3"), ("1.0", "1.0")],
)
def test_tag_to_version(ref: str, expected: str) -> None:
    assert tag_to_version(ref) == expected
