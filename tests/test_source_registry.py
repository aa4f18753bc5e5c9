from __future__ import annotations

import pytest

from tesseract_orange.errors import SourceNotFoundError
from tesseract_orange.sources.descriptors import VERSION_PLACEHOLDER, ArtifactSpec
from tesseract_orange.sources.registry import SourceRegistry


def test_registry_list_sorted() -> None:
    r = SourceRegistry(
        _items={
            "b": ArtifactSpec(name="b", url_template="https://example.com/b-{version}.tar"),
            "a": ArtifactSpec(name="a", url_template="https://example.com/a-{version}.tar"),
        }
    )
    assert r.list() == ["a", "b"]


def test_registry_get_missing_raises() -> None:
    r = SourceRegistry.builtins()
    with pytest.raises(SourceNotFoundError):
        _ = r.get("does_not_exist")
    with pytest.raises(SourceNotFoundError):
        _ = r.get("  ")


def test_builtins_cover_both_upstream_projects() -> None:
    r = SourceRegistry.builtins()
    assert r.list() == ["leptonica", "tesseract"]

    for name in r.list():
        spec = r.get(name)
        assert spec.is_latest()
        assert VERSION_PLACEHOLDER in spec.url_template
        assert spec.tags_url and spec.tags_url.endswith("/git/refs/tags")


def test_builtin_urls_render() -> None:
    r = SourceRegistry.builtins()
    assert r.get("tesseract").render_url("5.3.4") == (
        "https://github.com/tesseract-ocr/tesseract/archive/refs/tags/5.3.4.tar.gz"
    )
    assert r.get("leptonica").render_url("1.84.1").endswith(
        "/releases/download/1.84.1/leptonica-1.84.1.tar.gz"
    )


def test_with_version_keeps_everything_else() -> None:
    spec = SourceRegistry.builtins().get("tesseract").with_version("5.3.4")
    assert spec.version == "5.3.4"
    assert not spec.is_latest()
    assert spec.name == "tesseract"
