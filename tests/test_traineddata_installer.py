from __future__ import annotations

import sys
from pathlib import Path

import pytest

from tesseract_orange.config import ToolchainConfig
from tesseract_orange.errors import TraineddataError
from tesseract_orange.traineddata.assets import (
    TraineddataAsset,
    classify_identifier,
    traineddata_url,
)
from tesseract_orange.traineddata.installer import (
    bundled_tessdata_dir,
    install_traineddata,
    resolve_tessdata_dir,
)


class RecordingRemote:
    def __init__(self) -> None:
        self.downloads: list[str] = []

    def head(self, url: str) -> dict[str, str]:
        raise AssertionError("nothing is installed yet")

    def read_bytes(self, url: str) -> bytes:
        raise AssertionError("unexpected GET")

    def download_to_path(self, url: str, dest: Path) -> None:
        self.downloads.append(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"model")


@pytest.mark.parametrize(
    "identifier,category", [("eng", "language"), ("chi_tra", "language"), ("Latin", "script")]
)
def test_classify_identifier(identifier: str, category: str) -> None:
    assert classify_identifier(identifier) == category


@pytest.mark.parametrize(
    "tier,repo", [("best", "tessdata_best"), ("fast", "tessdata_fast"), ("legacy", "tessdata")]
)
def test_traineddata_url_per_tier(tier: str, repo: str) -> None:
    assert traineddata_url("deu", tier, "language") == (
        f"https://github.com/tesseract-ocr/{repo}/raw/main/deu.traineddata"
    )


def test_invalid_tier_and_category() -> None:
    with pytest.raises(TraineddataError):
        _ = traineddata_url("eng", "medium", "language")
    with pytest.raises(TraineddataError):
        _ = traineddata_url("eng", "fast", "font")


def test_locate_builds_local_path(tmp_path: Path) -> None:
    asset = TraineddataAsset.locate("Cyrillic", "fast", tmp_path)
    assert asset.local_path == tmp_path / "script" / "Cyrillic.traineddata"
    assert asset.local_size is None and asset.remote_size is None


def test_install_languages_before_scripts(tmp_path: Path) -> None:
    remote = RecordingRemote()
    results = install_traineddata(
        "fast",
        ["Latin", "eng", "HanT", "jpn"],
        tmp_path,
        config=ToolchainConfig(cache_dir=tmp_path / "cache"),
        downloader=remote,
    )

    assert [r.asset.identifier for r in results] == ["eng", "jpn", "Latin", "HanT"]
    assert all(r.outcome == "downloaded" for r in results)
    assert (tmp_path / "script" / "HanT.traineddata").exists()


def test_install_rejects_unknown_tier(tmp_path: Path) -> None:
    with pytest.raises(TraineddataError):
        install_traineddata("medium", ["eng"], tmp_path, downloader=RecordingRemote())


def test_resolve_tessdata_dir_precedence(tmp_path: Path) -> None:
    explicit = tmp_path / "explicit"
    env = {"TESSDATA_DIR": str(tmp_path / "dir"), "TESSDATA_PREFIX": str(tmp_path / "prefix")}

    assert resolve_tessdata_dir(explicit, env=env) == explicit
    assert resolve_tessdata_dir(env=env) == tmp_path / "dir"
    assert resolve_tessdata_dir(env={"TESSDATA_PREFIX": str(tmp_path / "prefix")}) == (
        tmp_path / "prefix" / "tessdata"
    )
    assert (tmp_path / "prefix" / "tessdata").is_dir()


def test_resolve_tessdata_dir_requires_a_location(tmp_path: Path) -> None:
    with pytest.raises(TraineddataError):
        _ = resolve_tessdata_dir(env={}, bundled=tmp_path / "share" / "tessdata")


def test_resolve_tessdata_dir_falls_back_to_existing_bundled_dir(tmp_path: Path) -> None:
    bundled = tmp_path / "share" / "tessdata"
    bundled.mkdir(parents=True)

    assert resolve_tessdata_dir(env={}, bundled=bundled) == bundled
    # environment still wins over the bundled directory
    env = {"TESSDATA_PREFIX": str(tmp_path / "prefix")}
    assert resolve_tessdata_dir(env=env, bundled=bundled) == tmp_path / "prefix" / "tessdata"


@pytest.mark.parametrize("key", ["TESSDATA_DIR", "TESSDATA_PREFIX"])
def test_resolve_tessdata_dir_empty_variable_counts_as_set(tmp_path: Path, key: str) -> None:
    bundled = tmp_path / "share" / "tessdata"
    bundled.mkdir(parents=True)

    with pytest.raises(TraineddataError, match=f"{key} is set but empty"):
        _ = resolve_tessdata_dir(env={key: ""}, bundled=bundled)


def test_bundled_tessdata_dir_is_under_the_install_prefix() -> None:
    assert bundled_tessdata_dir() == Path(sys.prefix) / "share" / "tessdata"
