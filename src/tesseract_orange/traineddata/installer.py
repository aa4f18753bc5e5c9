from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

from ..config import ToolchainConfig
from ..errors import FilesystemError, ToolchainError, TraineddataError
from ..sources.fetcher import Downloader
from .assets import classify_identifier, validate_tier
from .staleness import StalenessChecker, StalenessResult

logger = logging.getLogger(__name__)


def bundled_tessdata_dir() -> Path:
    """share/tessdata under the prefix this toolchain is installed into."""
    return Path(sys.prefix) / "share" / "tessdata"


def resolve_tessdata_dir(
    explicit: Path | None = None,
    env: Mapping[str, str] | None = None,
    bundled: Path | None = None,
) -> Path:
    """
    Pick the Tesseract data directory.

    Order:
      1. explicit path
      2. TESSDATA_DIR
      3. $TESSDATA_PREFIX/tessdata (TESSDATA_PREFIX is the parent of tessdata)
      4. the bundled share/tessdata directory, only if it already exists

    A variable that is set counts even when empty; an empty value is an error
    rather than a reason to try the next source.

    The directory is created when missing.
    """
    env = os.environ if env is None else env
    bundled = bundled_tessdata_dir() if bundled is None else bundled

    if explicit is not None:
        tessdata_dir = explicit
    elif "TESSDATA_DIR" in env:
        tessdata_dir = Path(_non_empty(env, "TESSDATA_DIR"))
    elif "TESSDATA_PREFIX" in env:
        tessdata_dir = Path(_non_empty(env, "TESSDATA_PREFIX")) / "tessdata"
    elif bundled.exists():
        tessdata_dir = bundled
    else:
        raise TraineddataError(
            "Unable to determine the Tesseract data directory path "
            "(pass --tessdata-dir or set TESSDATA_DIR / TESSDATA_PREFIX)"
        )

    tessdata_dir = tessdata_dir.expanduser()
    try:
        tessdata_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Unable to create the Tesseract data directory: {tessdata_dir}") from e
    return tessdata_dir


def _non_empty(env: Mapping[str, str], key: str) -> str:
    value = env[key]
    if not value.strip():
        raise TraineddataError(f"{key} is set but empty")
    return value


def install_traineddata(
    tier: str,
    identifiers: Iterable[str],
    tessdata_dir: Path,
    *,
    config: ToolchainConfig | None = None,
    downloader: Downloader | None = None,
) -> list[StalenessResult]:
    """Install languages first, then scripts. Stops at the first failure."""
    validate_tier(tier)

    languages: list[str] = []
    scripts: list[str] = []
    for identifier in identifiers:
        if classify_identifier(identifier) == "language":
            languages.append(identifier.strip())
        else:
            scripts.append(identifier.strip())

    checker = StalenessChecker(downloader=downloader, config=config)
    results: list[StalenessResult] = []
    for identifier in languages:
        results.append(checker.ensure(identifier, tier, tessdata_dir, category="language"))
    for identifier in scripts:
        results.append(checker.ensure(identifier, tier, tessdata_dir, category="script"))
    return results


def traineddata_install_cmd(
    tier: str,
    identifiers: list[str],
    *,
    tessdata_dir: Path | None,
    config: ToolchainConfig,
) -> int:
    try:
        target = resolve_tessdata_dir(tessdata_dir)
        results = install_traineddata(tier, identifiers, target, config=config)
    except ToolchainError as e:
        print(str(e))
        return 2

    for r in results:
        line = f"{r.outcome}\t{r.asset.local_path}"
        if r.backup_path is not None:
            line += f"\t(previous copy: {r.backup_path})"
        print(line)
    return 0
