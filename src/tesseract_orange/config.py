from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_cache_dir

from .util import operation_timestamp

ENV_CACHE_DIR = "TESSERACT_ORANGE_CACHE_DIR"


def get_cache_root() -> Path:
    """
    Return the source archive cache directory.

    Override with env var:
      TESSERACT_ORANGE_CACHE_DIR=/path/to/cache

    Layout (flat, one file per archive):
      {cache_root}/{archive filename}

    Default:
      platformdirs.user_cache_dir("tesseract-orange") / "sources"
    """
    override = os.environ.get(ENV_CACHE_DIR)
    if override:
        return Path(override).expanduser().resolve() / "sources"

    return Path(user_cache_dir("tesseract-orange")) / "sources"


@dataclass(frozen=True, slots=True)
class ToolchainConfig:
    """
    Per-run settings handed to every component.

    operation_timestamp is fixed when the config is built so that every
    backup made during one run carries the same suffix.
    """

    cache_dir: Path = field(default_factory=get_cache_root)
    operation_timestamp: str = field(default_factory=operation_timestamp)
    debug: bool = False
    progress: bool = False

    @classmethod
    def from_env(
        cls,
        cache_dir: Path | None = None,
        *,
        debug: bool = False,
        progress: bool = False,
    ) -> ToolchainConfig:
        root = (cache_dir / "sources") if cache_dir is not None else get_cache_root()
        return cls(cache_dir=root, debug=debug, progress=progress)
