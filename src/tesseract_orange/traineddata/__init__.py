from __future__ import annotations

from .assets import TraineddataAsset, classify_identifier, traineddata_url
from .installer import bundled_tessdata_dir, install_traineddata, resolve_tessdata_dir
from .staleness import StalenessChecker, StalenessResult

__all__ = [
    "TraineddataAsset",
    "classify_identifier",
    "traineddata_url",
    "StalenessChecker",
    "StalenessResult",
    "bundled_tessdata_dir",
    "install_traineddata",
    "resolve_tessdata_dir",
]
