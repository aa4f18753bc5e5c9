from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, get_args

from ..errors import TraineddataError

Tier = Literal["fast", "best", "legacy"]
Category = Literal["language", "script"]

TIERS: tuple[str, ...] = get_args(Tier)
CATEGORIES: tuple[str, ...] = get_args(Category)

_REPOSITORIES: dict[str, str] = {
    "best": "tessdata_best",
    "fast": "tessdata_fast",
    "legacy": "tessdata",
}

BASE_URL = "https://github.com/tesseract-ocr"
SUFFIX = ".traineddata"


def validate_tier(tier: str) -> Tier:
    if tier not in _REPOSITORIES:
        raise TraineddataError(
            f"Invalid traineddata set specified ({tier}), should be either "
            '"fast", "best", or "legacy".'
        )
    return tier  # type: ignore[return-value]


def validate_category(category: str) -> Category:
    if category not in CATEGORIES:
        raise TraineddataError(
            f'Invalid traineddata type specified ({category}), should be either "language" or "script".'
        )
    return category  # type: ignore[return-value]


def classify_identifier(identifier: str) -> Category:
    """
    Languages are lowercase codes (eng, chi_tra); scripts are capitalized
    names (Latin, HanT).
    """
    identifier = identifier.strip()
    if not identifier:
        raise TraineddataError("Traineddata identifier must be non-empty")
    return "language" if identifier[0].islower() else "script"


def _relative(identifier: str, category: Category) -> str:
    name = f"{identifier}{SUFFIX}"
    return f"script/{name}" if category == "script" else name


def traineddata_url(identifier: str, tier: str, category: str, base_url: str = BASE_URL) -> str:
    repo = _REPOSITORIES[validate_tier(tier)]
    return f"{base_url}/{repo}/raw/main/{_relative(identifier, validate_category(category))}"


def traineddata_path(tessdata_dir: Path, identifier: str, category: str) -> Path:
    return tessdata_dir / _relative(identifier, validate_category(category))


@dataclass(frozen=True, slots=True)
class TraineddataAsset:
    identifier: str
    tier: Tier
    category: Category
    url: str
    local_path: Path
    local_size: int | None = None
    remote_size: int | None = None

    @classmethod
    def locate(
        cls,
        identifier: str,
        tier: str,
        tessdata_dir: Path,
        category: str | None = None,
        base_url: str = BASE_URL,
    ) -> TraineddataAsset:
        identifier = identifier.strip()
        cat = validate_category(category) if category else classify_identifier(identifier)
        return cls(
            identifier=identifier,
            tier=validate_tier(tier),
            category=cat,
            url=traineddata_url(identifier, tier, cat, base_url=base_url),
            local_path=traineddata_path(tessdata_dir, identifier, cat),
        )
