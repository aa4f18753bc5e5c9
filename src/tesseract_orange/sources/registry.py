from __future__ import annotations

from dataclasses import dataclass

from ..errors import SourceNotFoundError
from .builtins import built_in_sources
from .descriptors import ArtifactSpec


@dataclass(frozen=True, slots=True)
class SourceRegistry:
    _items: dict[str, ArtifactSpec]

    @classmethod
    def builtins(cls) -> SourceRegistry:
        return cls(_items=built_in_sources())

    def list(self) -> list[str]:
        return sorted(self._items.keys())

    def get(self, name: str) -> ArtifactSpec:
        key = name.strip()
        if not key:
            raise SourceNotFoundError("Source name must be non-empty")
        try:
            return self._items[key]
        except KeyError as e:
            raise SourceNotFoundError(f"Unknown upstream source: {key}") from e
