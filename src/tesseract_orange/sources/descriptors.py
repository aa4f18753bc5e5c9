from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit

from ..errors import InvalidSpecError

LATEST = "latest"

# Single designated substitution point inside url templates.
VERSION_PLACEHOLDER = "{version}"


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    """
    A versioned upstream source archive.

    url_template carries VERSION_PLACEHOLDER where the resolved version goes.
    A template without the placeholder is a fully pinned URL.

    tags_url points at the upstream tag listing used to resolve "latest".
    """

    name: str
    url_template: str
    version: str = LATEST
    tags_url: str | None = None

    description: str = ""
    homepage: str | None = None

    def is_latest(self) -> bool:
        return self.version.strip() == LATEST

    def render_url(self, version: str) -> str:
        version = version.strip()
        if not version or version == LATEST:
            raise InvalidSpecError(
                f"Cannot render URL for {self.name}: version must be concrete, got {version!r}"
            )

        url = self.url_template.replace(VERSION_PLACEHOLDER, version)
        if not is_absolute_url(url):
            raise InvalidSpecError(f"URL template of {self.name} is not an absolute URL: {url}")
        return url

    def with_version(self, version: str) -> ArtifactSpec:
        return ArtifactSpec(
            name=self.name,
            url_template=self.url_template,
            version=version,
            tags_url=self.tags_url,
            description=self.description,
            homepage=self.homepage,
        )


def is_absolute_url(url: str) -> bool:
    parts = urlsplit(url)
    if parts.scheme == "file":
        return bool(parts.path)
    return parts.scheme in {"http", "https"} and bool(parts.netloc)
