from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ..config import ToolchainConfig
from .archive import ArchiveType, detect_archive_type, extract_archive
from .cache import ArtifactCache
from .descriptors import ArtifactSpec
from .fetcher import DefaultDownloader, Downloader
from .registry import SourceRegistry
from .versions import VersionResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PreparedSource:
    name: str
    version: str
    url: str
    archive_path: Path
    archive_type: ArchiveType
    source_dir: Path


def prepare_source(
    spec: ArtifactSpec,
    staging_dir: Path,
    *,
    version: str | None = None,
    config: ToolchainConfig | None = None,
    downloader: Downloader | None = None,
) -> PreparedSource:
    """
    Resolve, fetch and unpack one upstream project:
      {staging_dir}/{name}-{version}/...

    Any failure propagates; a half-populated source dir is left for the caller.
    """
    config = config if config is not None else ToolchainConfig.from_env()
    if downloader is None:
        downloader = DefaultDownloader(progress=config.progress)

    resolved = VersionResolver(downloader).resolve(spec, version)
    cache = ArtifactCache(config.cache_dir, downloader=downloader)
    archive_path = cache.acquire(spec, resolved)

    kind = detect_archive_type(archive_path)
    source_dir = staging_dir / f"{spec.name}-{resolved}"
    extract_archive(archive_path, source_dir)

    logger.info("Prepared %s %s in %s", spec.name, resolved, source_dir)
    return PreparedSource(
        name=spec.name,
        version=resolved,
        url=spec.render_url(resolved),
        archive_path=archive_path,
        archive_type=kind,
        source_dir=source_dir,
    )


def prepare_sources(
    names: Iterable[str],
    staging_dir: Path,
    *,
    version: str | None = None,
    config: ToolchainConfig | None = None,
    downloader: Downloader | None = None,
    registry: SourceRegistry | None = None,
) -> list[PreparedSource]:
    """Prepare several upstream projects one after another; the first failure aborts."""
    registry = registry if registry is not None else SourceRegistry.builtins()
    return [
        prepare_source(
            registry.get(name),
            staging_dir,
            version=version,
            config=config,
            downloader=downloader,
        )
        for name in names
    ]
