from __future__ import annotations

import json
from pathlib import Path

from ..config import ToolchainConfig
from ..errors import SourceNotFoundError, ToolchainError
from .archive import extract_archive
from .cache import ArtifactCache
from .fetcher import DefaultDownloader
from .pipeline import prepare_sources
from .registry import SourceRegistry
from .versions import VersionResolver


def source_list_cmd() -> int:
    reg = SourceRegistry.builtins()
    for name in reg.list():
        print(name)
    return 0


def source_info_cmd(name: str, *, config: ToolchainConfig) -> int:
    reg = SourceRegistry.builtins()
    try:
        spec = reg.get(name)
    except SourceNotFoundError as e:
        print(str(e))
        return 2

    info = {
        "name": spec.name,
        "version": spec.version,
        "url_template": spec.url_template,
        "tags_url": spec.tags_url,
        "description": spec.description,
        "homepage": spec.homepage,
        "cache_dir": str(config.cache_dir),
    }
    print(json.dumps(info, indent=2, sort_keys=True))
    return 0


def source_resolve_cmd(name: str, *, version: str | None) -> int:
    reg = SourceRegistry.builtins()
    try:
        spec = reg.get(name)
        resolved = VersionResolver().resolve(spec, version)
    except ToolchainError as e:
        print(str(e))
        return 2

    print(resolved)
    return 0


def source_fetch_cmd(
    name: str,
    *,
    version: str | None,
    config: ToolchainConfig,
) -> int:
    reg = SourceRegistry.builtins()
    downloader = DefaultDownloader(progress=config.progress)
    try:
        spec = reg.get(name)
        resolved = VersionResolver(downloader).resolve(spec, version)
        path = ArtifactCache(config.cache_dir, downloader=downloader).acquire(spec, resolved)
    except ToolchainError as e:
        print(str(e))
        return 2

    print(str(path))
    return 0


def source_extract_cmd(archive: Path, dest: Path) -> int:
    try:
        children = extract_archive(archive, dest)
    except ToolchainError as e:
        print(str(e))
        return 2

    for child in children:
        print(str(child))
    return 0


def source_prepare_cmd(
    names: list[str],
    *,
    dest: Path,
    version: str | None,
    config: ToolchainConfig,
) -> int:
    try:
        prepared = prepare_sources(names, dest, version=version, config=config)
    except ToolchainError as e:
        print(str(e))
        return 2

    for p in prepared:
        print(f"{p.name}\t{p.version}\t{p.source_dir}")
    return 0


def cache_path_cmd(*, config: ToolchainConfig) -> int:
    print(str(config.cache_dir))
    return 0
