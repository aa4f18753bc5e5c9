from __future__ import annotations

from .archive import ArchiveLayout, ArchiveMember, detect_archive_type, extract_archive
from .cache import ArtifactCache, CacheEntry
from .descriptors import LATEST, VERSION_PLACEHOLDER, ArtifactSpec
from .filenames import FilenameResolver
from .pipeline import PreparedSource, prepare_source, prepare_sources
from .versions import VersionResolver

__all__ = [
    "LATEST",
    "VERSION_PLACEHOLDER",
    "ArtifactSpec",
    "ArtifactCache",
    "CacheEntry",
    "FilenameResolver",
    "VersionResolver",
    "ArchiveMember",
    "ArchiveLayout",
    "detect_archive_type",
    "extract_archive",
    "PreparedSource",
    "prepare_source",
    "prepare_sources",
]
