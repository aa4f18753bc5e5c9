from __future__ import annotations

import copy
import logging
import tarfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..errors import (
    ExtractionError,
    FilesystemError,
    MissingArchiveError,
    UnknownArchiveTypeError,
    UnsupportedArchiveTypeError,
)

logger = logging.getLogger(__name__)

ArchiveType = Literal["tar", "tar.gz", "tar.bz2", "tar.xz", "zip"]

# Longest suffixes first so ".tar.gz" wins over ".tar"
_SUFFIXES: tuple[tuple[str, ArchiveType], ...] = (
    (".tar.bz2", "tar.bz2"),
    (".tar.gz", "tar.gz"),
    (".tar.xz", "tar.xz"),
    (".tbz2", "tar.bz2"),
    (".tbz", "tar.bz2"),
    (".tgz", "tar.gz"),
    (".txz", "tar.xz"),
    (".tar", "tar"),
    (".zip", "zip"),
)

_TAR_MODES: dict[str, str] = {
    "tar": "r:",
    "tar.gz": "r:gz",
    "tar.bz2": "r:bz2",
    "tar.xz": "r:xz",
}


def detect_archive_type(path: Path | str) -> ArchiveType:
    """
    Classify an archive by its file name alone (content is never read).

    Examples:
      foo.tar.gz -> "tar.gz"
      foo.tar.xz -> "tar.xz"
      foo.zip    -> "zip"
    """
    name = Path(path).name.lower()
    for suffix, kind in _SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return kind
    raise UnknownArchiveTypeError(f"Unknown archive type: {path}")


@dataclass(frozen=True, slots=True)
class ArchiveMember:
    # Directory entries keep a trailing "/" like `tar --list` prints them
    path: str
    is_dir: bool


@dataclass(frozen=True, slots=True)
class ArchiveLayout:
    has_leading_directory: bool
    directory: str | None = None


def _member_path(info: tarfile.TarInfo) -> str:
    if info.isdir():
        return info.name.rstrip("/") + "/"
    return info.name


def list_members(archive: Path) -> list[ArchiveMember]:
    kind = _tar_type(archive)
    try:
        with tarfile.open(archive, _TAR_MODES[kind]) as tar:
            return [ArchiveMember(path=_member_path(m), is_dir=m.isdir()) for m in tar.getmembers()]
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ExtractionError(f"Unable to list the members of {archive}: {e}") from e


def find_leading_directory(members: Sequence[ArchiveMember]) -> ArchiveLayout:
    """
    Detect a single top-level directory wrapping every member.

    The candidate is the first path component of the first directory entry;
    it only counts when every member path starts with it (literal prefix).
    """
    if not members:
        return ArchiveLayout(has_leading_directory=False)

    first_dir = next((m for m in members if m.path.endswith("/")), None)
    if first_dir is None:
        return ArchiveLayout(has_leading_directory=False)

    candidate = first_dir.path.split("/", 1)[0] + "/"
    if not all(m.path.startswith(candidate) for m in members):
        return ArchiveLayout(has_leading_directory=False)

    return ArchiveLayout(has_leading_directory=True, directory=candidate)


def _strip_prefix(members: Sequence[tarfile.TarInfo], prefix: str) -> list[tarfile.TarInfo]:
    out: list[tarfile.TarInfo] = []
    for m in members:
        rel = _member_path(m)[len(prefix) :].rstrip("/")
        if not rel:
            # the leading directory entry itself
            continue
        stripped = copy.copy(m)
        stripped.name = rel
        if m.islnk() and m.linkname.startswith(prefix):
            stripped.linkname = m.linkname[len(prefix) :]
        out.append(stripped)
    return out


def extract_archive(archive: Path, target_dir: Path) -> list[Path]:
    """
    Extract a tar-family archive into target_dir.

    A single wrapping top-level directory is stripped so the content lands
    directly under target_dir. Returns the immediate children of target_dir.
    Nothing is cleaned up on failure; that is left to the caller.
    """
    archive = Path(archive)
    if not archive.is_file():
        raise MissingArchiveError(f"Archive not found: {archive}")

    kind = _tar_type(archive)
    members = list_members(archive)
    layout = find_leading_directory(members)

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"Unable to create the extraction directory: {target_dir}") from e

    if layout.has_leading_directory:
        logger.info("Extracting %s into %s (stripping %s)", archive.name, target_dir, layout.directory)
    else:
        logger.info("Extracting %s into %s", archive.name, target_dir)

    try:
        with tarfile.open(archive, _TAR_MODES[kind]) as tar:
            infos = tar.getmembers()
            if layout.directory:
                infos = _strip_prefix(infos, layout.directory)
            tar.extractall(target_dir, members=infos, filter="data")
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ExtractionError(f"Unable to extract {archive} into {target_dir}: {e}") from e

    children = sorted(target_dir.iterdir())
    if members and not children:
        logger.warning("Extraction of %s produced no files in %s", archive, target_dir)
    return children


def _tar_type(archive: Path) -> str:
    kind = detect_archive_type(archive)
    if kind not in _TAR_MODES:
        raise UnsupportedArchiveTypeError(f"Extraction of {kind} archives is not supported: {archive}")
    return kind
