from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def format_bytes(n: int | None) -> str:
    if n is None or n < 0:
        return "unknown size"

    units = ["B", "KiB", "MiB", "GiB", "TiB"]
    f = float(n)
    i = 0
    while f >= 1024.0 and i < len(units) - 1:
        f /= 1024.0
        i += 1
    return f"{f:.2f} {units[i]}"


def operation_timestamp(now: datetime | None = None) -> str:
    """Local-time stamp used to tag backups made during one run."""
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


@contextmanager
def staged_file(dest: Path) -> Iterator[Path]:
    """
    Yield a temporary sibling of dest; move it onto dest on success.

    On any exception the temporary file is removed, so a failed write never
    leaves a file at dest.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        yield tmp
        os.replace(tmp, dest)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
