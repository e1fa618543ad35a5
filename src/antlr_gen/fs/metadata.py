"""Filesystem metadata lookups used by staleness detection."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path


def modified_time(path: Path) -> datetime:
    """Return local last-write time truncated to whole seconds.

    Raises FileNotFoundError when the path does not exist.
    """
    stat = path.stat()
    return datetime.fromtimestamp(stat.st_mtime).replace(microsecond=0)


def file_exists(path: Path) -> bool:
    return path.exists() and path.is_file()


def read_text(path: Path) -> str:
    """Read a grammar file as UTF-8 text."""
    return path.read_text(encoding="utf-8-sig", errors="replace")
