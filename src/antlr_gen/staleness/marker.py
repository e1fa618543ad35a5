"""Timestamp marker embedded as the first line of generated files."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Final

MARKER_PREFIX: Final[str] = "// "
MARKER_DATE_LABEL: Final[str] = " date: "
NAME_SEPARATOR: Final[str] = ", "

# Names never contain the date label; the timestamp is whatever follows it.
_MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^// (?P<names>[^,\s][^\r\n]*?) date: (?P<timestamp>\S+ \S+)\s*$"
)


class MarkerParseError(ValueError):
    """Raised when a line is not a well-formed timestamp marker."""


@dataclass(slots=True, frozen=True)
class TimestampFormat:
    """Locale-independent rendering and parsing rules for marker timestamps."""

    render: str
    accepted: tuple[str, ...]

    def format(self, value: datetime) -> str:
        return truncate_to_seconds(value).strftime(self.render)

    def parse(self, text: str) -> datetime:
        """Parse with the first accepted pattern that matches."""
        for pattern in self.accepted:
            try:
                return datetime.strptime(text, pattern)
            except ValueError:
                continue
        raise MarkerParseError(f"Unrecognized marker timestamp: {text!r}")


# Second entry reads markers written with the invariant-culture short form.
INVARIANT_TIMESTAMP_FORMAT: Final[TimestampFormat] = TimestampFormat(
    render="%Y-%m-%d %H:%M:%S",
    accepted=("%Y-%m-%d %H:%M:%S", "%m/%d/%Y %H:%M:%S"),
)


@dataclass(slots=True, frozen=True)
class Marker:
    """Contributing grammar file names plus the newest of their timestamps."""

    names: tuple[str, ...]
    timestamp: datetime


def truncate_to_seconds(value: datetime) -> datetime:
    """Drop sub-second precision so stored and live timestamps compare equal."""
    return value.replace(microsecond=0)


def render_marker(marker: Marker, timestamp_format: TimestampFormat) -> str:
    """Render a marker as a single comment line without a newline."""
    if not marker.names:
        raise ValueError("Marker requires at least one grammar name.")
    names = NAME_SEPARATOR.join(marker.names)
    return f"{MARKER_PREFIX}{names}{MARKER_DATE_LABEL}{timestamp_format.format(marker.timestamp)}"


def parse_marker(line: str | None, timestamp_format: TimestampFormat) -> Marker:
    """Parse a marker line; raise MarkerParseError on anything malformed."""
    if not line:
        raise MarkerParseError("Marker line is empty.")
    match = _MARKER_PATTERN.match(line)
    if match is None:
        raise MarkerParseError(f"Line is not a timestamp marker: {line[:80]!r}")
    names = tuple(name.strip() for name in match.group("names").split(","))
    if any(not name for name in names):
        raise MarkerParseError("Marker contains an empty grammar name.")
    timestamp = timestamp_format.parse(match.group("timestamp"))
    return Marker(names=names, timestamp=timestamp)


def read_marker(generated_path: Path, timestamp_format: TimestampFormat) -> Marker:
    """Read and parse only the first line of a generated file."""
    try:
        with generated_path.open("r", encoding="utf-8-sig", errors="replace") as handle:
            first_line = handle.readline()
    except OSError as exc:
        raise MarkerParseError(f"Unable to read marker: {exc}") from exc
    return parse_marker(first_line.rstrip("\r\n"), timestamp_format)


def prepend_marker(generated_path: Path, marker: Marker, timestamp_format: TimestampFormat) -> None:
    """Rewrite a freshly generated file with the marker as its first line."""
    line = render_marker(marker, timestamp_format)
    with generated_path.open("r", encoding="utf-8-sig", newline="") as handle:
        content = handle.read()
    with generated_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(line)
        handle.write(os.linesep)
        handle.write(content)
