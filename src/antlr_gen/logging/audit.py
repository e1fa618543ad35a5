"""Structured JSONL build log utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path


@dataclass(slots=True, frozen=True)
class BuildEvent:
    """Sanitized representation of a single generation step."""

    timestamp: str
    grammar: str
    kind: str
    status: str
    reason: str
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, object]:
    """Keep scalar and name-list values; reduce captured output to lengths."""
    sanitized: dict[str, object] = {}
    for key in sorted(metadata.keys()):
        value = metadata[key]
        if key in {"stdout", "stderr"} and isinstance(value, str):
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, (int, float, bool, str)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
            sanitized[key] = list(value)
            continue
        if isinstance(value, Path):
            sanitized[key] = value.as_posix()
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlBuildLogger:
    """Append-only JSONL build logger."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    def append(self, event: BuildEvent) -> None:
        """Append an event as one JSON object per line."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def record(
        self,
        grammar: Path,
        kind: str,
        status: str,
        reason: str,
        metadata: dict[str, object] | None = None,
    ) -> BuildEvent:
        """Build, sanitize and append one event."""
        event = BuildEvent(
            timestamp=utc_timestamp(),
            grammar=grammar.as_posix(),
            kind=kind,
            status=status,
            reason=reason,
            metadata=sanitize_metadata(metadata or {}),
        )
        self.append(event)
        return event


class NullBuildLogger(JsonlBuildLogger):
    """Logger used when the build log is disabled in config."""

    def __init__(self) -> None:
        super().__init__(Path())

    def append(self, event: BuildEvent) -> None:
        return None