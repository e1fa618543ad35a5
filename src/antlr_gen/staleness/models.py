"""Typed models for staleness resolution."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from antlr_gen.staleness.marker import INVARIANT_TIMESTAMP_FORMAT, TimestampFormat


class ResolutionState(str, Enum):
    """Outcome of comparing a grammar against its generated output."""

    STALE = "stale"
    UP_TO_DATE = "up_to_date"
    FATAL = "fatal"


@dataclass(slots=True, frozen=True)
class ResolverSettings:
    """File naming and timestamp rules used while resolving."""

    grammar_extension: str = ".g4"
    output_extension: str = ".cs"
    timestamp_format: TimestampFormat = INVARIANT_TIMESTAMP_FORMAT


@dataclass(slots=True, frozen=True)
class Resolution:
    """Generate/skip decision plus the data needed to write a new marker."""

    state: ResolutionState
    grammar_path: Path
    generated_path: Path
    dependency_names: tuple[str, ...]
    max_timestamp: datetime | None
    reason: str

    @property
    def should_generate(self) -> bool:
        return self.state is ResolutionState.STALE

    @property
    def is_fatal(self) -> bool:
        return self.state is ResolutionState.FATAL
