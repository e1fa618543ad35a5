"""Staleness detection package."""

from .dependencies import extract_dependencies
from .marker import (
    INVARIANT_TIMESTAMP_FORMAT,
    Marker,
    MarkerParseError,
    TimestampFormat,
    parse_marker,
    prepend_marker,
    read_marker,
    render_marker,
    truncate_to_seconds,
)
from .models import Resolution, ResolutionState, ResolverSettings
from .resolver import resolve

__all__ = [
    "INVARIANT_TIMESTAMP_FORMAT",
    "Marker",
    "MarkerParseError",
    "Resolution",
    "ResolutionState",
    "ResolverSettings",
    "TimestampFormat",
    "extract_dependencies",
    "parse_marker",
    "prepend_marker",
    "read_marker",
    "render_marker",
    "resolve",
    "truncate_to_seconds",
]
