"""Structured logging utilities."""

from .audit import BuildEvent, JsonlBuildLogger, NullBuildLogger, sanitize_metadata, utc_timestamp

__all__ = ["BuildEvent", "JsonlBuildLogger", "NullBuildLogger", "sanitize_metadata", "utc_timestamp"]
