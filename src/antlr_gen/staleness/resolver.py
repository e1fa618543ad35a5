"""Timestamp-based staleness detection for generated grammar sources."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from antlr_gen.fs import file_exists, generated_file_path, modified_time, read_text
from antlr_gen.staleness.dependencies import extract_dependencies
from antlr_gen.staleness.marker import MarkerParseError, read_marker
from antlr_gen.staleness.models import Resolution, ResolutionState, ResolverSettings


def resolve(
    grammar_path: Path,
    output_dir: Path,
    *,
    lexer: bool,
    settings: ResolverSettings | None = None,
) -> Resolution:
    """Decide whether the generated file for ``grammar_path`` must be rebuilt.

    The generated file's first line records the grammar names that fed the
    last generation and the newest of their timestamps. The grammar is stale
    when that line is missing or unreadable, when the grammar is newer than the
    recorded time, or when a direct dependency's time differs from it.

    A missing grammar or dependency file yields ``ResolutionState.FATAL``;
    any other lookup problem biases toward regeneration.
    """
    active = settings or ResolverSettings()
    grammar_name = grammar_path.name
    generated_path = generated_file_path(
        grammar_path, output_dir, lexer=lexer, output_extension=active.output_extension
    )

    try:
        grammar_timestamp = modified_time(grammar_path)
    except FileNotFoundError:
        return _fatal(grammar_path, generated_path, f"Grammar file not found: {grammar_path}")

    if not file_exists(generated_path):
        return Resolution(
            state=ResolutionState.STALE,
            grammar_path=grammar_path,
            generated_path=generated_path,
            dependency_names=(grammar_name,),
            max_timestamp=grammar_timestamp,
            reason="generated file is missing",
        )

    stale_reasons: list[str] = []
    recorded: datetime | None = None
    try:
        recorded = read_marker(generated_path, active.timestamp_format).timestamp
    except MarkerParseError:
        stale_reasons.append("timestamp marker is missing or unreadable")

    if recorded is not None and grammar_timestamp > recorded:
        stale_reasons.append(f"{grammar_name} is newer than the generated file")

    try:
        grammar_text = read_text(grammar_path)
    except FileNotFoundError:
        return _fatal(grammar_path, generated_path, f"Grammar file not found: {grammar_path}")
    except OSError as exc:
        grammar_text = ""
        stale_reasons.append(f"unable to read {grammar_name}: {exc.strerror or exc}")

    names: list[str] = []
    max_timestamp = grammar_timestamp
    for dependency in extract_dependencies(grammar_text):
        dependency_name = f"{dependency}{active.grammar_extension}"
        dependency_path = grammar_path.parent / dependency_name
        names.append(dependency_name)
        try:
            dependency_timestamp = modified_time(dependency_path)
        except FileNotFoundError:
            return _fatal(
                grammar_path,
                generated_path,
                f"Dependency file not found: {dependency_path}",
            )
        except OSError as exc:
            stale_reasons.append(f"unable to stat {dependency_name}: {exc.strerror or exc}")
            continue
        if recorded is not None and dependency_timestamp != recorded:
            stale_reasons.append(f"{dependency_name} has changed")
        if dependency_timestamp > max_timestamp:
            max_timestamp = dependency_timestamp
    names.append(grammar_name)

    if stale_reasons:
        state = ResolutionState.STALE
        reason = "; ".join(stale_reasons)
    else:
        state = ResolutionState.UP_TO_DATE
        reason = "generated file is up to date"
    return Resolution(
        state=state,
        grammar_path=grammar_path,
        generated_path=generated_path,
        dependency_names=tuple(names),
        max_timestamp=max_timestamp,
        reason=reason,
    )


def _fatal(grammar_path: Path, generated_path: Path, reason: str) -> Resolution:
    return Resolution(
        state=ResolutionState.FATAL,
        grammar_path=grammar_path,
        generated_path=generated_path,
        dependency_names=(),
        max_timestamp=None,
        reason=reason,
    )
