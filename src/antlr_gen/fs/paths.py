"""Path normalization helpers for CLI inputs and generated file names."""

from __future__ import annotations

import os
from pathlib import Path

PARSER_SUFFIX = "Parser"


def norm_dir_separator(candidate: str) -> str:
    """Normalize both slash styles to the host separator."""
    return candidate.replace("\\", os.sep).replace("/", os.sep)


def resolve_against(base: Path, candidate: str | Path) -> Path:
    """Resolve a possibly relative path against a base directory."""
    path = Path(candidate)
    if not path.is_absolute():
        path = base / path
    return path.resolve(strict=False)


def default_output_dir(grammar_path: Path, subdir: str) -> Path:
    """Return the output directory placed next to a grammar file."""
    return grammar_path.parent / subdir


def generated_file_path(
    grammar_path: Path,
    output_dir: Path,
    lexer: bool,
    output_extension: str,
) -> Path:
    """Derive the generated source path for a grammar.

    Lexer grammars keep their stem. Parser and combined grammars get a
    ``Parser`` suffix unless the stem already ends with it.
    """
    stem = grammar_path.stem
    if not lexer and not stem.endswith(PARSER_SUFFIX):
        stem += PARSER_SUFFIX
    return output_dir / f"{stem}{output_extension}"


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
