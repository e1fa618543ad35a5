"""Regex-based discovery of grammars referenced by a grammar file."""

from __future__ import annotations

import re
from typing import Final

_TOKEN_VOCAB_RE: Final[re.Pattern[str]] = re.compile(r"tokenVocab\s*=\s*([^;]+);")
_IMPORT_RE: Final[re.Pattern[str]] = re.compile(r"^[ \t]*import\s+([^;]+);", re.MULTILINE)


def _split_names(group: str) -> list[str]:
    names: list[str] = []
    for raw in group.split(","):
        name = raw.strip()
        # `import Alias=Grammar;` loads Grammar under a local alias.
        if "=" in name:
            name = name.split("=", 1)[1].strip()
        if name:
            names.append(name)
    return names


def extract_dependencies(grammar_text: str) -> tuple[str, ...]:
    """Return referenced grammar names: token vocabularies first, then imports.

    Duplicates keep their first position. Only direct references are
    reported; the referenced grammars are not scanned.
    """
    ordered: dict[str, None] = {}
    for match in _TOKEN_VOCAB_RE.finditer(grammar_text):
        for name in _split_names(match.group(1)):
            ordered.setdefault(name, None)
    for match in _IMPORT_RE.finditer(grammar_text):
        for name in _split_names(match.group(1)):
            ordered.setdefault(name, None)
    return tuple(ordered)
