"""Typed models for external generator invocations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from antlr_gen.config import GeneratorProfile


@dataclass(slots=True, frozen=True)
class GeneratorOptions:
    """Per-grammar switches forwarded to ANTLR."""

    profile: GeneratorProfile
    package: str | None = None
    superclass: str | None = None
    listener: bool = False


@dataclass(slots=True, frozen=True)
class InvocationRequest:
    """One grammar to compile into one output directory."""

    grammar_path: Path
    output_dir: Path
    options: GeneratorOptions


@dataclass(slots=True, frozen=True)
class InvocationResult:
    """Captured outcome of a generator run."""

    ok: bool
    arguments: tuple[str, ...]
    returncode: int | None
    stdout: str
    stderr: str
    timed_out: bool = False

    @property
    def command_line(self) -> str:
        return " ".join(_quote(argument) for argument in self.arguments)


def _quote(argument: str) -> str:
    if not argument or any(char.isspace() for char in argument):
        return f'"{argument}"'
    return argument
