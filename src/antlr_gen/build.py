"""Lexer-then-parser generation steps driven by staleness resolution."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO

from antlr_gen.config import BuildConfig
from antlr_gen.fs import default_output_dir, ensure_dir, resolve_against
from antlr_gen.generator import (
    GeneratorInvoker,
    GeneratorOptions,
    GeneratorUnavailableError,
    InvocationRequest,
)
from antlr_gen.logging import JsonlBuildLogger, NullBuildLogger
from antlr_gen.staleness import Marker, Resolution, ResolverSettings, prepend_marker, resolve


class GenerateStatus(str, Enum):
    """Result of one generation step."""

    NOT_GENERATED = "not_generated"
    GENERATED = "generated"
    ERROR = "error"


class ResolutionFatalError(RuntimeError):
    """Raised when staleness cannot be decided because an input file is missing."""

    def __init__(self, resolution: Resolution) -> None:
        super().__init__(resolution.reason)
        self.resolution = resolution


@dataclass(slots=True, frozen=True)
class GrammarStep:
    """One grammar to bring up to date."""

    grammar: str
    lexer: bool
    superclass: str | None = None

    @property
    def kind(self) -> str:
        return "Lexer" if self.lexer else "Parser"


@dataclass(slots=True, frozen=True)
class BuildRequest:
    """Options shared by the lexer and parser steps."""

    lexer: str | None = None
    parser: str | None = None
    package: str | None = None
    listener: bool = False
    output: str | None = None
    lexer_superclass: str | None = None
    parser_superclass: str | None = None
    standard: bool = False

    def steps(self) -> tuple[GrammarStep, ...]:
        steps: list[GrammarStep] = []
        if self.lexer:
            steps.append(GrammarStep(self.lexer, lexer=True, superclass=self.lexer_superclass))
        if self.parser:
            steps.append(GrammarStep(self.parser, lexer=False, superclass=self.parser_superclass))
        return tuple(steps)


@dataclass(slots=True, frozen=True)
class StepResult:
    """Status and resolution details for a finished step."""

    step: GrammarStep
    status: GenerateStatus
    resolution: Resolution | None
    generated_path: Path | None


@dataclass(slots=True, frozen=True)
class BuildResult:
    """All step results in execution order."""

    steps: tuple[StepResult, ...]

    @property
    def has_errors(self) -> bool:
        return any(item.status is GenerateStatus.ERROR for item in self.steps)


def build_logger(config: BuildConfig) -> JsonlBuildLogger:
    """Return the configured build logger."""
    if not config.logging.build_log_enabled:
        return NullBuildLogger()
    return JsonlBuildLogger(path=config.logging.data_dir / "build.jsonl")


def resolver_settings(config: BuildConfig) -> ResolverSettings:
    return ResolverSettings(
        grammar_extension=config.output.grammar_extension,
        output_extension=config.output.output_extension,
        timestamp_format=config.output.timestamp_format,
    )


def generate_code(
    step: GrammarStep,
    request: BuildRequest,
    config: BuildConfig,
    invoker: GeneratorInvoker,
    build_log: JsonlBuildLogger,
    out: TextIO,
) -> StepResult:
    """Regenerate one grammar when its output is stale.

    Raises ResolutionFatalError when the grammar or one of its dependencies
    does not exist.
    """
    grammar_path = resolve_against(config.working_dir, step.grammar)
    if request.output is None:
        output_dir = default_output_dir(grammar_path, config.output.default_subdir)
    else:
        output_dir = resolve_against(config.working_dir, request.output)
    ensure_dir(output_dir)

    resolution = resolve(
        grammar_path,
        output_dir,
        lexer=step.lexer,
        settings=resolver_settings(config),
    )
    grammar_name = grammar_path.name
    if resolution.is_fatal:
        build_log.record(grammar_path, step.kind, "fatal", resolution.reason)
        raise ResolutionFatalError(resolution)

    if not resolution.should_generate:
        print(
            f"{grammar_name} has not been changed. {step.kind} has not been generated.",
            file=out,
        )
        build_log.record(
            grammar_path,
            step.kind,
            GenerateStatus.NOT_GENERATED.value,
            resolution.reason,
            {"dependencies": resolution.dependency_names},
        )
        return StepResult(step, GenerateStatus.NOT_GENERATED, resolution, resolution.generated_path)

    options = GeneratorOptions(
        profile=config.generator.profile(request.standard),
        package=request.package or None,
        superclass=step.superclass or None,
        listener=request.listener,
    )
    print(f"{step.kind} for {grammar_name} generation...", file=out)
    started = time.perf_counter()
    try:
        result = invoker.invoke(InvocationRequest(grammar_path, output_dir, options))
    except GeneratorUnavailableError as exc:
        print(str(exc), file=out)
        build_log.record(grammar_path, step.kind, GenerateStatus.ERROR.value, str(exc))
        return StepResult(step, GenerateStatus.ERROR, resolution, None)
    duration_ms = int((time.perf_counter() - started) * 1000)

    if result.stdout.strip():
        out.write(result.stdout)
    generated_path = resolution.generated_path
    failure: str | None = None
    if not result.ok:
        failure = result.stderr
    elif not generated_path.exists():
        failure = f"Expected generated file was not produced: {generated_path}"

    metadata: dict[str, object] = {
        "dependencies": resolution.dependency_names,
        "duration_ms": duration_ms,
        "returncode": result.returncode,
        "timed_out": result.timed_out,
        "stdout": result.stdout,
        "stderr": result.stderr,
    }
    if failure is not None:
        print(f"Arguments: {result.command_line}", file=out)
        print(f"Error: {failure}", file=out)
        generated_path.unlink(missing_ok=True)
        print(f"{step.kind} for {grammar_name} generation error.", file=out)
        build_log.record(
            grammar_path, step.kind, GenerateStatus.ERROR.value, resolution.reason, metadata
        )
        return StepResult(step, GenerateStatus.ERROR, resolution, None)

    marker = Marker(names=resolution.dependency_names, timestamp=resolution.max_timestamp)
    prepend_marker(generated_path, marker, config.output.timestamp_format)
    print(f"{step.kind} for {grammar_name} has been generated.", file=out)
    build_log.record(
        grammar_path, step.kind, GenerateStatus.GENERATED.value, resolution.reason, metadata
    )
    return StepResult(step, GenerateStatus.GENERATED, resolution, generated_path)


def run_build(
    request: BuildRequest,
    config: BuildConfig,
    invoker: GeneratorInvoker | None = None,
    build_log: JsonlBuildLogger | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> BuildResult:
    """Run the lexer step, then the parser step; each is evaluated independently."""
    active_invoker = invoker or GeneratorInvoker(config.generator)
    active_log = build_log or build_logger(config)
    out_stream = out or sys.stdout
    err_stream = err or sys.stderr
    results: list[StepResult] = []
    for step in request.steps():
        result = generate_code(step, request, config, active_invoker, active_log, out_stream)
        if result.status is GenerateStatus.ERROR:
            print("Code generation error", file=err_stream)
        results.append(result)
    return BuildResult(steps=tuple(results))
