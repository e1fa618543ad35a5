"""ANTLR process invocation with bounded wait and stderr classification."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from antlr_gen.config import GeneratorConfig
from antlr_gen.generator.models import InvocationRequest, InvocationResult


class GeneratorUnavailableError(RuntimeError):
    """Raised when the Java runtime needed by ANTLR cannot be found."""

    def __init__(self, executable: str) -> None:
        super().__init__("java is not installed or java path is not specified.")
        self.executable = executable


def build_arguments(request: InvocationRequest, jar_path: Path) -> list[str]:
    """Build the ANTLR tool arguments that follow the java executable."""
    options = request.options
    arguments = [
        "-jar",
        str(jar_path),
        "-o",
        str(request.output_dir),
        str(request.grammar_path),
        f"-Dlanguage={options.profile.language}",
        "-listener" if options.listener else "-no-listener",
        "-visitor",
    ]
    if options.superclass:
        arguments.append(f"-DsuperClass={options.superclass}")
    arguments.append("-Werror")
    if options.package:
        arguments.extend(["-package", options.package])
    return arguments


def significant_stderr(stderr: str, benign_patterns: tuple[str, ...]) -> str:
    """Drop stderr lines that match known-harmless JVM diagnostics."""
    kept = [
        line
        for line in stderr.splitlines()
        if line.strip() and not any(pattern in line for pattern in benign_patterns)
    ]
    return "\n".join(kept)


class GeneratorInvoker:
    """Runs ANTLR through the configured Java runtime."""

    def __init__(self, config: GeneratorConfig) -> None:
        self._config = config

    def resolve_java(self) -> str:
        """Return the Java executable path or raise GeneratorUnavailableError."""
        found = shutil.which(self._config.java)
        if found is None:
            raise GeneratorUnavailableError(self._config.java)
        return found

    def invoke(self, request: InvocationRequest) -> InvocationResult:
        """Run the generator and wait at most ``timeout_seconds``.

        Exceeding the timeout kills the process and counts as a failure.
        """
        java = self.resolve_java()
        jar_path = self._config.jar_path(request.options.profile)
        arguments = (java, *build_arguments(request, jar_path))
        try:
            completed = subprocess.run(
                list(arguments),
                check=False,
                capture_output=True,
                text=True,
                timeout=self._config.timeout_seconds,
            )
        except subprocess.TimeoutExpired as exc:
            captured = _as_text(exc.stderr).rstrip()
            message = f"Generator timed out after {self._config.timeout_seconds:g} seconds."
            return InvocationResult(
                ok=False,
                arguments=arguments,
                returncode=None,
                stdout=_as_text(exc.stdout),
                stderr=f"{captured}\n{message}" if captured else message,
                timed_out=True,
            )
        except OSError as exc:
            return InvocationResult(
                ok=False,
                arguments=arguments,
                returncode=None,
                stdout="",
                stderr=f"Unable to start generator: {exc}",
            )
        errors = significant_stderr(completed.stderr, self._config.benign_stderr_patterns)
        return InvocationResult(
            ok=completed.returncode == 0 and not errors,
            arguments=arguments,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
