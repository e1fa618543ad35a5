from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import pytest

from antlr_gen.config import default_config
from antlr_gen.generator import (
    GeneratorInvoker,
    GeneratorOptions,
    GeneratorUnavailableError,
    InvocationRequest,
)


def _invoker(tmp_path: Path, java: str, timeout_seconds: float = 30.0) -> GeneratorInvoker:
    generator = replace(
        default_config(tmp_path).generator, java=java, timeout_seconds=timeout_seconds
    )
    return GeneratorInvoker(generator)


def _request(tmp_path: Path) -> InvocationRequest:
    grammar = tmp_path / "Foo.g4"
    grammar.write_text("grammar Foo;\nstart : EOF ;\n", encoding="utf-8")
    output_dir = tmp_path / "Generated"
    output_dir.mkdir()
    profile = default_config(tmp_path).generator.profile(False)
    return InvocationRequest(grammar, output_dir, GeneratorOptions(profile=profile))


def test_missing_java_raises_unavailable(tmp_path: Path) -> None:
    invoker = _invoker(tmp_path, java=str(tmp_path / "no-such-java"))

    with pytest.raises(GeneratorUnavailableError, match="java is not installed"):
        invoker.invoke(_request(tmp_path))


def test_successful_run_captures_stdout(
    tmp_path: Path, fake_java: Callable[..., Path]
) -> None:
    invoker = _invoker(tmp_path, java=str(fake_java("ok")))

    result = invoker.invoke(_request(tmp_path))

    assert result.ok is True
    assert result.returncode == 0
    assert "antlr run for Foo.g4" in result.stdout
    assert (tmp_path / "Generated" / "FooParser.cs").exists()


def test_benign_stderr_is_success(tmp_path: Path, fake_java: Callable[..., Path]) -> None:
    invoker = _invoker(tmp_path, java=str(fake_java("benign")))

    result = invoker.invoke(_request(tmp_path))

    assert result.ok is True
    assert "Picked up _JAVA_OPTIONS" in result.stderr


def test_error_stderr_and_exit_code_is_failure(
    tmp_path: Path, fake_java: Callable[..., Path]
) -> None:
    invoker = _invoker(tmp_path, java=str(fake_java("fail")))

    result = invoker.invoke(_request(tmp_path))

    assert result.ok is False
    assert result.returncode == 1
    assert "syntax error" in result.stderr


def test_timeout_is_reported_as_failure(tmp_path: Path, fake_java: Callable[..., Path]) -> None:
    invoker = _invoker(tmp_path, java=str(fake_java("sleep")), timeout_seconds=1.0)

    result = invoker.invoke(_request(tmp_path))

    assert result.ok is False
    assert result.timed_out is True
    assert result.returncode is None
    assert "timed out after 1 seconds" in result.stderr
