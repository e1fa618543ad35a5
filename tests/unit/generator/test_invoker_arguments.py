from __future__ import annotations

from pathlib import Path

import pytest

from antlr_gen.config import default_config
from antlr_gen.generator import (
    GeneratorOptions,
    InvocationRequest,
    InvocationResult,
    build_arguments,
    significant_stderr,
)


def _request(tmp_path: Path, standard: bool, **options: object) -> InvocationRequest:
    profile = default_config(tmp_path).generator.profile(standard)
    return InvocationRequest(
        grammar_path=tmp_path / "Foo.g4",
        output_dir=tmp_path / "Generated",
        options=GeneratorOptions(profile=profile, **options),
    )


def test_optimized_profile_minimal_arguments(tmp_path: Path) -> None:
    request = _request(tmp_path, standard=False)

    arguments = build_arguments(request, tmp_path / "antlr.jar")

    assert arguments == [
        "-jar",
        str(tmp_path / "antlr.jar"),
        "-o",
        str(tmp_path / "Generated"),
        str(tmp_path / "Foo.g4"),
        "-Dlanguage=CSharp_v4_5",
        "-no-listener",
        "-visitor",
        "-Werror",
    ]


def test_standard_profile_with_all_options(tmp_path: Path) -> None:
    request = _request(
        tmp_path,
        standard=True,
        package="My.Parsers",
        superclass="BaseLexer",
        listener=True,
    )

    arguments = build_arguments(request, tmp_path / "antlr.jar")

    assert arguments[5:] == [
        "-Dlanguage=CSharp",
        "-listener",
        "-visitor",
        "-DsuperClass=BaseLexer",
        "-Werror",
        "-package",
        "My.Parsers",
    ]


def test_profiles_select_expected_jars(tmp_path: Path) -> None:
    generator = default_config(tmp_path).generator

    assert generator.jar_path(generator.profile(True)).name == "antlr-4.7.1-standard.jar"
    assert generator.jar_path(generator.profile(False)).name == "antlr-4.6.4-optimized.jar"


@pytest.mark.parametrize(
    ("stderr", "expected"),
    [
        ("", ""),
        ("   \n", ""),
        ("Picked up _JAVA_OPTIONS: -Xmx512m\n", ""),
        (
            "Picked up _JAVA_OPTIONS: -Xmx512m\nerror(50): Foo.g4:3:0: syntax error\n",
            "error(50): Foo.g4:3:0: syntax error",
        ),
        ("warning(125): implicit token\n", "warning(125): implicit token"),
    ],
)
def test_significant_stderr_filters_benign_lines(stderr: str, expected: str) -> None:
    assert significant_stderr(stderr, ("Picked up _JAVA_OPTIONS",)) == expected


def test_command_line_quotes_arguments_with_spaces() -> None:
    result = InvocationResult(
        ok=True,
        arguments=("java", "-jar", "/opt/my jars/antlr.jar"),
        returncode=0,
        stdout="",
        stderr="",
    )

    assert result.command_line == 'java -jar "/opt/my jars/antlr.jar"'
