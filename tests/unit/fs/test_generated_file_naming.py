from __future__ import annotations

from pathlib import Path

import pytest

from antlr_gen.fs import default_output_dir, generated_file_path


@pytest.mark.parametrize(
    ("grammar", "lexer", "expected"),
    [
        ("Foo.g4", False, "FooParser.cs"),
        ("FooParser.g4", False, "FooParser.cs"),
        ("FooLexer.g4", True, "FooLexer.cs"),
        ("Foo.g4", True, "Foo.cs"),
    ],
)
def test_generated_file_name_rules(grammar: str, lexer: bool, expected: str) -> None:
    output_dir = Path("/out")

    path = generated_file_path(Path("/grammars") / grammar, output_dir, lexer, ".cs")

    assert path == output_dir / expected


def test_default_output_dir_is_next_to_grammar() -> None:
    grammar = Path("/work/grammars/Foo.g4")

    assert default_output_dir(grammar, "Generated") == Path("/work/grammars/Generated")
