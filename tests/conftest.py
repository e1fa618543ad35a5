from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_FAKE_JAVA_TEMPLATE = '''#!{python}
import sys
import time
from pathlib import Path

MODE = {mode!r}
args = sys.argv[1:]
with Path(__file__).with_name("calls.log").open("a", encoding="utf-8") as handle:
    handle.write(" ".join(args) + "\\n")
out_dir = Path(args[args.index("-o") + 1])
grammar = Path(args[args.index("-o") + 2])
stem = grammar.stem
if not grammar.read_text(encoding="utf-8").lstrip().startswith("lexer grammar"):
    if not stem.endswith("Parser"):
        stem += "Parser"
if MODE == "sleep":
    time.sleep(10)
if MODE != "no_output":
    (out_dir / (stem + ".cs")).write_text(
        "// <auto-generated>\\nnamespace Generated {{}}\\n", encoding="utf-8"
    )
if MODE == "benign":
    sys.stderr.write("Picked up _JAVA_OPTIONS: -Xmx512m\\n")
if MODE == "fail":
    sys.stderr.write("error(50): " + grammar.name + ":1:0: syntax error\\n")
    sys.exit(1)
print("antlr run for " + grammar.name)
'''


@pytest.fixture
def fake_java(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing an executable stand-in for `java -jar antlr.jar`."""
    if os.name == "nt":
        pytest.skip("fake java script relies on a POSIX shebang")

    def make(mode: str = "ok") -> Path:
        bin_dir = tmp_path / "fake-bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / "java"
        script.write_text(
            _FAKE_JAVA_TEMPLATE.format(python=sys.executable, mode=mode), encoding="utf-8"
        )
        script.chmod(0o755)
        return script

    return make


@pytest.fixture
def java_calls() -> Callable[[Path], list[str]]:
    """Return a reader for the argument lines recorded by the fake java script."""

    def read(script: Path) -> list[str]:
        log = script.with_name("calls.log")
        if not log.exists():
            return []
        return log.read_text(encoding="utf-8").splitlines()

    return read
