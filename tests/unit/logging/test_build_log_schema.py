from __future__ import annotations

import json
from pathlib import Path

from antlr_gen.logging import JsonlBuildLogger, NullBuildLogger, sanitize_metadata


def test_build_log_writes_jsonl_schema(tmp_path: Path) -> None:
    logger = JsonlBuildLogger(path=tmp_path / ".antlr_gen" / "build.jsonl")

    logger.record(
        tmp_path / "Foo.g4",
        kind="Parser",
        status="generated",
        reason="generated file is missing",
        metadata={"dependencies": ("Foo.g4",), "returncode": 0},
    )

    lines = logger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    event = json.loads(lines[0])
    assert set(event.keys()) == {"grammar", "kind", "metadata", "reason", "status", "timestamp"}
    assert event["grammar"].endswith("/Foo.g4")
    assert event["kind"] == "Parser"
    assert event["status"] == "generated"
    assert event["metadata"] == {"dependencies": ["Foo.g4"], "returncode": 0}
    assert event["timestamp"].endswith("Z")


def test_captured_streams_are_reduced_to_lengths() -> None:
    sanitized = sanitize_metadata(
        {"stderr": "error(50): secret path", "stdout": "", "timed_out": False, "extra": {"a": 1}}
    )

    assert sanitized == {
        "extra_type": "dict",
        "stderr_length": 22,
        "stdout_length": 0,
        "timed_out": False,
    }


def test_disabled_build_log_writes_nothing(tmp_path: Path) -> None:
    logger = NullBuildLogger()

    logger.record(tmp_path / "Foo.g4", kind="Parser", status="error", reason="boom")

    assert list(tmp_path.iterdir()) == []
