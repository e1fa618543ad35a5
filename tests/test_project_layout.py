from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/antlr_gen/cli.py",
        "src/antlr_gen/build.py",
        "src/antlr_gen/config.py",
        "src/antlr_gen/fs/__init__.py",
        "src/antlr_gen/generator/__init__.py",
        "src/antlr_gen/staleness/__init__.py",
        "src/antlr_gen/logging/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
