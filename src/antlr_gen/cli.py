"""Command line entrypoint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from antlr_gen.build import BuildRequest, ResolutionFatalError, run_build
from antlr_gen.config import CliOverrides, ConfigError, load_effective_config
from antlr_gen.fs import norm_dir_separator

EXIT_OK = 0
EXIT_GENERATION_ERROR = 1
EXIT_FATAL = 2

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _normalized_path(value: str) -> str:
    return norm_dir_separator(value)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for a generation run."""
    parser = argparse.ArgumentParser(
        prog="antlr-gen",
        description="Regenerate ANTLR parsers only when their grammars have changed.",
    )
    parser.add_argument("--lexer", type=_normalized_path, default=None)
    parser.add_argument("--parser", type=_normalized_path, default=None)
    parser.add_argument("--package", default=None)
    parser.add_argument("--listener", type=_parse_bool, nargs="?", const=True, default=False)
    parser.add_argument("--output", type=_normalized_path, default=None)
    parser.add_argument("--lexerSuperClass", dest="lexer_superclass", default=None)
    parser.add_argument("--parserSuperClass", dest="parser_superclass", default=None)
    parser.add_argument("--standard", type=_parse_bool, nargs="?", const=True, default=False)
    parser.add_argument("--config", type=_normalized_path, default=None)
    parser.add_argument(
        "--jar-dir",
        type=_normalized_path,
        default=None,
        help=(
            "directory holding the ANTLR jars; no jars ship with the package, so set this "
            "or generator.jar_dir in antlr_gen.toml"
        ),
    )
    parser.add_argument("--timeout", type=float, default=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the antlr-gen command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    request = BuildRequest(
        lexer=args.lexer or None,
        parser=args.parser or None,
        package=args.package,
        listener=args.listener,
        output=args.output,
        lexer_superclass=args.lexer_superclass,
        parser_superclass=args.parser_superclass,
        standard=args.standard,
    )
    if not request.steps():
        return EXIT_OK

    overrides = CliOverrides(
        config_path=Path(args.config) if args.config is not None else None,
        jar_dir=Path(args.jar_dir) if args.jar_dir is not None else None,
        timeout_seconds=args.timeout,
    )
    try:
        config = load_effective_config(Path.cwd(), overrides)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    try:
        result = run_build(request, config)
    except ResolutionFatalError as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        return EXIT_FATAL
    if result.has_errors:
        return EXIT_GENERATION_ERROR
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
