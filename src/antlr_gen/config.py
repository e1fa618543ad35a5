"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from antlr_gen.staleness.marker import INVARIANT_TIMESTAMP_FORMAT, TimestampFormat

CONFIG_FILE_NAME = "antlr_gen.toml"
MAX_TIMEOUT_SECONDS_CAP = 3600.0

DEFAULT_JAVA = "java"
DEFAULT_JAR_DIR = Path(__file__).resolve().parent / "jars"
DEFAULT_TIMEOUT_SECONDS = 7.5
DEFAULT_BENIGN_STDERR_PATTERNS = ("Picked up _JAVA_OPTIONS",)
DEFAULT_OUTPUT_SUBDIR = "Generated"
DEFAULT_GRAMMAR_EXTENSION = ".g4"
DEFAULT_OUTPUT_EXTENSION = ".cs"
DEFAULT_DATA_DIR_NAME = ".antlr_gen"

STANDARD_PROFILE = "standard"
OPTIMIZED_PROFILE = "optimized"


class ConfigError(ValueError):
    """Raised when a config file or override has an invalid shape."""


@dataclass(slots=True, frozen=True)
class GeneratorProfile:
    """ANTLR distribution and target language used for one dialect."""

    name: str
    jar_name: str
    language: str


DEFAULT_PROFILES = (
    GeneratorProfile(
        name=STANDARD_PROFILE,
        jar_name="antlr-4.7.1-standard.jar",
        language="CSharp",
    ),
    GeneratorProfile(
        name=OPTIMIZED_PROFILE,
        jar_name="antlr-4.6.4-optimized.jar",
        language="CSharp_v4_5",
    ),
)


@dataclass(slots=True, frozen=True)
class GeneratorConfig:
    """External generator process settings."""

    java: str
    jar_dir: Path
    timeout_seconds: float
    benign_stderr_patterns: tuple[str, ...]
    profiles: tuple[GeneratorProfile, ...]

    def profile(self, standard: bool) -> GeneratorProfile:
        """Return the profile selected by the --standard toggle."""
        wanted = STANDARD_PROFILE if standard else OPTIMIZED_PROFILE
        for profile in self.profiles:
            if profile.name == wanted:
                return profile
        raise ConfigError(f"Generator profile '{wanted}' is not configured.")

    def jar_path(self, profile: GeneratorProfile) -> Path:
        return self.jar_dir / profile.jar_name


@dataclass(slots=True, frozen=True)
class OutputConfig:
    """Naming rules for grammar and generated files."""

    default_subdir: str
    grammar_extension: str
    output_extension: str
    timestamp_format: TimestampFormat


@dataclass(slots=True, frozen=True)
class LoggingConfig:
    """Build log settings."""

    build_log_enabled: bool
    data_dir: Path


@dataclass(slots=True, frozen=True)
class BuildConfig:
    """Fully merged tool configuration."""

    working_dir: Path
    generator: GeneratorConfig
    output: OutputConfig
    logging: LoggingConfig


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    config_path: Path | None = None
    jar_dir: Path | None = None
    timeout_seconds: float | None = None


def default_config(working_dir: Path) -> BuildConfig:
    """Build default config for a given working directory."""
    resolved = working_dir.resolve()
    return BuildConfig(
        working_dir=resolved,
        generator=GeneratorConfig(
            java=DEFAULT_JAVA,
            jar_dir=DEFAULT_JAR_DIR,
            timeout_seconds=DEFAULT_TIMEOUT_SECONDS,
            benign_stderr_patterns=DEFAULT_BENIGN_STDERR_PATTERNS,
            profiles=DEFAULT_PROFILES,
        ),
        output=OutputConfig(
            default_subdir=DEFAULT_OUTPUT_SUBDIR,
            grammar_extension=DEFAULT_GRAMMAR_EXTENSION,
            output_extension=DEFAULT_OUTPUT_EXTENSION,
            timestamp_format=INVARIANT_TIMESTAMP_FORMAT,
        ),
        logging=LoggingConfig(
            build_log_enabled=True,
            data_dir=resolved / DEFAULT_DATA_DIR_NAME,
        ),
    )


def load_config_file(working_dir: Path, config_path: Path | None = None) -> dict[str, object]:
    """Load an explicit config file, or optional antlr_gen.toml from the working dir."""
    if config_path is None:
        candidate = working_dir / CONFIG_FILE_NAME
        if not candidate.exists():
            return {}
    else:
        candidate = config_path if config_path.is_absolute() else working_dir / config_path
        if not candidate.exists():
            raise ConfigError(f"Config file not found: {candidate}")
    try:
        with candidate.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{candidate.name} is not valid TOML: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{candidate.name} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str, section: str = "") -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        name = f"{section}.{key}" if section else key
        raise ConfigError(f"Config section '{name}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_bool(value: object, name: str, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigError(f"Config field '{name}' must be a boolean.")
    return value


def _optional_extension(value: object, name: str, default: str) -> str:
    extension = _optional_string(value, name, default)
    if not extension.startswith("."):
        raise ConfigError(f"Config field '{name}' must start with '.'.")
    return extension


def _optional_positive_seconds(value: object, name: str, default: float) -> float:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"Config field '{name}' must be a positive number.")
    if value > MAX_TIMEOUT_SECONDS_CAP:
        raise ConfigError(f"Config field '{name}' must be <= {MAX_TIMEOUT_SECONDS_CAP:g}.")
    return float(value)


def _optional_dir(value: object, name: str, default: Path, base: Path) -> Path:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config field '{name}' must be a non-empty path string.")
    candidate = Path(value)
    if not candidate.is_absolute():
        candidate = base / candidate
    return candidate.resolve()


def _merge_profiles(
    base: tuple[GeneratorProfile, ...], profiles_payload: dict[str, object]
) -> tuple[GeneratorProfile, ...]:
    known = {profile.name for profile in base}
    for name in profiles_payload:
        if name not in known:
            raise ConfigError(
                f"Config section 'generator.profiles.{name}' is not a known profile; "
                f"expected one of {sorted(known)}."
            )
    merged: list[GeneratorProfile] = []
    for profile in base:
        table = _get_table(profiles_payload, profile.name, "generator.profiles")
        section = f"generator.profiles.{profile.name}"
        merged.append(
            GeneratorProfile(
                name=profile.name,
                jar_name=_optional_string(
                    table.get("jar_name"), f"{section}.jar_name", profile.jar_name
                ),
                language=_optional_string(
                    table.get("language"), f"{section}.language", profile.language
                ),
            )
        )
    return tuple(merged)


def merge_config(
    base: BuildConfig, file_payload: dict[str, object], overrides: CliOverrides
) -> BuildConfig:
    """Merge defaults, config file, then CLI overrides."""
    generator_payload = _get_table(file_payload, "generator")
    profiles_payload = _get_table(generator_payload, "profiles", "generator")
    output_payload = _get_table(file_payload, "output")
    logging_payload = _get_table(file_payload, "logging")

    benign_patterns = base.generator.benign_stderr_patterns
    if "benign_stderr_patterns" in generator_payload:
        benign_patterns = _tuple_of_strings(
            generator_payload["benign_stderr_patterns"], "generator", "benign_stderr_patterns"
        )

    generator = GeneratorConfig(
        java=_optional_string(generator_payload.get("java"), "generator.java", base.generator.java),
        jar_dir=_optional_dir(
            generator_payload.get("jar_dir"),
            "generator.jar_dir",
            base.generator.jar_dir,
            base.working_dir,
        ),
        timeout_seconds=_optional_positive_seconds(
            generator_payload.get("timeout_seconds"),
            "generator.timeout_seconds",
            base.generator.timeout_seconds,
        ),
        benign_stderr_patterns=benign_patterns,
        profiles=_merge_profiles(base.generator.profiles, profiles_payload),
    )
    output = OutputConfig(
        default_subdir=_optional_string(
            output_payload.get("default_subdir"),
            "output.default_subdir",
            base.output.default_subdir,
        ),
        grammar_extension=_optional_extension(
            output_payload.get("grammar_extension"),
            "output.grammar_extension",
            base.output.grammar_extension,
        ),
        output_extension=_optional_extension(
            output_payload.get("output_extension"),
            "output.output_extension",
            base.output.output_extension,
        ),
        timestamp_format=base.output.timestamp_format,
    )
    logging = LoggingConfig(
        build_log_enabled=_optional_bool(
            logging_payload.get("build_log_enabled"),
            "logging.build_log_enabled",
            base.logging.build_log_enabled,
        ),
        data_dir=_optional_dir(
            logging_payload.get("data_dir"),
            "logging.data_dir",
            base.logging.data_dir,
            base.working_dir,
        ),
    )
    merged = BuildConfig(
        working_dir=base.working_dir,
        generator=generator,
        output=output,
        logging=logging,
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: BuildConfig, overrides: CliOverrides) -> BuildConfig:
    """Apply startup overrides at highest precedence."""
    timeout_seconds = _optional_positive_seconds(
        overrides.timeout_seconds,
        "overrides.timeout_seconds",
        config.generator.timeout_seconds,
    )
    jar_dir = config.generator.jar_dir
    if overrides.jar_dir is not None:
        jar_dir = overrides.jar_dir
        if not jar_dir.is_absolute():
            jar_dir = config.working_dir / jar_dir
        jar_dir = jar_dir.resolve()
    generator = GeneratorConfig(
        java=config.generator.java,
        jar_dir=jar_dir,
        timeout_seconds=timeout_seconds,
        benign_stderr_patterns=config.generator.benign_stderr_patterns,
        profiles=config.generator.profiles,
    )
    return BuildConfig(
        working_dir=config.working_dir,
        generator=generator,
        output=config.output,
        logging=config.logging,
    )


def load_effective_config(working_dir: Path, overrides: CliOverrides | None = None) -> BuildConfig:
    """Load effective config using merge order defaults -> config file -> overrides."""
    active = overrides or CliOverrides()
    resolved = working_dir.resolve()
    base = default_config(resolved)
    payload = load_config_file(resolved, active.config_path)
    return merge_config(base, payload, active)
