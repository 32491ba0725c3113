"""Configuration loading and management for ts-profitability.

Configuration sources are merged in priority order:
    1. Defaults (defined in ProfilerConfig)
    2. Global config (~/.ts-profitability.toml)
    3. Project config (./ts-profitability.toml)
    4. Explicit config file
    5. Environment variables (TS_PROFITABILITY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(branch="main", verbose=True)
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ProfitabilityError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "TS_PROFITABILITY_"
CONFIG_FILE_NAME = "ts-profitability.toml"


@dataclass(frozen=True)
class ProfilerConfig:
    """Options recognized by the snapshot builder and the historical walker.

    Attributes:
        File selection:
            app_include: Glob patterns for application source files
            app_exclude: Glob patterns removed from the application set
            test_include: Glob patterns for test files (coverage proxy)
            file_limit: Cap on files per pattern resolution (None = no cap)

        Snapshot content:
            parse_coverage_stats: Compute coverageStats from test files
            list_parsed_files: Record parsed file paths in the output

        Git:
            branch: Branch the historical walk starts from and returns to
            git_timeout_seconds: Timeout for each git subprocess call

        Runtime:
            workers: Thread pool size for per-file units (None = auto)
            verbosity: Logging verbosity level
    """

    app_include: list[str] = field(default_factory=lambda: ["**/*.ts"])
    app_exclude: list[str] = field(
        default_factory=lambda: [
            "**/*.d.ts",
            "**/*.spec.ts",
            "**/*-spec.ts",
            "**/*.po.ts",
            "**/node_modules/**",
        ]
    )
    test_include: list[str] = field(default_factory=lambda: ["**/*.spec.ts"])
    file_limit: Optional[int] = None

    parse_coverage_stats: bool = True
    list_parsed_files: bool = True

    branch: str = "dev"
    git_timeout_seconds: int = 30

    workers: Optional[int] = None
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.app_include:
            raise ValueError("app_include must contain at least one pattern")
        if self.file_limit is not None and self.file_limit < 1:
            raise ValueError("file_limit must be at least 1")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.git_timeout_seconds < 1:
            raise ValueError("git_timeout_seconds must be at least 1")
        if not self.branch:
            raise ValueError("branch must not be empty")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got '{self.verbosity}'")


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> ProfilerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated ProfilerConfig instance

    Raises:
        ProfitabilityError: If a config file is invalid or missing
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ProfitabilityError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ProfitabilityError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ProfitabilityError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ProfitabilityError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    for list_field in ("app_include", "app_exclude", "test_include"):
        if isinstance(merged.get(list_field), str):
            merged[list_field] = [merged[list_field]]

    try:
        return ProfilerConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ProfitabilityError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from TS_PROFITABILITY_* environment variables.

    List fields accept comma-separated patterns, e.g.
    ``TS_PROFITABILITY_APP_INCLUDE="src/**/*.ts,lib/**/*.ts"``.
    """
    type_hints = get_type_hints(ProfilerConfig)

    result: dict[str, Any] = {}

    for field_name in ProfilerConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ProfitabilityError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return [part.strip() for part in value.split(",") if part.strip()]

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return the parsed dict.

    A ``[ts-profitability]`` table is used when present, so the options can
    live next to other tools' settings.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("ts-profitability")
    if isinstance(section, dict):
        return section
    return data
