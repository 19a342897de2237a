"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .exceptions import ConfigError


@dataclass
class ShedocConfig:
    """Configuration for the shedoc command line.

    Attributes:
        format: Output format used when ``--to`` is not given.
        warnings: Whether warnings are kept in the rendered output.
        quiet: Whether warnings are suppressed on stderr.
        max_file_size: Maximum script size in bytes that will be parsed.

    Examples:
        ShedocConfig(format="help", quiet=True)
    """

    format: str = "json"
    warnings: bool = False
    quiet: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024


# Per directory, each file is tried in order with its candidate tables.
CONFIG_SOURCES: list[tuple[str, list[tuple[str, ...]]]] = [
    ("pyproject.toml", [("tool", "shedoc")]),
    (".shedoc.toml", [("shedoc",), ("tool", "shedoc")]),
]


def load_config(search_path: Path) -> ShedocConfig:
    """Find the shedoc settings that apply to scripts under `search_path`.

    The directory holding the scripts is checked first, then each parent up
    to the root. In every directory a ``[tool.shedoc]`` table in
    ``pyproject.toml`` beats the ``.shedoc.toml`` dotfile. The first
    directory that defines settings wins; otherwise the built-in defaults
    apply.

    Raises:
        ConfigError: If the settings table is not a table or names a key
            shedoc does not know.

    Examples:
        load_config(Path("scripts"))
    """
    for directory in [search_path.resolve(), *search_path.resolve().parents]:
        for filename, table_paths in CONFIG_SOURCES:
            config = _read_settings(directory / filename, table_paths)
            if config is not None:
                return config

    return ShedocConfig()


_MISSING = object()


def _read_settings(config_file: Path, table_paths: list[tuple[str, ...]]) -> ShedocConfig | None:
    """Return the settings `config_file` defines, or ``None`` if it defines none.

    Missing, unreadable, or malformed TOML files define nothing.
    """
    try:
        data = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _lookup_table(data, table_path)
        if raw_config is not _MISSING:
            return _build_config_from_raw(raw_config, config_file, table_path)
    return None


def _lookup_table(data: dict, table_path: tuple[str, ...]) -> object:
    """Follow `table_path` through nested TOML tables; ``_MISSING`` if any step is absent."""
    *parents, leaf = table_path
    for key in parents:
        data = data.get(key)
        if not isinstance(data, dict):
            return _MISSING
    return data.get(leaf, _MISSING)


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ShedocConfig:
    table_display = ".".join(table_path)

    if raw_config is None or raw_config == {}:
        return ShedocConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    # TOML keys use dashes; dataclass fields use underscores.
    normalized = {key.replace("-", "_"): value for key, value in raw_config.items()}
    try:
        return ShedocConfig(**normalized)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: ShedocConfig) -> None:
    """Validate a `ShedocConfig` instance.

    Raises:
        ConfigError: If the format is empty, a switch is not a boolean, or the
            size limit is not a positive integer.

    Examples:
        validate_config(ShedocConfig(max_file_size=4096))
    """
    if not isinstance(config.format, str) or not config.format:
        raise ConfigError("`format` must be a non-empty string")

    for key in ("warnings", "quiet"):
        if not isinstance(getattr(config, key), bool):
            raise ConfigError(f"`{key}` must be a boolean")

    value = config.max_file_size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError("`max_file_size` must be an integer")
    if value <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: ShedocConfig, **overrides: object) -> ShedocConfig:
    """Apply override values to a `ShedocConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        ShedocConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `ShedocConfig`.
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> ShedocConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        ShedocConfig: Validated configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), format="man")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
