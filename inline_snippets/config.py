"""Configuration loading and management."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_INLINE_MARKER, DEFAULT_TIMEOUT


@dataclass(frozen=True)
class SnippetConfig:
    """Configuration for one run of the snippet transform.

    Attributes:
        inline_marker: Link label that flags a link for inlining.
        origin_comment: Comment placed on top of each snippet; ``<url>`` is
            replaced with the link target. No comment is added when None.
        on_error: Called once with the error of every failed fetch. Errors are
            only logged when None.
        timeout: Seconds allowed for each fetch, or None to wait indefinitely.
        max_concurrency: Upper bound on simultaneous fetches, or None for no
            bound.

    Examples:
        SnippetConfig(origin_comment="Source of this code snippet: <url>")
    """

    inline_marker: str = DEFAULT_INLINE_MARKER
    origin_comment: str | None = None
    on_error: Callable[[Exception], None] | None = field(default=None, compare=False)
    timeout: float | None = DEFAULT_TIMEOUT
    max_concurrency: int | None = None

    def report_error(self, error: Exception) -> None:
        if self.on_error is not None:
            self.on_error(error)


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`inline_marker` must not be empty")
    """


# Settings that make no sense in a TOML file
_RUNTIME_ONLY_KEYS = frozenset({"on_error"})


def load_config(search_path: Path) -> SnippetConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.inline-snippets]`` table from `pyproject.toml` and the
    ``[inline-snippets]`` or ``[tool.inline-snippets]`` table from
    `.inline-snippets.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        SnippetConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but is not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "inline-snippets")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".inline-snippets.toml",
            table_paths=[("inline-snippets",), ("tool", "inline-snippets")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return SnippetConfig()


_MISSING = object()


def _load_from_file(config_file: Path, table_paths: list[tuple[str, ...]]) -> SnippetConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> SnippetConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return SnippetConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return SnippetConfig()

    # TOML keys use dashes, dataclass fields use underscores
    settings = {key.replace("-", "_"): value for key, value in raw_config.items()}
    if _RUNTIME_ONLY_KEYS & settings.keys():
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    try:
        return SnippetConfig(**settings)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: SnippetConfig) -> None:
    """Validate a `SnippetConfig` instance.

    Args:
        config: Configuration to validate.

    Raises:
        ConfigError: If the marker is empty or not a string, the origin comment
            is not a string, `on_error` is not callable, or a numeric limit is
            not positive.

    Examples:
        validate_config(SnippetConfig(inline_marker="snippet"))
    """
    if not isinstance(config.inline_marker, str) or not config.inline_marker:
        raise ConfigError("`inline_marker` must be a non-empty string")
    if config.origin_comment is not None and not isinstance(config.origin_comment, str):
        raise ConfigError("`origin_comment` must be a string")
    if config.on_error is not None and not callable(config.on_error):
        raise ConfigError("`on_error` must be callable")

    if config.timeout is not None:
        if isinstance(config.timeout, bool) or not isinstance(config.timeout, (int, float)):
            raise ConfigError("`timeout` must be a number")
        if config.timeout <= 0:
            raise ConfigError("`timeout` must be positive")

    if config.max_concurrency is not None:
        if isinstance(config.max_concurrency, bool) or not isinstance(config.max_concurrency, int):
            raise ConfigError("`max_concurrency` must be an integer")
        if config.max_concurrency <= 0:
            raise ConfigError("`max_concurrency` must be a positive integer")


def apply_overrides(config: SnippetConfig, **overrides: object) -> SnippetConfig:
    """Apply override values to a `SnippetConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        SnippetConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        ConfigError: If an override name is not a `SnippetConfig` field.

    Examples:
        updated = apply_overrides(config, inline_marker="snippet")
    """
    known = {item.name for item in fields(SnippetConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path | None = None, **overrides: object) -> SnippetConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved. Defaults
            are used when None.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        SnippetConfig: Validated configuration ready for a transform run.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), origin_comment="From <url>")
    """
    config = load_config(search_path) if search_path is not None else SnippetConfig()
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config
