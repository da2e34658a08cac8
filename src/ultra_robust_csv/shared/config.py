"""Configuration classes for ultra-robust CSV reading and writing.

This module provides the immutable dialect configuration shared by the row
tokenizer and the row writer, the resolution function that merges a partial
options mapping over the documented defaults, and the buffering configuration
used by stream-backed character sources.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from .logging import get_logger

# Documented defaults: RFC 4180 comma separated values with CRLF terminators
DEFAULT_SEPARATOR = ","
DEFAULT_NEWLINE = "\r\n"
DEFAULT_QUOTE = '"'
DEFAULT_QUOTE_ALL = False

DEFAULT_OPTIONS: Mapping[str, Any] = {
    "separator": DEFAULT_SEPARATOR,
    "newline": DEFAULT_NEWLINE,
    "quote": DEFAULT_QUOTE,
    "quote_all": DEFAULT_QUOTE_ALL,
}

# Option keys accepted from JSON-style options objects
OPTION_ALIASES: Mapping[str, str] = {
    "quoteAll": "quote_all",
}

DEFAULT_BUFFER_SIZE = 8192

logger = get_logger(__name__, component="config")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class CSVConfig:
    """Dialect configuration consumed identically by tokenizer and writer.

    ``separator`` and ``quote`` hold at most one character. An empty string is
    a supported degenerate value: no input character ever matches it, so the
    corresponding feature is disabled. ``newline`` may be any string; the
    tokenizer only ever recognizes ``\\n`` and ``\\r\\n`` as row terminators
    regardless of this value. ``quote_all`` only affects writing.
    """

    separator: str = DEFAULT_SEPARATOR
    newline: str = DEFAULT_NEWLINE
    quote: str = DEFAULT_QUOTE
    quote_all: bool = DEFAULT_QUOTE_ALL

    def __post_init__(self) -> None:
        """Validate dialect characters."""
        for name in ("separator", "newline", "quote"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigValidationError(
                    f"{name} must be a string, got {type(value).__name__}",
                    field_name=name,
                )
        for name in ("separator", "quote"):
            if len(getattr(self, name)) > 1:
                raise ConfigValidationError(
                    f"{name} must be a single character or empty, "
                    f"got {getattr(self, name)!r}",
                    field_name=name,
                    suggestions=[
                        f"Use a one-character {name}",
                        f"Use an empty {name} to disable it",
                    ],
                )
        if not isinstance(self.quote_all, bool):
            raise ConfigValidationError(
                "quote_all must be a bool", field_name="quote_all"
            )

    @classmethod
    def rfc4180(cls) -> "CSVConfig":
        """Create the default RFC 4180 configuration."""
        return cls()

    @classmethod
    def unix(cls) -> "CSVConfig":
        """Create a configuration that terminates rows with a bare LF."""
        return cls(newline="\n")

    @classmethod
    def tab_separated(cls) -> "CSVConfig":
        """Create a configuration for tab separated values."""
        return cls(separator="\t")

    @classmethod
    def quote_everything(cls) -> "CSVConfig":
        """Create a configuration that quotes every written column."""
        return cls(quote_all=True)

    def override(self, **kwargs: Any) -> "CSVConfig":
        """Create a new configuration with specific fields replaced.

        Example:
            >>> CSVConfig().override(separator=";").separator
            ';'
        """
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CSVConfig":
        """Create configuration from an options dictionary.

        Missing keys take their default values, see :func:`resolve_config`.
        """
        return resolve_config(data)

    @classmethod
    def from_json(cls, json_str: str) -> "CSVConfig":
        """Create configuration from a JSON options object."""
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("JSON configuration must be an object")
        return cls.from_dict(data)


@dataclass
class StreamingConfig:
    """Configuration for stream-backed character sources."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: Optional[str] = None  # None -> BOM detection, then utf-8
    errors: str = "strict"

    def __post_init__(self) -> None:
        """Validate streaming configuration."""
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        if self.errors not in ("strict", "replace", "ignore", "surrogateescape"):
            raise ValueError(
                "errors must be 'strict', 'replace', 'ignore' or 'surrogateescape'"
            )


def coerce_config(
    options: Union[None, CSVConfig, Mapping[str, Any]] = None, **overrides: Any
) -> CSVConfig:
    """Accept either a ready CSVConfig or a partial options mapping.

    A CSVConfig is already complete, so keyword overrides replace its fields
    directly; anything else goes through :func:`resolve_config`.
    """
    if isinstance(options, CSVConfig):
        return options.override(**overrides) if overrides else options
    return resolve_config(options, **overrides)


def resolve_config(
    options: Optional[Mapping[str, Any]] = None, **overrides: Any
) -> CSVConfig:
    """Resolve a complete configuration from a partial options mapping.

    A field is taken from ``options`` only when its key is present, otherwise
    from :data:`DEFAULT_OPTIONS`. Falsy values (``None``, ``""``, ``0``) are
    then coerced to ``""`` or ``False``, so an explicitly empty separator,
    quote or newline is honored rather than replaced by the default.
    Keyword ``overrides`` are applied on top of ``options``.

    Args:
        options: Optional mapping of option names to values
        **overrides: Options given as keyword arguments

    Returns:
        A new immutable CSVConfig

    Raises:
        ConfigValidationError: If ``options`` is not a mapping or a resolved
            value is invalid
    """
    if options is not None and not isinstance(options, Mapping):
        raise ConfigValidationError(
            f"CSV options must be a mapping, got {type(options).__name__}",
            suggestions=['Pass an object such as {"separator": ";"}'],
        )
    merged: Dict[str, Any] = {}
    for source in (options or {}, overrides):
        for key, value in source.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in DEFAULT_OPTIONS:
                logger.warning(
                    "Ignoring unknown CSV option",
                    extra={"option": key},
                )
                continue
            merged[name] = value

    resolved: Dict[str, Any] = {}
    for field_info in fields(CSVConfig):
        name = field_info.name
        value = merged[name] if name in merged else DEFAULT_OPTIONS[name]
        if name == "quote_all":
            resolved[name] = bool(value)
        else:
            resolved[name] = value or ""

    config = CSVConfig(**resolved)

    for name in ("separator", "newline", "quote"):
        if not resolved[name]:
            logger.debug(
                "Empty option disables the feature",
                extra={"option": name},
            )
    if config.quote and config.separator == config.quote:
        logger.warning(
            "Separator equals quote character; separator will never split",
            extra={"separator": config.separator},
        )
    return config
