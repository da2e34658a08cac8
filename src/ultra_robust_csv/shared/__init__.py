"""Shared utilities for ultra-robust CSV processing.

This module provides the configuration objects, statistics types, and logging
helpers used by both the tokenizer and the writer.
"""

from .result import (
    ParseStatistics,
    RowTerminator,
    WriteStatistics,
)
from .config import (
    DEFAULT_OPTIONS,
    ConfigError,
    ConfigValidationError,
    CSVConfig,
    StreamingConfig,
    coerce_config,
    resolve_config,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ParseStatistics",
    "RowTerminator",
    "WriteStatistics",
    "DEFAULT_OPTIONS",
    "ConfigError",
    "ConfigValidationError",
    "CSVConfig",
    "StreamingConfig",
    "coerce_config",
    "resolve_config",
    "CorrelationLogger",
    "get_logger",
]
