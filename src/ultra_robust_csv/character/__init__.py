"""Character source layer for ultra-robust CSV parsing.

This module provides the pull-based character sources consumed by the row
tokenizer, plus byte order mark handling for byte-oriented inputs.
"""

from .encoding import (
    BOMDetector,
    DetectionMethod,
    EncodingResult,
    select_encoding,
)
from .source import (
    CharacterSource,
    EmptySource,
    IterableSource,
    SourceParameter,
    StreamSource,
    StringSource,
    attach_source,
)

__all__ = [
    "BOMDetector",
    "DetectionMethod",
    "EncodingResult",
    "select_encoding",
    "CharacterSource",
    "EmptySource",
    "IterableSource",
    "SourceParameter",
    "StreamSource",
    "StringSource",
    "attach_source",
]
