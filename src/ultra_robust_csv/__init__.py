"""Ultra-Robust CSV.

An RFC 4180 CSV reader and writer that never fails on malformed input: every
edge case (doubled quotes, embedded separators and newlines, mixed LF/CRLF
terminators, a missing final terminator) resolves to a defined result, and
everything the writer produces is read back unchanged.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_file(), write(), write_file()
- Level 2: Configured objects - CSVTokenizer and CSVWriter classes
- Level 3: Streaming - lazy iteration, stream(), CSVWriter.sink()
- Level 4: Integrations - PandasAdapter (optional pandas dependency)
"""

__version__ = "0.1.0"
__author__ = "Ultra Robust CSV Team"

# Progressive API disclosure - Level 1: Simple functions
from .api import parse, parse_file, stream, write, write_file

# Progressive API disclosure - Level 2: Configured objects
from .serialization import CSVWriter, WriterStream
from .tokenization import CSVTokenizer

# Configuration classes for advanced usage
from .shared.config import (
    DEFAULT_OPTIONS,
    ConfigError,
    ConfigValidationError,
    CSVConfig,
    StreamingConfig,
)

# Statistics objects for all API levels
from .shared.result import ParseStatistics, RowTerminator, WriteStatistics

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions (progressive disclosure entry point)
    "parse",
    "parse_file",
    "stream",
    "write",
    "write_file",

    # Level 2: Configured objects
    "CSVTokenizer",
    "CSVWriter",
    "WriterStream",

    # Statistics
    "ParseStatistics",
    "RowTerminator",
    "WriteStatistics",

    # Configuration classes for advanced usage
    "DEFAULT_OPTIONS",
    "ConfigError",
    "ConfigValidationError",
    "CSVConfig",
    "StreamingConfig",
]
