"""Public API for ultra-robust CSV processing.

Key Components:
    parse / parse_file: Read CSV from strings, streams, iterables or files
    write / write_file / stream: Produce CSV as text, files or readable streams
    PandasAdapter: Exchange rows with pandas DataFrames (optional dependency)
"""

from .adapters import (
    AdapterMetadata,
    AdapterType,
    ConversionResult,
    IntegrationAdapter,
    PandasAdapter,
)
from .parser import (
    parse,
    parse_file,
    stream,
    write,
    write_file,
)

__all__ = [
    "parse",
    "parse_file",
    "stream",
    "write",
    "write_file",
    "AdapterMetadata",
    "AdapterType",
    "ConversionResult",
    "IntegrationAdapter",
    "PandasAdapter",
]
