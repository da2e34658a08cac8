"""CSV serialization for ultra-robust CSV processing.

Key Components:
    CSVWriter: Converts rows of values into CSV text
    WriterRowIterator: Lazy iterator yielding one serialized row per step
    WriterCharacterIterator: Lazy iterator yielding one character per step
    WriterStream: Readable text stream serializing rows on demand
    RowStreamWriter: Pushes serialized rows into a writable text target
"""

from .stream import (
    RowStreamWriter,
    WriterCharacterIterator,
    WriterRowIterator,
    WriterStream,
)
from .writer import CSVWriter

__all__ = [
    "CSVWriter",
    "RowStreamWriter",
    "WriterCharacterIterator",
    "WriterRowIterator",
    "WriterStream",
]
