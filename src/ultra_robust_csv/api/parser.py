"""Convenience API with progressive disclosure for ultra-robust CSV processing.

Module-level functions cover the common cases with a single call. They build
a :class:`CSVTokenizer` or :class:`CSVWriter` per call, so options passed here
never leak into other calls.
"""

import time
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from ultra_robust_csv.character import SourceParameter
from ultra_robust_csv.serialization import CSVWriter, WriterStream
from ultra_robust_csv.shared import StreamingConfig, get_logger
from ultra_robust_csv.tokenization import CSVTokenizer, OptionsParameter, Row

PathType = Union[str, Path]
RowsType = Iterable[Optional[Iterable[Any]]]

# Milliseconds per second conversion
MS_PER_SECOND = 1000


def parse(
    source: SourceParameter, options: OptionsParameter = None, **overrides: Any
) -> CSVTokenizer:
    """Attach CSV data to a new tokenizer.

    The returned tokenizer is lazy: nothing is read until rows are requested.

    Args:
        source: CSV as a string, bytes, file-like object, or iterable of strings
        options: Partial options mapping or a complete CSVConfig
        **overrides: Options given as keyword arguments

    Returns:
        CSVTokenizer bound to ``source``

    Examples:
        Eager parsing:
        >>> parse("a,b\\r\\n1,2\\r\\n").rows()
        [['a', 'b'], ['1', '2']]

        Lazy iteration with a custom separator:
        >>> for row in parse("a|b\\n", separator="|"):
        ...     print(row)
        ['a', 'b']
    """
    return CSVTokenizer(options, source, **overrides)


def parse_file(
    file_path: PathType,
    options: OptionsParameter = None,
    *,
    encoding: Optional[str] = None,
    **overrides: Any,
) -> List[Row]:
    """Parse every row of a CSV file.

    The file is opened in binary mode so that a byte order mark selects the
    encoding when ``encoding`` is not given; UTF-8 is assumed otherwise.

    Args:
        file_path: Path to the CSV file
        options: Partial options mapping or a complete CSVConfig
        encoding: Optional encoding override
        **overrides: Options given as keyword arguments

    Returns:
        List of rows

    Raises:
        OSError: If the file cannot be opened or read
        UnicodeDecodeError: If the content is invalid for the encoding
    """
    path = Path(file_path)
    logger = get_logger(__name__, component="parse_file")
    start_time = time.time()

    with path.open("rb") as handle:
        tokenizer = CSVTokenizer(
            options, streaming=StreamingConfig(encoding=encoding), **overrides
        )
        rows = tokenizer.parse(handle).rows()

    logger.info(
        "Parsed CSV file",
        extra={
            "file_path": str(path),
            "rows": len(rows),
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        },
    )
    return rows


def write(rows: RowsType, options: OptionsParameter = None, **overrides: Any) -> str:
    """Serialize rows to CSV text.

    Examples:
        >>> write([["Hello", "World"], ["a,b", 'say "hi" now']])
        'Hello,World\\r\\n"a,b","say ""hi"" now"\\r\\n'
        >>> write([["a", "b"]], newline="\\n", quote_all=True)
        '"a","b"\\n'
    """
    return CSVWriter(options, **overrides).write(rows)


def write_file(
    file_path: PathType,
    rows: RowsType,
    options: OptionsParameter = None,
    *,
    encoding: str = "utf-8",
    **overrides: Any,
) -> int:
    """Serialize rows into a file, one row at a time.

    The file is opened with ``newline=""`` so the configured terminator is
    written unchanged on every platform.

    Returns:
        Number of characters written
    """
    path = Path(file_path)
    logger = get_logger(__name__, component="write_file")
    writer = CSVWriter(options, **overrides)

    with path.open("w", encoding=encoding, newline="") as handle:
        written = writer.sink(handle).write_rows(rows)

    logger.info(
        "Wrote CSV file",
        extra={
            "file_path": str(path),
            "rows": writer.statistics.rows,
            "characters_written": written,
        },
    )
    return written


def stream(
    rows: RowsType, options: OptionsParameter = None, **overrides: Any
) -> WriterStream:
    """Return a readable text stream that serializes ``rows`` on demand.

    Example:
        >>> source = stream(iter([["a", "b"], ["c", "d"]]))
        >>> source.read(4)
        'a,b\\r'
    """
    return CSVWriter(options, **overrides).stream(rows)
