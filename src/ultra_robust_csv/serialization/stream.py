"""Lazy and streaming adapters around :class:`CSVWriter`.

All adapters serialize on demand: nothing is written until the consumer asks
for it, and no adapter holds more than one serialized row beyond what the
consumer has requested.
"""

import io
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Optional

from ultra_robust_csv.shared import get_logger

if TYPE_CHECKING:
    from .writer import CSVWriter

RowsParameter = Iterable[Optional[Iterable[Any]]]


class WriterRowIterator:
    """Iterator yielding each input row as one serialized CSV string."""

    def __init__(self, rows: RowsParameter, writer: "CSVWriter") -> None:
        self._rows = iter(rows)
        self.writer = writer

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        return self.writer.write_row(next(self._rows))


class WriterCharacterIterator:
    """Iterator yielding serialized CSV output one character at a time.

    One serialized row is buffered at a time. Rows serializing to an empty
    string, which only happens with an empty newline, are skipped.
    """

    def __init__(self, rows: RowsParameter, writer: "CSVWriter") -> None:
        self._rows = iter(rows)
        self.writer = writer
        self.buffer = ""
        self.index = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        while self.index >= len(self.buffer):
            self.buffer = self.writer.write_row(next(self._rows))
            self.index = 0
        ch = self.buffer[self.index]
        self.index += 1
        return ch


class WriterStream(io.TextIOBase):
    """Readable text stream producing CSV for a sequence of rows.

    Each time more text is needed exactly one further row is serialized, so
    ``read(size)`` never runs ahead of the caller by more than one row. The
    stream can be passed anywhere a readable text file is expected, including
    back into :meth:`CSVTokenizer.parse`.
    """

    def __init__(self, rows: RowsParameter, writer: "CSVWriter") -> None:
        super().__init__()
        self._rows: Optional[Iterator[Optional[Iterable[Any]]]] = iter(rows)
        self.writer = writer
        self._buffer = ""
        self._index = 0
        self._logger = get_logger(__name__, writer.correlation_id, "writer_stream")

    def readable(self) -> bool:
        return True

    def read(self, size: Optional[int] = -1) -> str:
        self._check_open()
        if size is None or size < 0:
            while self._pull():
                pass
            return self._take(len(self._buffer) - self._index)
        while len(self._buffer) - self._index < size and self._pull():
            pass
        return self._take(size)

    def readline(self, size: Optional[int] = -1) -> str:  # type: ignore[override]
        self._check_open()
        limit = -1 if size is None else size
        while True:
            end = self._buffer.find("\n", self._index)
            available = len(self._buffer) - self._index
            if end >= 0:
                length = end - self._index + 1
                break
            if 0 <= limit <= available or not self._pull():
                length = available
                break
        if limit >= 0:
            length = min(length, limit)
        return self._take(length)

    def close(self) -> None:
        self._rows = None
        self._buffer = ""
        self._index = 0
        super().close()

    def _pull(self) -> bool:
        """Serialize one more row into the buffer; False when rows ran out."""
        if self._rows is None:
            return False
        try:
            row = next(self._rows)
        except StopIteration:
            self._rows = None
            self._logger.debug(
                "Row source exhausted",
                extra={"rows": self.writer.statistics.rows},
            )
            return False
        self._buffer = self._buffer[self._index:] + self.writer.write_row(row)
        self._index = 0
        return True

    def _take(self, length: int) -> str:
        data = self._buffer[self._index:self._index + length]
        self._index += len(data)
        return data

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")


class RowStreamWriter:
    """Push-style writer serializing rows into any object with ``write(str)``.

    The target is never closed by this class.

    Example:
        >>> import io
        >>> from ultra_robust_csv.serialization import CSVWriter
        >>> buffer = io.StringIO()
        >>> CSVWriter().sink(buffer).write_rows([["a", 1]])
        5
    """

    def __init__(self, target: Any, writer: "CSVWriter") -> None:
        self.target = target
        self.writer = writer

    def write_row(self, row: Optional[Iterable[Any]]) -> int:
        """Serialize one row into the target; returns characters written."""
        data = self.writer.write_row(row)
        self.target.write(data)
        return len(data)

    def write_rows(self, rows: RowsParameter) -> int:
        """Serialize every row into the target; returns characters written."""
        return sum(self.write_row(row) for row in rows)
