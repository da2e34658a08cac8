"""Core CSV row writer with RFC 4180 quoting decisions.

A column is quoted when the configuration forces it or when its text contains
the separator, the quote character, a carriage return or line feed, or any
character of the configured row terminator. A row made of one empty column is
written as an empty quoted column so that it differs from an empty row, unless
the separator is empty.
Quote characters inside a quoted column are doubled. With a one-character
separator and quote and a "\\n" or "\\r\\n" newline, output produced by
:class:`CSVWriter` is read back unchanged by
:class:`~ultra_robust_csv.tokenization.CSVTokenizer` under the same
configuration.
"""

from typing import Any, FrozenSet, Iterable, Optional, Tuple

from ultra_robust_csv.shared import WriteStatistics, coerce_config, get_logger
from ultra_robust_csv.tokenization.tokenizer import OptionsParameter

from .stream import (
    RowStreamWriter,
    WriterCharacterIterator,
    WriterRowIterator,
    WriterStream,
)


class CSVWriter:
    """Serializes rows of arbitrary values as CSV text.

    Values are converted with ``str()``. Rows are any iterable of values; a
    ``None`` row is written as an empty row.

    Carriage returns and line feeds force quoting even when the configured
    newline contains neither, because the tokenizer ends rows at "\\n" and
    "\\r\\n" whatever the newline option is.

    Example:
        >>> CSVWriter().write([["a", "b,c"], [1, 2]])
        'a,"b,c"\\r\\n1,2\\r\\n'
    """

    def __init__(
        self,
        options: OptionsParameter = None,
        *,
        correlation_id: Optional[str] = None,
        **overrides: Any,
    ) -> None:
        """Initialize the CSV writer.

        Args:
            options: Partial options mapping or a complete CSVConfig
            correlation_id: Optional correlation ID for tracking requests
            **overrides: Options given as keyword arguments
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, "csv_writer")
        self.statistics = WriteStatistics()
        self.configure(options, **overrides)

    @property
    def separator(self) -> str:
        return self.config.separator

    @property
    def newline(self) -> str:
        return self.config.newline

    @property
    def quote(self) -> str:
        return self.config.quote

    @property
    def quote_all(self) -> bool:
        return self.config.quote_all

    def configure(
        self, options: OptionsParameter = None, **overrides: Any
    ) -> "CSVWriter":
        """Replace the whole configuration of this writer.

        Returns:
            This instance, for chaining
        """
        self.config = coerce_config(options, **overrides)
        # The tokenizer ends rows at "\n" and "\r\n" whatever the newline option
        self._specials: FrozenSet[str] = frozenset(
            self.config.separator + self.config.quote + self.config.newline + "\r\n"
        )
        self._logger.debug("Writer configured", extra=self.config.to_dict())
        return self

    def write(self, rows: Iterable[Optional[Iterable[Any]]]) -> str:
        """Serialize every row and return the concatenated CSV text.

        Every row, the last one included, ends with the configured newline.
        """
        return "".join(self.write_row(row) for row in rows)

    def rows(self, rows: Iterable[Optional[Iterable[Any]]]) -> WriterRowIterator:
        """Lazily serialize ``rows``, yielding one CSV row string per step."""
        return WriterRowIterator(rows, self)

    def iterate(
        self, rows: Iterable[Optional[Iterable[Any]]]
    ) -> WriterCharacterIterator:
        """Lazily serialize ``rows``, yielding one character per step."""
        return WriterCharacterIterator(rows, self)

    def stream(self, rows: Iterable[Optional[Iterable[Any]]]) -> WriterStream:
        """Return a readable text stream serializing ``rows`` on demand."""
        return WriterStream(rows, self)

    def sink(self, target: Any) -> RowStreamWriter:
        """Return a writer pushing serialized rows into ``target.write``."""
        return RowStreamWriter(target, self)

    def write_row(self, row: Optional[Iterable[Any]]) -> str:
        """Serialize a single row, terminator included.

        Args:
            row: Iterable of column values, or None for an empty row

        Returns:
            The row's CSV text
        """
        newline = self.config.newline
        if row is None:
            self.statistics.record_row(0, 0, len(newline))
            return newline
        columns = []
        quoted = 0
        for value in row:
            text, was_quoted = self._serialize_column(value)
            columns.append(text)
            quoted += was_quoted
        if columns == [""] and self.config.quote and self.config.separator:
            # A lone empty column would read back as an empty row
            columns[0] = self.config.quote * 2
            quoted = 1
        data = self.config.separator.join(columns) + newline
        self.statistics.record_row(len(columns), quoted, len(data))
        return data

    def write_column(self, value: Any) -> str:
        """Serialize a single column value, quoting it when required."""
        return self._serialize_column(value)[0]

    def _serialize_column(self, value: Any) -> Tuple[str, bool]:
        text = str(value)
        if not self.config.quote_all and self._specials.isdisjoint(text):
            return text, False
        quote = self.config.quote
        if quote:
            text = text.replace(quote, quote + quote)
        return quote + text + quote, True
