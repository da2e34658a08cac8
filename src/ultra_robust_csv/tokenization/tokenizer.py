"""Core CSV row tokenizer implemented as a per-row character state machine.

This module turns a character source into rows of column strings, one row per
call, without ever raising for malformed input. Every RFC 4180 edge case is
resolved to a defined result: doubled quotes, separators and newlines inside
quoted spans, mixed LF/CRLF terminators, a final row without a terminator, and
empty separator or quote configuration.
"""

from typing import Any, Iterator, List, Mapping, Optional, Union

from ultra_robust_csv.character import SourceParameter, attach_source
from ultra_robust_csv.character.source import CharacterSource
from ultra_robust_csv.shared import (
    CSVConfig,
    ParseStatistics,
    RowTerminator,
    StreamingConfig,
    coerce_config,
    get_logger,
)

Row = List[str]
OptionsParameter = Union[None, CSVConfig, Mapping[str, Any]]


class CSVTokenizer:
    """Incremental CSV row tokenizer.

    A tokenizer is configured once (or explicitly reconfigured), bound to a
    character source with :meth:`parse`, and then drained either lazily with
    :meth:`next_row` / iteration or eagerly with :meth:`rows`. It advances
    monotonically through its source and cannot rewind. Instances carry
    mutable cursor state and must not be shared between threads.

    Example:
        >>> CSVTokenizer().parse('a,"b,c"\\r\\n1,2').rows()
        [['a', 'b,c'], ['1', '2']]
    """

    def __init__(
        self,
        options: OptionsParameter = None,
        source: SourceParameter = None,
        *,
        streaming: Optional[StreamingConfig] = None,
        correlation_id: Optional[str] = None,
        **overrides: Any,
    ) -> None:
        """Initialize the CSV tokenizer.

        Args:
            options: Partial options mapping or a complete CSVConfig
            source: Optional CSV input to attach immediately
            streaming: Buffering options for stream-backed sources
            correlation_id: Optional correlation ID for tracking requests
            **overrides: Options given as keyword arguments
        """
        self.correlation_id = correlation_id
        self.streaming = streaming or StreamingConfig()
        self._logger = get_logger(__name__, correlation_id, "csv_tokenizer")
        self.source: Optional[CharacterSource] = None
        self.statistics = ParseStatistics()
        self.last_terminator: Optional[RowTerminator] = None
        self._exhausted = False
        self.configure(options, **overrides)
        if source is not None:
            self.parse(source)

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
    ) -> "CSVTokenizer":
        """Replace the whole configuration of this tokenizer.

        Fields missing from ``options`` take their defaults, never the values
        previously held by this instance.

        Returns:
            This instance, for chaining
        """
        self.config = coerce_config(options, **overrides)
        self._logger.debug("Tokenizer configured", extra=self.config.to_dict())
        return self

    def parse(self, source: SourceParameter) -> "CSVTokenizer":
        """Attach a CSV data source, replacing any previous one.

        Args:
            source: A string, bytes, a file-like object, a CharacterSource, or
                any iterable of strings. None attaches an empty source.

        Returns:
            This instance, for chaining
        """
        self.source = attach_source(source, self.streaming, self.correlation_id)
        self.statistics = ParseStatistics()
        self.last_terminator = None
        self._exhausted = False
        self._logger.debug(
            "Source attached",
            extra={"source_class": type(self.source).__name__},
        )
        return self

    def rows(self) -> List[Row]:
        """Consume the remaining source and return every row.

        Equivalent to ``list(tokenizer)``.
        """
        return list(self)

    def __iter__(self) -> Iterator[Row]:
        return self

    def __next__(self) -> Row:
        row = self.next_row()
        if row is None:
            raise StopIteration
        return row

    def next_row(self) -> Optional[Row]:
        """Parse one row from the source and advance past it.

        Returns:
            The row's columns, possibly an empty list for an empty line, or
            None when there are no rows left
        """
        if self.source is None:
            return None
        read_char = self.source.read_char
        quote = self.config.quote
        separator = self.config.separator

        row: Row = []
        column: List[str] = []
        quoted = False
        last = ""
        consumed = 0
        terminator = RowTerminator.END_OF_DATA

        while True:
            ch = read_char()
            if not ch:
                if consumed == 0:
                    self._finish()
                    return None
                break
            consumed += 1
            if quoted and ch == quote:
                quoted = False
            elif quoted:
                column.append(ch)
            elif last == quote and ch == quote:
                # Doubled quote: the span closed on the previous character
                quoted = True
                column.append(quote)
            elif ch == quote:
                quoted = True
            elif ch == separator:
                row.append("".join(column))
                column = []
            elif ch == "\n":
                if last == "\r":
                    if column and column[-1] == "\r":
                        column.pop()
                    terminator = RowTerminator.CRLF
                else:
                    terminator = RowTerminator.LF
                break
            else:
                column.append(ch)
            last = ch

        # An empty line holds nothing but its terminator and has no columns
        if consumed > terminator.length:
            row.append("".join(column))

        self.last_terminator = terminator
        self.statistics.record_row(len(row), consumed, terminator)
        return row

    def _finish(self) -> None:
        if self._exhausted:
            return
        self._exhausted = True
        self._logger.debug(
            "End of CSV data",
            extra={
                "rows": self.statistics.rows,
                "characters_consumed": self.statistics.characters_consumed,
                "unterminated_final_row": self.statistics.unterminated_final_row,
            },
        )
