"""Statistics objects for ultra-robust CSV reading and writing.

Counters are updated once per row, never per character, so keeping them does
not slow down the tokenizer's inner loop.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class RowTerminator(Enum):
    """How a parsed row ended."""

    LF = "lf"                    # Unix "\n"
    CRLF = "crlf"                # Windows "\r\n"
    END_OF_DATA = "end_of_data"  # Source exhausted mid-row

    @property
    def length(self) -> int:
        """Number of source characters belonging to the terminator."""
        if self is RowTerminator.CRLF:
            return 2
        if self is RowTerminator.LF:
            return 1
        return 0


@dataclass
class ParseStatistics:
    """Running statistics for rows produced by a tokenizer."""

    rows: int = 0
    empty_rows: int = 0
    columns: int = 0
    characters_consumed: int = 0
    min_columns: Optional[int] = None
    max_columns: int = 0
    terminators: Dict[str, int] = field(
        default_factory=lambda: {t.value: 0 for t in RowTerminator}
    )
    unterminated_final_row: bool = False

    def record_row(
        self, column_count: int, consumed: int, terminator: RowTerminator
    ) -> None:
        """Account for one finished row."""
        self.rows += 1
        self.columns += column_count
        self.characters_consumed += consumed
        if column_count == 0:
            self.empty_rows += 1
        if self.min_columns is None or column_count < self.min_columns:
            self.min_columns = column_count
        if column_count > self.max_columns:
            self.max_columns = column_count
        self.terminators[terminator.value] += 1
        self.unterminated_final_row = terminator is RowTerminator.END_OF_DATA

    @property
    def average_columns(self) -> float:
        """Average number of columns per row."""
        if self.rows == 0:
            return 0.0
        return self.columns / self.rows

    @property
    def is_rectangular(self) -> bool:
        """True when every row has the same number of columns."""
        return self.rows == 0 or self.min_columns == self.max_columns

    @property
    def mixed_terminators(self) -> bool:
        """True when both LF and CRLF terminated rows were seen."""
        return (
            self.terminators[RowTerminator.LF.value] > 0
            and self.terminators[RowTerminator.CRLF.value] > 0
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to a JSON-friendly dictionary."""
        data = asdict(self)
        data["average_columns"] = self.average_columns
        data["is_rectangular"] = self.is_rectangular
        data["mixed_terminators"] = self.mixed_terminators
        return data


@dataclass
class WriteStatistics:
    """Running statistics for rows serialized by a writer."""

    rows: int = 0
    columns: int = 0
    quoted_columns: int = 0
    characters_written: int = 0

    def record_row(self, column_count: int, quoted: int, length: int) -> None:
        """Account for one serialized row."""
        self.rows += 1
        self.columns += column_count
        self.quoted_columns += quoted
        self.characters_written += length

    @property
    def quote_rate(self) -> float:
        """Fraction of written columns that needed quoting."""
        if self.columns == 0:
            return 0.0
        return self.quoted_columns / self.columns

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to a JSON-friendly dictionary."""
        data = asdict(self)
        data["quote_rate"] = self.quote_rate
        return data
