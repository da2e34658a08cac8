"""Tests for parse and write statistics."""

from ultra_robust_csv.shared.result import (
    ParseStatistics,
    RowTerminator,
    WriteStatistics,
)


class TestRowTerminator:
    """Test suite for RowTerminator."""

    def test_lengths(self):
        """Test number of characters belonging to each terminator."""
        assert RowTerminator.CRLF.length == 2
        assert RowTerminator.LF.length == 1
        assert RowTerminator.END_OF_DATA.length == 0


class TestParseStatistics:
    """Test suite for ParseStatistics."""

    def test_empty_statistics(self):
        """Test statistics before any row is recorded."""
        stats = ParseStatistics()

        assert stats.rows == 0
        assert stats.min_columns is None
        assert stats.average_columns == 0.0
        assert stats.is_rectangular is True
        assert stats.mixed_terminators is False

    def test_record_rows(self):
        """Test counters after several rows."""
        stats = ParseStatistics()
        stats.record_row(3, 8, RowTerminator.CRLF)
        stats.record_row(0, 1, RowTerminator.LF)
        stats.record_row(1, 5, RowTerminator.END_OF_DATA)

        assert stats.rows == 3
        assert stats.empty_rows == 1
        assert stats.columns == 4
        assert stats.characters_consumed == 14
        assert stats.min_columns == 0
        assert stats.max_columns == 3
        assert stats.terminators == {"lf": 1, "crlf": 1, "end_of_data": 1}
        assert stats.unterminated_final_row is True
        assert stats.mixed_terminators is True
        assert stats.is_rectangular is False

    def test_unterminated_flag_tracks_last_row(self):
        """Test the flag reflects only the most recent row."""
        stats = ParseStatistics()
        stats.record_row(1, 1, RowTerminator.END_OF_DATA)
        stats.record_row(1, 3, RowTerminator.CRLF)

        assert stats.unterminated_final_row is False

    def test_to_dict(self):
        """Test dictionary conversion includes derived values."""
        stats = ParseStatistics()
        stats.record_row(2, 5, RowTerminator.CRLF)
        stats.record_row(2, 5, RowTerminator.CRLF)

        data = stats.to_dict()

        assert data["rows"] == 2
        assert data["average_columns"] == 2.0
        assert data["is_rectangular"] is True
        assert data["mixed_terminators"] is False
        assert data["terminators"]["crlf"] == 2


class TestWriteStatistics:
    """Test suite for WriteStatistics."""

    def test_record_rows(self):
        """Test counters and quote rate."""
        stats = WriteStatistics()
        stats.record_row(2, 1, 9)
        stats.record_row(2, 0, 5)

        assert stats.rows == 2
        assert stats.columns == 4
        assert stats.quoted_columns == 1
        assert stats.characters_written == 14
        assert stats.quote_rate == 0.25
        assert stats.to_dict()["quote_rate"] == 0.25

    def test_quote_rate_without_columns(self):
        """Test quote rate is zero when nothing was written."""
        assert WriteStatistics().quote_rate == 0.0
