"""Tests for the CSV row tokenizer."""

import io
import logging

import pytest

from ultra_robust_csv.character import StringSource
from ultra_robust_csv.shared import (
    ConfigValidationError,
    CSVConfig,
    RowTerminator,
    StreamingConfig,
)
from ultra_robust_csv.tokenization import CSVTokenizer

TOKENIZER_LOGGER = "ultra_robust_csv.tokenization.tokenizer"


def rows_of(text, **options):
    """Parse text with the given options and return every row."""
    return CSVTokenizer(options).parse(text).rows()


class TestTokenizerBasics:
    """Test basic row and column splitting."""

    def test_simple_rows(self):
        """Test comma separated rows with CRLF terminators."""
        assert rows_of("a,b,c\r\n1,2,3\r\n") == [["a", "b", "c"], ["1", "2", "3"]]

    def test_empty_input(self):
        """Test empty input yields zero rows."""
        assert rows_of("") == []

    def test_terminator_only(self):
        """Test a lone terminator yields one row with zero columns."""
        assert rows_of("\r\n") == [[]]
        assert rows_of("\n") == [[]]

    def test_mixed_terminators(self):
        """Test LF and CRLF are decided per row."""
        assert rows_of("One\n\nTwo\r\nThree\n\r\n") == [
            ["One"], [], ["Two"], ["Three"], []
        ]

    def test_missing_trailing_terminator(self):
        """Test the final row may end at end of data."""
        assert rows_of("ABC\r\n123") == [["ABC"], ["123"]]

    def test_trailing_separator(self):
        """Test a trailing separator produces a final empty column."""
        assert rows_of("a,\r\n") == [["a", ""]]
        assert rows_of(",\n") == [["", ""]]

    def test_lone_carriage_return_is_text(self):
        """Test a carriage return not followed by LF stays in the column."""
        assert rows_of("a\rb\n") == [["a\rb"]]
        assert rows_of("a\r") == [["a\r"]]
        assert rows_of("\r") == [["\r"]]

    def test_ragged_rows(self):
        """Test rows of different widths are returned as they are."""
        assert rows_of("a\nb,c,d\n\ne,f") == [["a"], ["b", "c", "d"], [], ["e", "f"]]

    def test_unicode_content(self):
        """Test non-ASCII text passes through unchanged."""
        assert rows_of("naïve,日本語\r\n") == [["naïve", "日本語"]]


class TestQuotedSpans:
    """Test quote handling."""

    def test_quoted_separator(self):
        """Test separators inside quotes are column text."""
        assert rows_of('"Hello,",World,",!"\r\n') == [["Hello,", "World", ",!"]]

    def test_doubled_quotes(self):
        """Test doubled quotes inside a span produce one quote."""
        assert rows_of('"He""o","""World""",!\r\n') == [['He"o', '"World"', "!"]]

    def test_quoted_terminators(self):
        """Test CR, LF and CRLF inside quotes are column text."""
        text = '"Hello\r", ,"World\n","\r\n!"\r\n'

        assert rows_of(text) == [["Hello\r", " ", "World\n", "\r\n!"]]

    def test_empty_quoted_column(self):
        """Test an empty quoted column."""
        assert rows_of('"",x\n') == [["", "x"]]
        assert rows_of('""\r\n') == [[""]]

    def test_text_after_closing_quote(self):
        """Test characters after a closing quote are appended to the column."""
        assert rows_of('"ab"cd,e\n') == [["abcd", "e"]]

    def test_quote_inside_unquoted_column(self):
        """Test a quote in the middle of a column opens a span."""
        assert rows_of('ab"c,d"\n') == [["abc,d"]]

    def test_unclosed_quote_runs_to_end_of_data(self):
        """Test an unclosed span swallows the rest of the input without raising."""
        assert rows_of('"abc\r\ndef') == [["abc\r\ndef"]]

    def test_custom_quote(self):
        """Test an alternate quote character."""
        text = "'Hello,','''',\"World\",!\r\n"

        assert rows_of(text, quote="'") == [["Hello,", "'", '"World"', "!"]]


class TestDialects:
    """Test alternate and degenerate configurations."""

    @pytest.mark.parametrize("separator", ["\t", "|", ";"])
    def test_alternate_separators(self, separator):
        """Test single-character separators."""
        text = f"a{separator}b\r\n\"c{separator}d\"{separator}e\r\n"

        assert rows_of(text, separator=separator) == [
            ["a", "b"], [f"c{separator}d", "e"]
        ]

    def test_comma_is_text_with_other_separator(self):
        """Test the default separator is ordinary text under another separator."""
        assert rows_of("a,b\tc\n", separator="\t") == [["a,b", "c"]]

    def test_empty_separator(self):
        """Test an empty separator never splits columns."""
        assert rows_of("a,b\nc\n", separator="") == [["a,b"], ["c"]]

    def test_empty_quote(self):
        """Test an empty quote character disables quoting."""
        assert rows_of('"a,b"\n', quote="") == [['"a', 'b"']]

    def test_newline_option_does_not_affect_reading(self):
        """Test rows are split at LF and CRLF whatever the newline option."""
        assert rows_of("a\nb\r\nc", newline="") == [["a"], ["b"], ["c"]]
        assert rows_of("a;b", newline=";") == [["a;b"]]

    def test_separator_equal_to_quote(self):
        """Test quote matching takes priority over separator matching."""
        assert rows_of('a"b"c\n', separator='"') == [["abc"]]

    def test_multi_character_separator_rejected(self):
        """Test multi-character separators are rejected at configuration."""
        with pytest.raises(ConfigValidationError):
            CSVTokenizer({"separator": "::"})


class TestConfiguration:
    """Test tokenizer configuration handling."""

    def test_default_configuration(self):
        """Test defaults exposed as properties."""
        tokenizer = CSVTokenizer()

        assert tokenizer.separator == ","
        assert tokenizer.newline == "\r\n"
        assert tokenizer.quote == '"'
        assert tokenizer.quote_all is False
        assert tokenizer.config == CSVConfig()

    def test_options_and_overrides(self):
        """Test mapping options with keyword overrides on top."""
        tokenizer = CSVTokenizer({"separator": "\t", "quote": "'"}, separator="|")

        assert tokenizer.separator == "|"
        assert tokenizer.quote == "'"

    def test_config_instance(self):
        """Test a ready CSVConfig is accepted."""
        assert CSVTokenizer(CSVConfig.tab_separated()).separator == "\t"

    def test_reconfigure_replaces_everything(self):
        """Test reconfiguration resets omitted fields to defaults."""
        tokenizer = CSVTokenizer({"separator": "\t", "quote": "'"})

        result = tokenizer.configure({"quote": "|"})

        assert result is tokenizer
        assert tokenizer.separator == ","
        assert tokenizer.quote == "|"

    def test_reconfigure_between_rows(self):
        """Test a new configuration applies from the next row on."""
        tokenizer = CSVTokenizer().parse("a,b\na;b\n")

        assert tokenizer.next_row() == ["a", "b"]
        tokenizer.configure(separator=";")
        assert tokenizer.next_row() == ["a", "b"]


class TestSourcesAndIteration:
    """Test source attachment and lazy iteration."""

    def test_no_source(self):
        """Test an unattached tokenizer behaves as an exhausted source."""
        tokenizer = CSVTokenizer()

        assert tokenizer.next_row() is None
        assert tokenizer.rows() == []
        assert tokenizer.parse(None).rows() == []

    def test_source_in_constructor(self):
        """Test passing the source at construction."""
        assert CSVTokenizer(None, "a\nb").rows() == [["a"], ["b"]]

    def test_next_row_end_signal_is_sticky(self):
        """Test next_row keeps returning None once exhausted."""
        tokenizer = CSVTokenizer().parse("a")

        assert tokenizer.next_row() == ["a"]
        assert tokenizer.next_row() is None
        assert tokenizer.next_row() is None

    def test_iterator_protocol(self):
        """Test the tokenizer is its own iterator."""
        tokenizer = CSVTokenizer().parse("a\nb\n")

        assert iter(tokenizer) is tokenizer
        assert next(tokenizer) == ["a"]
        assert [row for row in tokenizer] == [["b"]]
        with pytest.raises(StopIteration):
            next(tokenizer)

    def test_rows_drains_remaining(self):
        """Test rows() returns only rows not yet consumed."""
        tokenizer = CSVTokenizer().parse("a\nb\nc\n")
        tokenizer.next_row()

        assert tokenizer.rows() == [["b"], ["c"]]
        assert tokenizer.rows() == []

    def test_reading_is_lazy(self):
        """Test no character past the current row is pulled from the source."""
        pulled = []

        def characters():
            for ch in "ab\ncd\n":
                pulled.append(ch)
                yield ch

        tokenizer = CSVTokenizer().parse(characters())

        assert tokenizer.next_row() == ["ab"]
        assert "".join(pulled) == "ab\n"

    def test_iterable_of_chunks(self):
        """Test chunks split anywhere, including inside a CRLF."""
        chunks = iter(['"x,', 'y",z\r', "\n1,2"])

        assert CSVTokenizer().parse(chunks).rows() == [["x,y", "z"], ["1", "2"]]

    def test_generator_of_single_characters(self):
        """Test a generator yielding one character per step."""
        def characters():
            yield from "a,b\r\nc"

        assert CSVTokenizer().parse(characters()).rows() == [["a", "b"], ["c"]]

    def test_text_stream(self):
        """Test a readable text stream with a small buffer."""
        tokenizer = CSVTokenizer(streaming=StreamingConfig(buffer_size=2))

        assert tokenizer.parse(io.StringIO("ab,c\r\nd")).rows() == [["ab", "c"], ["d"]]

    def test_bytes_with_bom(self):
        """Test bytes input is decoded and the BOM dropped."""
        data = "\ufeffid,name\r\n1,Zoë\r\n".encode("utf-8")

        assert CSVTokenizer().parse(data).rows() == [["id", "name"], ["1", "Zoë"]]

    def test_character_source_passthrough(self):
        """Test an existing character source is used as it is."""
        source = StringSource("a\nb")
        tokenizer = CSVTokenizer().parse(source)

        assert tokenizer.source is source
        assert tokenizer.next_row() == ["a"]
        assert source.index == 2

    def test_parse_replaces_source(self):
        """Test attaching a new source restarts reading and statistics."""
        tokenizer = CSVTokenizer().parse("a\nb\n")
        tokenizer.next_row()

        tokenizer.parse("c\n")

        assert tokenizer.rows() == [["c"]]
        assert tokenizer.statistics.rows == 1

    def test_unsupported_source(self):
        """Test objects that cannot produce characters raise TypeError."""
        with pytest.raises(TypeError):
            CSVTokenizer().parse(3.5)

    def test_source_errors_propagate(self):
        """Test I/O errors from the source reach the caller unchanged."""
        class BrokenStream:
            def read(self, size=-1):
                raise OSError("disk gone")

        with pytest.raises(OSError, match="disk gone"):
            CSVTokenizer().parse(BrokenStream()).next_row()


class TestStatistics:
    """Test statistics gathered while tokenizing."""

    def test_row_statistics(self):
        """Test counters for mixed input."""
        tokenizer = CSVTokenizer().parse("a,b\r\nc\n\nd")
        tokenizer.rows()
        stats = tokenizer.statistics

        assert stats.rows == 4
        assert stats.empty_rows == 1
        assert stats.columns == 4
        assert stats.characters_consumed == 9
        assert stats.min_columns == 0
        assert stats.max_columns == 2
        assert stats.terminators == {"lf": 2, "crlf": 1, "end_of_data": 1}
        assert stats.unterminated_final_row is True
        assert stats.mixed_terminators is True

    def test_last_terminator(self):
        """Test the terminator of the most recent row is exposed."""
        tokenizer = CSVTokenizer().parse("a\r\nb\nc")

        tokenizer.next_row()
        assert tokenizer.last_terminator is RowTerminator.CRLF
        tokenizer.next_row()
        assert tokenizer.last_terminator is RowTerminator.LF
        tokenizer.next_row()
        assert tokenizer.last_terminator is RowTerminator.END_OF_DATA


class TestLogging:
    """Test tokenizer log output."""

    def test_end_of_data_logged_once(self, caplog):
        """Test the end of data is logged once at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger=TOKENIZER_LOGGER):
            tokenizer = CSVTokenizer(correlation_id="req-7").parse("a\n")
            tokenizer.rows()
            tokenizer.next_row()

        messages = [record.getMessage() for record in caplog.records]
        assert messages.count("End of CSV data") == 1
        assert "Source attached" in messages
        assert all(record.correlation_id == "req-7" for record in caplog.records)
