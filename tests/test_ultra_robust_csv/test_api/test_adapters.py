"""Tests for data-frame integration adapters."""

import pytest

from ultra_robust_csv.api.adapters import (
    AdapterType,
    ConversionResult,
    IntegrationAdapter,
    PandasAdapter,
)
from ultra_robust_csv.api import parse, write

pd = pytest.importorskip("pandas")


class TestPandasAdapter:
    """Test PandasAdapter conversions."""

    def setup_method(self):
        """Set up a fresh adapter for each test."""
        self.adapter = PandasAdapter(correlation_id="test-123")

    def test_metadata(self):
        """Test adapter metadata."""
        metadata = self.adapter.metadata

        assert metadata.name == "pandas"
        assert metadata.adapter_type == AdapterType.DATA_FRAME
        assert metadata.target_library == "pandas"
        assert isinstance(self.adapter, IntegrationAdapter)

    def test_is_available(self):
        """Test pandas availability."""
        assert self.adapter.is_available() is True

    def test_to_target_with_header(self):
        """Test the first row becomes the column labels."""
        result = self.adapter.to_target(parse("id,name\r\n1,Ann\r\n2,Bob\r\n"))

        assert isinstance(result, ConversionResult)
        assert result.success is True
        df = result.converted_data
        assert list(df.columns) == ["id", "name"]
        assert df.shape == (2, 2)
        assert df.iloc[0, 0] == "1"
        assert isinstance(df.iloc[1, 1], str)
        assert result.metadata["row_count"] == 2

    def test_to_target_without_header(self):
        """Test positional labels without a header row."""
        result = self.adapter.to_target([["a", "b"]], header=False)

        df = result.converted_data
        assert list(df.columns) == ["0", "1"]
        assert df.iloc[0, 1] == "b"

    def test_to_target_ragged_rows(self):
        """Test short rows are padded and reported."""
        result = self.adapter.to_target([["a", "b"], ["1"], ["2", "3", "4"]])

        df = result.converted_data
        assert list(df.columns) == ["a", "b", "2"]
        assert df.iloc[0].tolist() == ["1", "", ""]
        assert result.warnings

    def test_to_target_empty(self):
        """Test no rows give an empty frame."""
        result = self.adapter.to_target([])

        assert result.success is True
        assert result.converted_data.shape == (0, 0)

    def test_from_target(self):
        """Test a frame converts back to rows of strings."""
        df = pd.DataFrame({"n": [1, 2], "s": ["x", None]})

        result = self.adapter.from_target(df)

        assert result.success is True
        assert result.converted_data == [["n", "s"], ["1", "x"], ["2", ""]]

    def test_from_target_without_header(self):
        """Test the header row can be left out."""
        df = pd.DataFrame({"a": ["1"]})

        assert self.adapter.from_target(df, include_header=False).converted_data == [["1"]]

    def test_from_target_rejects_other_types(self):
        """Test non-frames are reported, not raised."""
        result = self.adapter.from_target([["a"]])

        assert result.success is False
        assert result.converted_data is None
        assert "not a pandas DataFrame" in result.errors[0]

    def test_round_trip(self):
        """Test rows -> frame -> rows -> CSV keeps the data."""
        text = 'id,note\r\n1,"a,b"\r\n2,"say ""hi"""\r\n'

        df = self.adapter.to_target(parse(text)).converted_data
        rows = self.adapter.from_target(df).converted_data

        assert write(rows) == text
