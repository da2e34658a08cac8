"""Integration adapters for exchanging CSV rows with data-frame libraries.

Adapters convert between parsed rows (lists of strings) and a target library's
representation. They never raise for bad input; failures are reported through
:class:`ConversionResult` so callers can inspect errors alongside timing.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterable, List, Optional

from ultra_robust_csv.shared import get_logger
from ultra_robust_csv.tokenization import Row


class AdapterType(Enum):
    """Types of integration adapters."""

    DATA_FRAME = auto()      # DataFrame libraries (pandas)


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    supported_versions: List[str]
    description: str
    author: str = "ultra-robust-csv"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses convert rows to the target representation with
    :meth:`to_target` and back with :meth:`from_target`.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library is available and compatible."""

    @abstractmethod
    def to_target(self, rows: Iterable[Row], header: bool = True) -> ConversionResult:
        """Convert parsed rows to the target format."""

    @abstractmethod
    def from_target(
        self, target_data: Any, include_header: bool = True
    ) -> ConversionResult:
        """Convert target format data back to rows of strings."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(
            "Conversion failed",
            extra={"adapter": self.metadata.name, "error": error_message},
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
        )


class PandasAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with pandas DataFrame.

    Every cell is kept as text: CSV carries no types, so none are inferred.
    Rows shorter than the widest row are padded with empty strings.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            supported_versions=["1.5+"],
            description="Bidirectional conversion between CSV rows and pandas DataFrame"
        )

    def is_available(self) -> bool:
        """Check if pandas is available."""
        try:
            import pandas  # noqa: F401
            return True
        except ImportError:
            return False

    def to_target(self, rows: Iterable[Row], header: bool = True) -> ConversionResult:
        """Convert rows to a pandas DataFrame of strings.

        Args:
            rows: Parsed rows, e.g. a CSVTokenizer or a list of lists
            header: Use the first row as column labels

        Returns:
            ConversionResult containing pandas DataFrame
        """
        start_time = time.time()

        try:
            import pandas as pd

            data = [list(row) for row in rows]
            labels: List[str] = data.pop(0) if header and data else []
            width = max([len(labels)] + [len(row) for row in data])

            warnings = []
            if any(len(row) != width for row in data):
                warnings.append(f"Ragged rows padded to {width} columns")
            padded = [row + [""] * (width - len(row)) for row in data]
            if header:
                labels = labels + [str(i) for i in range(len(labels), width)]
            else:
                labels = [str(i) for i in range(width)]

            df = pd.DataFrame(padded, columns=labels, dtype=str)

            processing_time = (time.time() - start_time) * 1000
            return ConversionResult(
                success=True,
                converted_data=df,
                original_data=rows,
                conversion_time_ms=processing_time,
                warnings=warnings,
                metadata={
                    "dataframe_shape": df.shape,
                    "column_count": len(df.columns),
                    "row_count": len(df),
                    "columns": list(df.columns),
                }
            )

        except Exception as e:
            processing_time = (time.time() - start_time) * 1000
            return self._create_error_result(
                f"Failed to convert to pandas DataFrame: {e}",
                rows,
                processing_time
            )

    def from_target(
        self, target_data: Any, include_header: bool = True
    ) -> ConversionResult:
        """Convert a pandas DataFrame to rows of strings.

        Missing values become empty strings.

        Args:
            target_data: pandas DataFrame
            include_header: Emit the column labels as the first row

        Returns:
            ConversionResult containing the rows
        """
        start_time = time.time()

        try:
            import pandas as pd

            if not isinstance(target_data, pd.DataFrame):
                return self._create_error_result(
                    "Target data is not a pandas DataFrame",
                    target_data,
                    (time.time() - start_time) * 1000
                )

            rows: List[Row] = []
            if include_header:
                rows.append([str(label) for label in target_data.columns])
            for values in target_data.itertuples(index=False, name=None):
                rows.append(["" if pd.isna(value) else str(value) for value in values])

            processing_time = (time.time() - start_time) * 1000
            return ConversionResult(
                success=True,
                converted_data=rows,
                original_data=target_data,
                conversion_time_ms=processing_time,
                metadata={
                    "dataframe_shape": target_data.shape,
                    "row_count": len(rows),
                }
            )

        except Exception as e:
            processing_time = (time.time() - start_time) * 1000
            return self._create_error_result(
                f"Failed to convert from pandas DataFrame: {e}",
                target_data,
                processing_time
            )
