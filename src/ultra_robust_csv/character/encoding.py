"""Encoding selection for byte-oriented CSV sources.

CSV carries no in-band encoding declaration, so the only reliable signal is a
byte order mark. When none is present the configured fallback is used.
"""

import codecs
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional

FALLBACK_ENCODING = "utf-8"

# Longest BOM is four bytes (UTF-32)
BOM_SNIFF_SIZE = 4


class DetectionMethod(Enum):
    """Enumeration of encoding selection methods."""
    BOM = "bom"
    DECLARED = "declared"
    FALLBACK = "fallback"


@dataclass
class EncodingResult:
    """Outcome of encoding selection.

    Attributes:
        encoding: Codec name usable with :func:`codecs.getincrementaldecoder`
        method: How the encoding was chosen
        bom_length: Number of leading bytes to skip before decoding
        issues: Notes gathered during selection
    """
    encoding: str
    method: DetectionMethod
    bom_length: int = 0
    issues: List[str] = field(default_factory=list)


class BOMDetector:
    """Byte Order Mark (BOM) detection for the Unicode encodings."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM.

        Args:
            data: Leading bytes of the source

        Returns:
            EncodingResult if a BOM is present, None otherwise
        """
        if not data:
            return None

        # UTF-32 LE starts with the UTF-16 LE BOM, so test longer patterns first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda x: len(x[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes),
                )
        return None


_detector = BOMDetector()


def select_encoding(
    data: bytes,
    declared: Optional[str] = None,
    fallback: str = FALLBACK_ENCODING,
) -> EncodingResult:
    """Choose the codec for a byte source from its leading bytes.

    A declared encoding always wins; a BOM matching it is still skipped. An
    unknown declared codec name raises ``LookupError``.

    Args:
        data: Leading bytes of the source (at least BOM_SNIFF_SIZE when available)
        declared: Encoding supplied by the caller, if any
        fallback: Encoding used when nothing else applies

    Returns:
        EncodingResult describing the codec and BOM length
    """
    bom = _detector.detect(data)

    if declared:
        name = codecs.lookup(declared).name
        if bom and codecs.lookup(bom.encoding).name == name:
            return EncodingResult(
                encoding=name,
                method=DetectionMethod.DECLARED,
                bom_length=bom.bom_length,
            )
        return EncodingResult(encoding=name, method=DetectionMethod.DECLARED)

    if bom:
        return bom

    return EncodingResult(
        encoding=fallback,
        method=DetectionMethod.FALLBACK,
        issues=[f"No byte order mark found, assuming {fallback}"],
    )
