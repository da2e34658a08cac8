"""Tokenization engine for ultra-robust CSV parsing.

Key Components:
    CSVTokenizer: Incremental row tokenizer over any character source
    Row: Type of a parsed row (list of column strings)
"""

from .tokenizer import (
    CSVTokenizer,
    OptionsParameter,
    Row,
)

__all__ = [
    "CSVTokenizer",
    "OptionsParameter",
    "Row",
]
