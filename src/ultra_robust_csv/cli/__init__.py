"""Command-line interface module for Ultra Robust CSV.

This module provides CLI tools for converting between CSV dialects, reporting
structural statistics, and checking files for canonical form.
"""

from .main import main

__all__ = ["main"]
