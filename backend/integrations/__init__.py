"""Brokerage export readers.

This package contains:
- CSV protocol: the canonical HoldingRecord and the per-format reader interface
- Format registry: header detection and row normalization
- Raymond James and Wealthsimple readers
"""

from integrations.csv_format_registry import detect_format, get_format, normalize_rows, read_csv
from integrations.csv_protocol import CsvFormat, HoldingRecord, PortfolioSource

__all__ = [
    "CsvFormat",
    "HoldingRecord",
    "PortfolioSource",
    "detect_format",
    "get_format",
    "normalize_rows",
    "read_csv",
]
