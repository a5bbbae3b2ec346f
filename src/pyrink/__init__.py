"""Hockey stat book kept in sync with Excel workbook tables."""

__version__ = "0.1.0"
