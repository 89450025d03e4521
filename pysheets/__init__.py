"""pysheets: a terminal spreadsheet editor."""

__version__ = "0.1.0"
