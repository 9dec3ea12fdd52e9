"""StatementSense: batch transaction extraction from bank statements."""

__version__ = "1.0.0"
