"""Utility modules."""
from .logger import get_logger, set_file_context, set_log_level
from .exceptions import (
    StatementSenseError,
    ConfigError,
    RasterizeError,
    ExtractionError,
    ValidationError,
    BatchExtractionError
)

__all__ = [
    "get_logger",
    "set_file_context",
    "set_log_level",
    "StatementSenseError",
    "ConfigError",
    "RasterizeError",
    "ExtractionError",
    "ValidationError",
    "BatchExtractionError"
]
