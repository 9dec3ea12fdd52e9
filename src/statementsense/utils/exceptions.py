"""Custom exception classes for StatementSense."""


class StatementSenseError(Exception):
    """Base exception for StatementSense."""
    pass


class ConfigError(StatementSenseError):
    """Configuration-related errors."""
    pass


class RasterizeError(StatementSenseError):
    """Document rasterization errors."""
    pass


class ExtractionError(StatementSenseError):
    """Transaction extraction errors."""
    pass


class ValidationError(StatementSenseError):
    """Data validation errors."""
    pass


class BatchExtractionError(StatementSenseError):
    """Raised when a whole batch yields no transactions."""
    pass
