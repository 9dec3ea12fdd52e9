"""Logging infrastructure with per-file context."""
import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional


def app_home() -> Path:
    """Directory holding logs and other per-user state."""
    return Path(os.getenv("STATEMENTSENSE_HOME", str(Path.home() / ".statementsense")))


class FileContextFilter(logging.Filter):
    """Add the name of the file being processed to log records."""

    def __init__(self):
        super().__init__()
        self.file_name: Optional[str] = None

    def filter(self, record):
        """Add file_name to record."""
        record.file_name = self.file_name or "batch"
        return True


class StatementSenseLogger:
    """Centralized logging manager."""

    def __init__(self, log_level: str = "INFO", backup_count: int = 5):
        self.log_dir = app_home() / "logs"
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / "statementsense.log"
        self.file_filter = FileContextFilter()

        self.logger = logging.getLogger("statementsense")
        self.logger.setLevel(getattr(logging, log_level.upper()))

        # Remove existing handlers
        self.logger.handlers.clear()

        # File handler with rotation (10MB per file)
        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)

        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [file:%(file_name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        file_handler.addFilter(self.file_filter)
        console_handler.addFilter(self.file_filter)

        self.logger.addHandler(file_handler)
        self.logger.addHandler(console_handler)

    def set_file_context(self, file_name: Optional[str]):
        """Set the file currently being processed."""
        self.file_filter.file_name = file_name

    def set_level(self, log_level: str):
        """Change the logger threshold."""
        self.logger.setLevel(getattr(logging, log_level.upper()))

    def get_logger(self) -> logging.Logger:
        """Get the configured logger."""
        return self.logger


# Global logger instance
_logger_instance: Optional[StatementSenseLogger] = None


def get_logger(log_level: str = "INFO") -> logging.Logger:
    """Get or create global logger instance."""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = StatementSenseLogger(log_level)
    return _logger_instance.get_logger()


def set_log_level(log_level: str):
    """Apply a configured log level to the global logger."""
    get_logger()
    _logger_instance.set_level(log_level)


def set_file_context(file_name: Optional[str]):
    """Set file context for logging."""
    global _logger_instance
    if _logger_instance:
        _logger_instance.set_file_context(file_name)
