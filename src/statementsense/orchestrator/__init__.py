"""Batch processing orchestration module."""
from .models import (
    FileStatus,
    ProcessingStatus,
    FileEntry,
    FileReport,
    BatchResult,
    BatchSnapshot,
    PageProgress
)
from .state import BatchController
from .processor import BatchOrchestrator, sort_by_date

__all__ = [
    "FileStatus",
    "ProcessingStatus",
    "FileEntry",
    "FileReport",
    "BatchResult",
    "BatchSnapshot",
    "PageProgress",
    "BatchController",
    "BatchOrchestrator",
    "sort_by_date"
]
