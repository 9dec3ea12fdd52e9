"""Data models for batch processing."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from statementsense.llm.models import Transaction, PageResult


class FileStatus(str, Enum):
    """Lifecycle of one file within a batch."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class ProcessingStatus(str, Enum):
    """Overall batch status."""
    IDLE = "IDLE"
    LOADING_FILES = "LOADING_FILES"
    EXTRACTING = "EXTRACTING"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class FileEntry:
    """Status of one input file."""
    name: str
    status: FileStatus = FileStatus.PENDING
    page_count: Optional[int] = None


@dataclass(frozen=True)
class PageProgress:
    """Page counter for the file currently being extracted."""
    current: int = 0
    total: int = 0


@dataclass(frozen=True)
class BatchSnapshot:
    """Read-only view of the batch state."""
    status: ProcessingStatus
    file_statuses: Tuple[FileEntry, ...]
    transactions: Tuple[Transaction, ...]
    page_progress: PageProgress
    error: Optional[str] = None

    @property
    def completed_count(self) -> int:
        return sum(1 for f in self.file_statuses if f.status == FileStatus.COMPLETED)

    @property
    def pending_count(self) -> int:
        return sum(1 for f in self.file_statuses if f.status == FileStatus.PENDING)

    @property
    def processing_file(self) -> Optional[FileEntry]:
        return next((f for f in self.file_statuses if f.status == FileStatus.PROCESSING), None)


@dataclass
class FileReport:
    """Outcome of processing one file."""
    name: str
    status: FileStatus
    page_count: int = 0
    page_results: List[PageResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def transactions(self) -> List[Transaction]:
        return [txn for page in self.page_results for txn in page.transactions]

    @property
    def failed_pages(self) -> List[int]:
        return [page.page_number for page in self.page_results if not page.ok]


@dataclass
class BatchResult:
    """Result of a batch run."""
    transactions: List[Transaction]
    file_statuses: List[FileEntry]
    reports: List[FileReport]
    duration_seconds: float = 0.0

    @property
    def files_failed(self) -> int:
        return sum(1 for r in self.reports if r.status == FileStatus.ERROR)
