"""Batch state owned by a single controller."""
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from .models import (
    BatchSnapshot,
    FileEntry,
    FileStatus,
    PageProgress,
    ProcessingStatus
)
from statementsense.llm.models import Transaction
from statementsense.utils.logger import get_logger
from statementsense.utils.exceptions import ValidationError

logger = get_logger()

Listener = Callable[[BatchSnapshot], None]

# Terminal states have no outgoing transitions
ALLOWED_TRANSITIONS = {
    FileStatus.PENDING: {FileStatus.PROCESSING},
    FileStatus.PROCESSING: {FileStatus.COMPLETED, FileStatus.ERROR},
    FileStatus.COMPLETED: set(),
    FileStatus.ERROR: set(),
}


class BatchController:
    """
    Holds the state of the current batch and applies every change to it.

    Listeners registered with subscribe() receive a fresh snapshot after
    each operation. A failing listener is logged and skipped; the state
    change it was notified about stands.
    """

    def __init__(self):
        self._listeners: List[Listener] = []
        self._clear()

    def _clear(self):
        self.status = ProcessingStatus.IDLE
        self.files: List[FileEntry] = []
        self.transactions: List[Transaction] = []
        self.progress = PageProgress()
        self.error: Optional[str] = None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> BatchSnapshot:
        return BatchSnapshot(
            status=self.status,
            file_statuses=tuple(self.files),
            transactions=tuple(self.transactions),
            page_progress=self.progress,
            error=self.error
        )

    def _notify(self):
        snapshot = self.snapshot()
        for listener in self._listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"State listener {listener!r} failed: {e}")

    def start_batch(self, names: Iterable[str]) -> None:
        """Discard any previous batch and register the new files as pending."""
        self._clear()
        self.files = [FileEntry(name=name) for name in names]
        self.status = ProcessingStatus.LOADING_FILES
        self._notify()

    def mark_file_status(self, index: int, status: FileStatus) -> None:
        """
        Move a file to a new status.

        Raises:
            ValidationError: If the transition is not allowed
        """
        entry = self.files[index]
        if status not in ALLOWED_TRANSITIONS[entry.status]:
            raise ValidationError(
                f"Invalid status change for {entry.name}: {entry.status.value} -> {status.value}"
            )
        self.files[index] = replace(entry, status=status)
        self._notify()

    def set_page_count(self, index: int, page_count: int) -> None:
        self.files[index] = replace(self.files[index], page_count=page_count)
        self._notify()

    def begin_extraction(self) -> None:
        self.status = ProcessingStatus.EXTRACTING
        self._notify()

    def set_progress(self, current: int, total: int) -> None:
        self.progress = PageProgress(current=current, total=total)
        self._notify()

    def append_transactions(self, transactions: Iterable[Transaction]) -> None:
        self.transactions.extend(transactions)
        self._notify()

    def finish(self, transactions: List[Transaction]) -> None:
        """Store the final ordered transaction list and mark the batch completed."""
        self.transactions = list(transactions)
        self.status = ProcessingStatus.COMPLETED
        self._notify()

    def fail(self, message: str) -> None:
        """Enter the error state. Only reset() leaves it."""
        self.error = message
        self.status = ProcessingStatus.ERROR
        self._notify()

    def reset(self) -> None:
        """Return to the initial idle state."""
        self._clear()
        self._notify()
