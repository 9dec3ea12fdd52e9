"""Batch orchestrator for the statement extraction pipeline."""
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from statementsense.config import Config
from statementsense.pdf import DocumentRasterizer, SourceFile
from statementsense.llm import GeminiExtractor, Aggregator, Summary, Transaction
from statementsense.export import write_export
from statementsense.utils.logger import get_logger, set_file_context
from statementsense.utils.exceptions import BatchExtractionError

from .models import BatchResult, FileReport, FileStatus
from .state import BatchController

logger = get_logger()

ProgressCallback = Callable[[int, int, int], None]

NO_TRANSACTIONS_MESSAGE = "Could not extract any transactions from the provided files."


def sort_by_date(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Most recent first. Equal dates keep their extraction order."""
    return sorted(transactions, key=lambda txn: txn.date, reverse=True)


class BatchOrchestrator:
    """Runs files through rasterization and extraction, one page at a time."""

    def __init__(
        self,
        config: Optional[Config] = None,
        rasterizer=None,
        extractor=None,
        controller: Optional[BatchController] = None
    ):
        """
        Initialize orchestrator.

        Components not passed in are built from config.

        Args:
            config: System configuration
            rasterizer: Object with rasterize(SourceFile) -> List[PageImage]
            extractor: Object with extract_page(PageImage, page_number) -> PageResult
            controller: Batch state owner
        """
        self.config = config or Config()

        self.rasterizer = rasterizer or DocumentRasterizer(
            resolution=self.config.pdf_resolution,
            jpeg_quality=self.config.jpeg_quality
        )
        self.extractor = extractor or GeminiExtractor(
            self.config.gemini_api_key,
            self.config.model_name
        )
        self.controller = controller or BatchController()
        self.aggregator = Aggregator()

    def run_batch(
        self,
        files: Sequence[SourceFile],
        on_progress: Optional[ProgressCallback] = None
    ) -> BatchResult:
        """
        Process files in order and aggregate their transactions.

        Args:
            files: Input documents
            on_progress: Called with (file_index, page_current, page_total)
                as each page is dispatched

        Returns:
            BatchResult with transactions sorted by date, newest first

        Raises:
            BatchExtractionError: If no file yielded any transaction
        """
        if not files:
            logger.info("No files submitted")
            return BatchResult(transactions=[], file_statuses=[], reports=[])

        start_time = time.time()
        logger.info(f"Starting batch of {len(files)} files")
        self.controller.start_batch(source.name for source in files)

        reports = []
        for index, source in enumerate(files):
            reports.append(self.process_file(index, source, on_progress))

        transactions = list(self.controller.transactions)
        duration = time.time() - start_time

        if not transactions:
            logger.error(f"Batch produced no transactions from {len(files)} files")
            self.controller.fail(NO_TRANSACTIONS_MESSAGE)
            raise BatchExtractionError(NO_TRANSACTIONS_MESSAGE)

        ordered = sort_by_date(transactions)
        self.controller.finish(ordered)

        result = BatchResult(
            transactions=ordered,
            file_statuses=list(self.controller.files),
            reports=reports,
            duration_seconds=duration
        )

        logger.info(
            f"Batch complete: {len(files) - result.files_failed} completed, "
            f"{result.files_failed} failed, {len(ordered)} transactions in {duration:.1f}s"
        )

        return result

    def process_file(
        self,
        index: int,
        source: SourceFile,
        on_progress: Optional[ProgressCallback] = None
    ) -> FileReport:
        """
        Process a single file of the current batch.

        Errors are recorded on the file's status and report, never raised.
        """
        set_file_context(source.name)
        report = FileReport(name=source.name, status=FileStatus.PROCESSING)

        try:
            self.controller.mark_file_status(index, FileStatus.PROCESSING)

            if source.is_pdf or source.is_image:
                pages = self.rasterizer.rasterize(source)
            else:
                logger.warning(f"Unsupported media type {source.media_type} for {source.name}, skipping")
                pages = []

            if pages:
                total = len(pages)
                report.page_count = total
                self.controller.set_page_count(index, total)
                self.controller.begin_extraction()

                for page_index, page in enumerate(pages):
                    self.controller.set_progress(page_index + 1, total)
                    if on_progress:
                        on_progress(index, page_index + 1, total)
                    report.page_results.append(
                        self.extractor.extract_page(page, page_index + 1)
                    )

                self.controller.append_transactions(report.transactions)

            report.status = FileStatus.COMPLETED
            self.controller.mark_file_status(index, FileStatus.COMPLETED)

            if report.failed_pages:
                logger.warning(f"Pages {report.failed_pages} of {source.name} yielded nothing")
            logger.info(
                f"Processed {source.name}: {report.page_count} pages, "
                f"{len(report.transactions)} transactions"
            )

        except Exception as e:
            logger.error(f"Failed to process {source.name}: {e}")
            report.status = FileStatus.ERROR
            report.error = str(e)
            if self.controller.files[index].status == FileStatus.PROCESSING:
                self.controller.mark_file_status(index, FileStatus.ERROR)

        finally:
            set_file_context(None)

        return report

    def summary(self) -> Summary:
        """Analytics for the current transaction list."""
        return self.aggregator.summarize(self.controller.transactions)

    def export_csv(self, output_dir: Optional[Path] = None) -> Optional[Path]:
        """Write the current transactions as CSV. Returns None when there is nothing to export."""
        return self._export("csv", output_dir)

    def export_json(self, output_dir: Optional[Path] = None) -> Optional[Path]:
        """Write the current transactions as JSON. Returns None when there is nothing to export."""
        return self._export("json", output_dir)

    def _export(self, fmt: str, output_dir: Optional[Path]) -> Optional[Path]:
        if not self.controller.transactions:
            logger.warning("No transactions to export")
            return None
        return write_export(
            self.controller.transactions,
            fmt,
            Path(output_dir or self.config.export_dir)
        )

    def reset(self) -> None:
        self.controller.reset()
