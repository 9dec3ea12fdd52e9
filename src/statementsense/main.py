"""Command-line entry point."""
import sys
import argparse
from pathlib import Path
from typing import List

from statementsense.config import Config, ConfigManager
from statementsense.export import from_json
from statementsense.llm import Aggregator, Summary
from statementsense.orchestrator import BatchOrchestrator, BatchSnapshot, FileEntry
from statementsense.pdf import SourceFile
from statementsense.utils.logger import get_logger, set_log_level
from statementsense.utils.exceptions import StatementSenseError, BatchExtractionError

logger = get_logger()


def _load_and_validate_config(config_path: str = None) -> Config:
    """Load configuration and exit if it is unusable."""
    config_manager = ConfigManager(Path(config_path) if config_path else None)
    config = config_manager.load_config()
    set_log_level(config.log_level)

    is_valid, message = config_manager.validate_config(config)
    if not is_valid:
        logger.critical(f"Invalid configuration: {message}")
        sys.exit(1)

    return config


def _print_progress(snapshot: BatchSnapshot) -> None:
    current = snapshot.processing_file
    if current and snapshot.page_progress.total:
        print(
            f"\r  {current.name}: page {snapshot.page_progress.current}/"
            f"{snapshot.page_progress.total}",
            end="",
            flush=True
        )


def _print_file_table(files: List[FileEntry]) -> None:
    """Print formatted table of file statuses."""
    print(f"\n{'Status':<12} {'Pages':<6} {'File Name':<50}")
    print("-" * 70)

    for entry in files:
        pages = entry.page_count if entry.page_count is not None else "-"
        print(f"{entry.status.value:<12} {pages!s:<6} {entry.name:<50}")


def _print_summary(summary: Summary) -> None:
    """Print totals and the spending ranking."""
    print(f"\nTotal records:  {summary.total_count}")
    print(f"Total income:   {summary.total_income:,.2f}")
    print(f"Total spending: {summary.total_expenses:,.2f}")
    print(f"Net balance:    {summary.net_balance:,.2f}")
    print(
        f"Cashflow mix:   {summary.income_count} income / {summary.expense_count} spending "
        f"({summary.cashflow.income_percent:.0f}% / {summary.cashflow.expense_percent:.0f}%)"
    )

    if not summary.pie_slices:
        print("\nNo spending data available")
        return

    print(f"\n{'Category':<30} {'Amount':>14} {'Share':>8}")
    print("-" * 54)
    for piece in summary.pie_slices:
        print(f"{piece.category:<30} {piece.amount:>14,.2f} {piece.percent:>7.1f}%")


def analyze_command(args) -> int:
    """Run a batch over the given files."""
    config = _load_and_validate_config(args.config)
    orchestrator = BatchOrchestrator(config)
    orchestrator.controller.subscribe(_print_progress)

    files = [SourceFile.from_path(path) for path in args.files]
    missing = [f.name for f in files if not f.path.exists()]
    if missing:
        logger.error(f"Files not found: {', '.join(missing)}")
        return 1

    try:
        result = orchestrator.run_batch(files)
    except BatchExtractionError as e:
        print()
        _print_file_table(list(orchestrator.controller.files))
        print(f"\nExtraction failed: {e}")
        return 1

    print()
    _print_file_table(result.file_statuses)
    _print_summary(orchestrator.summary())

    output_dir = Path(args.output_dir) if args.output_dir else None
    if args.csv:
        print(f"\nCSV written to {orchestrator.export_csv(output_dir)}")
    if args.json:
        print(f"JSON written to {orchestrator.export_json(output_dir)}")

    return 0


def summarize_command(args) -> int:
    """Print analytics for a previously exported JSON file."""
    path = Path(args.export)
    transactions = from_json(path.read_text(encoding="utf-8"))
    print(f"Loaded {len(transactions)} transactions from {path.name}")
    _print_summary(Aggregator().summarize(transactions))
    return 0


def main(argv=None):
    """Main entry point for StatementSense."""
    parser = argparse.ArgumentParser(description="StatementSense bank statement analyzer")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Extract transactions from statements")
    analyze.add_argument("files", nargs="+", help="PDF or image files")
    analyze.add_argument("--csv", action="store_true", help="Write a CSV export")
    analyze.add_argument("--json", action="store_true", help="Write a JSON export")
    analyze.add_argument("--output-dir", help="Directory for exports (default: export_dir setting)")
    analyze.add_argument("--config", help="Path to config.yaml")
    analyze.set_defaults(handler=analyze_command)

    summarize = subparsers.add_parser("summarize", help="Summarize a JSON export")
    summarize.add_argument("export", help="JSON file written by analyze --json")
    summarize.set_defaults(handler=summarize_command)

    args = parser.parse_args(argv)

    try:
        sys.exit(args.handler(args))
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        sys.exit(130)
    except (StatementSenseError, OSError) as e:
        logger.critical(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
