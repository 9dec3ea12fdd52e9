"""CSV and JSON export of transaction lists."""
import json
from datetime import date
from decimal import InvalidOperation
from pathlib import Path
from typing import List, Optional, Sequence

from statementsense.llm.models import Transaction, to_amount
from statementsense.utils.logger import get_logger
from statementsense.utils.exceptions import ValidationError

logger = get_logger()

CSV_HEADERS = ["Date", "Description", "Amount", "Category", "Notes"]
DELIMITER = ","
QUOTE = '"'


def _quote(value: str) -> str:
    return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE


def _quote_if_needed(value: str) -> str:
    if any(ch in value for ch in (DELIMITER, QUOTE, "\n", "\r")):
        return _quote(value)
    return value


def to_csv(transactions: Sequence[Transaction]) -> str:
    """
    Encode transactions as CSV in their current order.

    Description and notes are always quoted; the amount is written as a
    plain number without currency formatting.
    """
    lines = [DELIMITER.join(CSV_HEADERS)]
    for txn in transactions:
        lines.append(DELIMITER.join([
            _quote_if_needed(txn.date),
            _quote(txn.description),
            format(txn.amount, "f"),
            _quote_if_needed(txn.category),
            _quote(txn.notes),
        ]))
    return "\n".join(lines)


def to_json(transactions: Sequence[Transaction]) -> str:
    """Encode transactions as a JSON array."""
    records = [
        {
            "date": txn.date,
            "description": txn.description,
            "amount": float(txn.amount),
            "category": txn.category,
            "notes": txn.notes,
        }
        for txn in transactions
    ]
    return json.dumps(records, ensure_ascii=False, indent=2)


def from_json(text: str) -> List[Transaction]:
    """
    Read transactions back from a JSON export.

    Raises:
        ValidationError: If the document is not a list of transaction objects
    """
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON export: {e}")

    if not isinstance(records, list):
        raise ValidationError("JSON export must contain a list of transactions")

    transactions = []
    for i, record in enumerate(records):
        try:
            transactions.append(Transaction(
                date=record["date"],
                description=record.get("description", ""),
                amount=to_amount(record["amount"]),
                category=record.get("category", ""),
                notes=record.get("notes", "")
            ))
        except (KeyError, TypeError, AttributeError, InvalidOperation) as e:
            raise ValidationError(f"Invalid transaction at index {i}: {e}")

    return transactions


def export_filename(fmt: str, export_date: Optional[date] = None) -> str:
    """File name for an export, e.g. bank_analysis_2024-01-31.csv."""
    export_date = export_date or date.today()
    return f"bank_analysis_{export_date.isoformat()}.{fmt}"


def write_export(
    transactions: Sequence[Transaction],
    fmt: str,
    output_dir: Path,
    export_date: Optional[date] = None
) -> Path:
    """
    Write an export file into output_dir.

    Args:
        transactions: Transactions in display order
        fmt: "csv" or "json"
        output_dir: Target directory, created if missing
        export_date: Date used in the file name (defaults to today)

    Returns:
        Path of the written file
    """
    encoders = {"csv": to_csv, "json": to_json}
    if fmt not in encoders:
        raise ValidationError(f"Unsupported export format: {fmt}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(fmt, export_date)

    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(encoders[fmt](transactions))

    logger.info(f"Exported {len(transactions)} transactions to {path}")
    return path
