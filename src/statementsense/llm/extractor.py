"""Page-level transaction extraction using the Gemini vision model."""
import base64
import json
import re
from datetime import datetime
from typing import Any, List, Dict, Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, ValidationError

from .models import Transaction, PageImage, PageResult, to_amount
from statementsense.utils.logger import get_logger
from statementsense.utils.exceptions import ExtractionError

logger = get_logger()

DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d/%m/%y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d.%m.%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
]


class TransactionSchema(BaseModel):
    """Pydantic schema for one extracted transaction."""
    date: str = Field(description="Transaction date in YYYY-MM-DD format")
    description: Optional[str] = Field(default="", description="Transaction description")
    amount: float = Field(description="Positive for deposits, negative for expenses/withdrawals")
    category: Optional[str] = Field(default="", description="Spending or income category")
    notes: Optional[str] = Field(default="", description="Brief context for the transaction")


class TransactionsResponse(BaseModel):
    """Pydantic schema for the model response."""
    transactions: List[TransactionSchema]


def normalize_date(date_str: str) -> Optional[str]:
    """
    Convert a statement date to YYYY-MM-DD.

    Two-digit years are mapped into the 2000s.

    Returns:
        ISO date string, or None if the value is not a recognizable date
    """
    if not date_str or not isinstance(date_str, str):
        return None

    value = date_str.strip()
    for fmt in DATE_FORMATS:
        try:
            dt = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if fmt.endswith("%y") and dt.year < 2000:
            dt = dt.replace(year=dt.year + 100)
        return dt.strftime("%Y-%m-%d")

    return None


class GeminiExtractor:
    """Extracts transactions from page images with the google-genai SDK."""

    PROMPT = """Extract ALL transactions from this bank statement page.
Rules:
1. Format the date as YYYY-MM-DD.
2. If the original date format is different, convert it.
3. Amount: positive for deposits, negative for expenses/withdrawals.
4. Auto-detect categories: groceries, dining, transport, salary, bills, etc.
5. Add brief notes for context.
6. Skip all headers, footers, and non-transaction text.
7. Return exactly an array of transaction objects.
"""

    def __init__(self, api_key: str, model_name: str = "gemini-3-flash-preview", client=None):
        """
        Initialize extractor.

        Args:
            api_key: Google AI API key
            model_name: Gemini model used for extraction
            client: Preconfigured genai client (tests pass a fake)
        """
        self.client = client if client is not None else genai.Client(api_key=api_key)
        self.model_name = model_name

        logger.info(f"Gemini extractor initialized with {self.model_name}")

    def extract_page(self, image: PageImage, page_number: int) -> PageResult:
        """
        Extract transactions from one page.

        Failures never propagate: they are logged and reported on the result
        with an empty transaction list.
        """
        try:
            transactions = self.extract_transactions(image)
        except Exception as e:
            logger.warning(f"Extraction failed on page {page_number}: {e}")
            return PageResult(page_number=page_number, error=str(e))

        logger.info(f"Extracted {len(transactions)} transactions from page {page_number}")
        return PageResult(page_number=page_number, transactions=transactions)

    def extract_transactions(self, image: PageImage) -> List[Transaction]:
        """
        Call the model for one page image.

        Raises:
            ExtractionError: If the call fails or the response is unusable
        """
        image_part = types.Part.from_bytes(
            data=base64.b64decode(image.data),
            mime_type=image.mime_type
        )

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=[image_part, self.PROMPT],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=list[TransactionSchema]
                )
            )
        except Exception as e:
            raise ExtractionError(f"Gemini request failed: {e}")

        text = (response.text or "").strip()
        if not text:
            # A page without transactions is not an error
            return []

        return self._create_transactions(self._parse_response(text))

    def _parse_response(self, response_text: str) -> List[Dict]:
        """Parse and validate the JSON response."""
        try:
            cleaned = response_text.strip()

            # Strip markdown code fences
            if cleaned.startswith("```"):
                cleaned = re.sub(r"^```(json)?", "", cleaned).strip()
            if cleaned.endswith("```"):
                cleaned = cleaned[:-3].strip()

            data = self._load_json(cleaned)
            items = data if isinstance(data, list) else data.get("transactions", [])

            validated = TransactionsResponse(transactions=items)
            return [txn.model_dump() for txn in validated.transactions]

        except json.JSONDecodeError as e:
            logger.debug(f"Response text: {response_text[:500]}")
            raise ExtractionError(f"Invalid JSON response from model: {e}")
        except (ValidationError, AttributeError) as e:
            raise ExtractionError(f"Model response does not match expected schema: {e}")

    def _load_json(self, text: str) -> Any:
        """Decode JSON, retrying once without trailing commas if strict decoding fails."""
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            # Trailing commas before closing brackets/braces
            return json.loads(re.sub(r",\s*([\]}])", r"\1", text))

    def _create_transactions(self, transactions_data: List[Dict]) -> List[Transaction]:
        """Convert validated records to Transaction objects. Null text fields become empty."""
        transactions = []
        for txn_data in transactions_data:
            date = normalize_date(txn_data["date"])
            if not date:
                logger.warning(f"Invalid date format: {txn_data['date']!r}, skipping transaction")
                continue

            transactions.append(Transaction(
                date=date,
                description=(txn_data["description"] or "").strip(),
                amount=to_amount(txn_data["amount"]),
                category=(txn_data["category"] or "").strip(),
                notes=(txn_data["notes"] or "").strip()
            ))

        return transactions
