"""Data models for transaction extraction and analytics."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

UNCATEGORIZED = "Uncategorized"


def to_amount(value) -> Decimal:
    """Convert a JSON number to Decimal, dropping a zero fraction (2000.0 -> 2000)."""
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        amount = amount.quantize(Decimal(1))
    return amount


@dataclass(frozen=True)
class Transaction:
    """A single statement line. Amount is positive for inflows, negative for outflows."""
    date: str  # YYYY-MM-DD
    description: str
    amount: Decimal
    category: str = ""
    notes: str = ""

    @property
    def bucket(self) -> str:
        """Category used for aggregation."""
        return self.category or UNCATEGORIZED


@dataclass(frozen=True)
class PageImage:
    """One rasterized page, base64 encoded for transport."""
    data: str
    mime_type: str = "image/jpeg"


@dataclass
class PageResult:
    """Outcome of extracting a single page."""
    page_number: int
    transactions: List[Transaction] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PieSlice:
    """Share of total spending held by one category."""
    category: str
    amount: Decimal
    percent: float
    offset: float


@dataclass(frozen=True)
class CashflowSplit:
    """Proportion of records that are expenses vs income."""
    expense_percent: float
    income_percent: float


@dataclass
class Summary:
    """Analytics derived from a transaction list."""
    total_count: int
    income_count: int
    expense_count: int
    total_income: Decimal
    total_expenses: Decimal
    net_balance: Decimal
    category_totals: Dict[str, Decimal]
    sorted_categories: List[Tuple[str, Decimal]]
    max_category_spend: Decimal
    pie_slices: List[PieSlice]
    cashflow: CashflowSplit
