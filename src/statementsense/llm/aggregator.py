"""Transaction aggregation module."""
from decimal import Decimal
from collections import defaultdict
from typing import List, Dict, Sequence, Tuple

from .models import Transaction, Summary, PieSlice, CashflowSplit
from statementsense.utils.logger import get_logger

logger = get_logger()


class Aggregator:
    """Derives summary analytics from a transaction list."""

    def summarize(self, transactions: Sequence[Transaction]) -> Summary:
        """
        Build the summary view for a transaction list.

        Amounts of exactly zero count towards total_count but belong to
        neither the income nor the expense partition.

        Args:
            transactions: Transactions to analyze

        Returns:
            Summary object
        """
        income = [txn for txn in transactions if txn.amount > 0]
        expenses = [txn for txn in transactions if txn.amount < 0]

        total_income = sum((txn.amount for txn in income), Decimal("0"))
        total_expenses = abs(sum((txn.amount for txn in expenses), Decimal("0")))

        category_totals = self.category_totals(expenses)
        sorted_categories = self.rank_categories(category_totals)
        max_spend = sorted_categories[0][1] if sorted_categories else Decimal("0")

        summary = Summary(
            total_count=len(transactions),
            income_count=len(income),
            expense_count=len(expenses),
            total_income=total_income,
            total_expenses=total_expenses,
            net_balance=total_income - total_expenses,
            category_totals=category_totals,
            sorted_categories=sorted_categories,
            max_category_spend=max_spend,
            pie_slices=self.pie_slices(sorted_categories, total_expenses),
            cashflow=self.cashflow_split(len(expenses), len(income), len(transactions))
        )

        logger.debug(
            f"Summarized {summary.total_count} transactions into "
            f"{len(category_totals)} spending categories"
        )

        return summary

    def category_totals(self, transactions: Sequence[Transaction]) -> Dict[str, Decimal]:
        """Sum absolute expense amounts per category. Income is ignored."""
        totals = defaultdict(Decimal)
        for txn in transactions:
            if txn.amount < 0:
                totals[txn.bucket] += abs(txn.amount)
        return dict(totals)

    def rank_categories(self, totals: Dict[str, Decimal]) -> List[Tuple[str, Decimal]]:
        """Order categories by total, largest first. Ties keep first-seen order."""
        return sorted(totals.items(), key=lambda item: item[1], reverse=True)

    def pie_slices(
        self,
        ranked: List[Tuple[str, Decimal]],
        total_expenses: Decimal
    ) -> List[PieSlice]:
        """Contiguous percentage arcs for the ranked categories."""
        if total_expenses == 0:
            return []

        slices = []
        offset = 0.0
        for category, amount in ranked:
            percent = float(amount / total_expenses * 100)
            slices.append(PieSlice(category=category, amount=amount, percent=percent, offset=offset))
            offset += percent
        return slices

    def cashflow_split(self, expense_count: int, income_count: int, total_count: int) -> CashflowSplit:
        if total_count == 0:
            return CashflowSplit(expense_percent=0.0, income_percent=0.0)
        return CashflowSplit(
            expense_percent=expense_count / total_count * 100,
            income_percent=income_count / total_count * 100
        )
