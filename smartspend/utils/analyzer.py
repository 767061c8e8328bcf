from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Sequence
from typing import Any, Dict, List

from smartspend.core.exceptions import InvalidInputShape
from smartspend.models.transaction import CategoryTotal, Insights, Transaction

logger = logging.getLogger(__name__)

TOP_CATEGORY_LIMIT = 5


class InsightsAnalyzer:
    """
    Spending aggregation shared by the HTTP routes and the assistant prompt
    builder. Every method is a pure fold over the batch it is given; the
    analyzer keeps no state between calls.

    Amounts are aggregated by magnitude, so debits and credits count the same
    whatever sign convention the source used. No calendar windowing happens
    here: callers that want a single month run ``filter_to_month`` first.
    """

    def __init__(self, top_n: int = TOP_CATEGORY_LIMIT) -> None:
        self._top_n = top_n

    @staticmethod
    def _validate(transactions: Any) -> Sequence:
        if not isinstance(transactions, Sequence) or isinstance(transactions, (str, bytes, bytearray)):
            raise InvalidInputShape(f"Expected a list of transactions, got {type(transactions).__name__}")
        for item in transactions:
            if not isinstance(item, Transaction):
                raise InvalidInputShape(f"Expected Transaction items, got {type(item).__name__}")
        return transactions

    @staticmethod
    def magnitude(transaction: Transaction) -> float:
        return abs(transaction.amount)

    def monthly_total(self, transactions: Sequence[Transaction]) -> float:
        total = 0.0
        for txn in self._validate(transactions):
            magnitude = self.magnitude(txn)
            if magnitude > 0:
                total += magnitude
        return total

    def category_totals(self, transactions: Sequence[Transaction]) -> Dict[str, float]:
        # dict keeps first-seen order, which the ranking relies on for ties
        totals: Dict[str, float] = {}
        for txn in self._validate(transactions):
            magnitude = self.magnitude(txn)
            logger.debug(
                f"Transaction: {txn.name}, Amount: {txn.amount}, Date: {txn.date}, Category: {txn.category}"
            )
            if magnitude > 0:
                totals[txn.category] = totals.get(txn.category, 0.0) + magnitude
        return totals

    def top_categories(self, transactions: Sequence[Transaction]) -> List[CategoryTotal]:
        ranked = sorted(self.category_totals(transactions).items(), key=lambda item: item[1], reverse=True)
        return [CategoryTotal(name=name, total=total) for name, total in ranked[: self._top_n]]

    def summarize(self, transactions: Sequence[Transaction]) -> Insights:
        self._validate(transactions)
        logger.info(f"Computing insights for {len(transactions)} transactions")

        insights = Insights(
            total_this_month=self.monthly_total(transactions),
            top_categories=self.top_categories(transactions),
        )
        logger.info(
            f"Computed insights: total={insights.total_this_month}, "
            f"categories={[c.name for c in insights.top_categories]}"
        )
        return insights

    @staticmethod
    def filter_to_month(transactions: Sequence[Transaction], year: int, month: int) -> List[Transaction]:
        """
        Keep only transactions dated within the given calendar month.
        Transactions whose date could not be parsed are dropped.
        """
        InsightsAnalyzer._validate(transactions)
        return [
            txn
            for txn in transactions
            if isinstance(txn.date, dt.date) and txn.date.year == year and txn.date.month == month
        ]


_default_analyzer = InsightsAnalyzer()


def compute_insights(transactions: Sequence[Transaction]) -> Insights:
    return _default_analyzer.summarize(transactions)
