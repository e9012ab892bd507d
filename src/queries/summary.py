"""
Spending Summary

DESIGN DECISION: Aggregation is DETERMINISTIC and read-only.
Everything shown in the header and the breakdown charts is computed
here from the current records, never stored and never asked of the LLM.
"""

from decimal import Decimal
from typing import Iterable

from src.models.expense import ExpenseRecord, ExpenseType, SpendingSummary


def summarize(records: Iterable[ExpenseRecord]) -> SpendingSummary:
    """
    Aggregate records into totals.

    Categories keep the order in which they first appear, so the
    breakdown reads in the same order as the history.
    """
    total = Decimal("0")
    count = 0
    by_category: dict[str, Decimal] = {}
    by_type: dict[ExpenseType, Decimal] = {t: Decimal("0") for t in ExpenseType}

    for record in records:
        total += record.amount
        count += 1
        by_category[record.category] = (
            by_category.get(record.category, Decimal("0")) + record.amount
        )
        by_type[record.type] += record.amount

    return SpendingSummary(
        total=total,
        record_count=count,
        by_category=by_category,
        by_type=by_type,
    )


def most_recent_first(records: Iterable[ExpenseRecord]) -> list[ExpenseRecord]:
    """History view: newest insertion on top."""
    return list(reversed(list(records)))
