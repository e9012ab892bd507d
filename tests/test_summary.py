"""Tests for deterministic aggregation."""

from decimal import Decimal

from src.models.expense import ExpenseRecord, ExpenseType
from src.queries import most_recent_first, summarize


def record(description, amount, category, type_=ExpenseType.NEED):
    return ExpenseRecord(
        description=description,
        amount=Decimal(amount),
        category=category,
        type=type_,
    )


def test_empty_summary():
    summary = summarize([])
    assert summary.total == Decimal("0")
    assert summary.record_count == 0
    assert summary.by_category == {}
    assert summary.by_type == {
        ExpenseType.NEED: Decimal("0"),
        ExpenseType.WANT: Decimal("0"),
    }


def test_totals_and_breakdowns():
    records = [
        record("早餐", "12", "餐饮"),
        record("电影", "45.5", "娱乐", ExpenseType.WANT),
        record("奶茶", "18", "餐饮", ExpenseType.WANT),
        record("地铁", "4", "交通"),
    ]

    summary = summarize(records)

    assert summary.total == Decimal("79.5")
    assert summary.record_count == 4
    assert list(summary.by_category) == ["餐饮", "娱乐", "交通"]
    assert summary.by_category["餐饮"] == Decimal("30")
    assert summary.by_type[ExpenseType.NEED] == Decimal("16")
    assert summary.by_type[ExpenseType.WANT] == Decimal("63.5")


def test_breakdowns_add_up_to_total():
    records = [record(f"item{i}", f"{i}.25", f"cat{i % 3}") for i in range(1, 8)]
    summary = summarize(records)
    assert sum(summary.by_category.values()) == summary.total
    assert sum(summary.by_type.values()) == summary.total


def test_most_recent_first():
    records = [record("a", "1", "x"), record("b", "2", "x"), record("c", "3", "x")]
    assert [r.description for r in most_recent_first(records)] == ["c", "b", "a"]
    assert [r.description for r in records] == ["a", "b", "c"]
