"""Aggregation engine: pure functions recomputed on every read"""

from decimal import Decimal
from typing import Dict, Iterable, List
from fintrack.constants import ALL_CATEGORIES, TransactionType
from fintrack.models import Totals, Transaction


def totals(transactions: Iterable[Transaction]) -> Totals:
    """
    Sum income and expenses.

    Returns:
        Totals with net = income - expenses (all zero for no transactions)
    """
    income = Decimal("0")
    expenses = Decimal("0")
    for t in transactions:
        if t.type == TransactionType.INCOME:
            income += t.amount
        elif t.type == TransactionType.EXPENSE:
            expenses += t.amount
    return Totals(income=income, expenses=expenses, net=income - expenses)


def expense_by_category(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """
    Sum expense amounts per category.

    Categories without expense transactions are absent, not zero.
    Keys appear in the order their first expense is seen.
    """
    breakdown: Dict[str, Decimal] = {}
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        breakdown[t.category] = breakdown.get(t.category, Decimal("0")) + t.amount
    return breakdown


def filter_by_category(transactions: Iterable[Transaction], category: str = ALL_CATEGORIES) -> List[Transaction]:
    if category == ALL_CATEGORIES:
        return list(transactions)
    return [t for t in transactions if t.category == category]


def sort_by_date_descending(transactions: Iterable[Transaction]) -> List[Transaction]:
    # sorted() is stable: equal dates keep their input order
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def visible_transactions(transactions: Iterable[Transaction], category: str = ALL_CATEGORIES) -> List[Transaction]:
    """Table view: category filter, then most recent first"""
    return sort_by_date_descending(filter_by_category(transactions, category))
