"""Derived views over transaction snapshots"""

from .aggregation import (
    totals,
    expense_by_category,
    filter_by_category,
    sort_by_date_descending,
    visible_transactions
)

__all__ = [
    "totals",
    "expense_by_category",
    "filter_by_category",
    "sort_by_date_descending",
    "visible_transactions"
]
