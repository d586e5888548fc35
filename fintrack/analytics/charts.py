"""Chart series and monthly cash flow built on the aggregation engine"""

import pandas as pd
from typing import Any, Dict, Iterable, List
from fintrack.constants import TransactionType
from fintrack.models import Transaction
from fintrack.analytics.aggregation import totals, expense_by_category

FRAME_COLUMNS = ['id', 'date', 'description', 'amount', 'type', 'category']
CASHFLOW_COLUMNS = ['month', 'income', 'expenses', 'net']


def summary_chart_data(transactions: Iterable[Transaction]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Series for the dashboard charts.

    Returns:
        {
            'bar': [{'name': 'Income', 'value': ...}, {'name': 'Expenses', 'value': ...}],
            'pie': [{'name': category, 'value': ...}, ...]
        }
    """
    snapshot = list(transactions)
    summary = totals(snapshot)
    return {
        'bar': [
            {'name': 'Income', 'value': summary.income},
            {'name': 'Expenses', 'value': summary.expenses},
        ],
        'pie': [
            {'name': name, 'value': value}
            for name, value in expense_by_category(snapshot).items()
        ],
    }


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """One row per transaction; amounts as float for plotting"""
    rows = [
        {
            'id': t.id,
            'date': t.date,
            'description': t.description,
            'amount': float(t.amount),
            'type': t.type.value,
            'category': t.category,
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df['date'] = pd.to_datetime(df['date'])
    return df


def monthly_cashflow(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Income, expenses and net per calendar month, oldest month first.

    Returns:
        DataFrame with columns month ('YYYY-MM'), income, expenses, net
    """
    df = transactions_frame(transactions)
    if df.empty:
        return pd.DataFrame(columns=CASHFLOW_COLUMNS)

    df['month'] = df['date'].dt.strftime('%Y-%m')
    pivot = df.pivot_table(index='month', columns='type', values='amount', aggfunc='sum', fill_value=0.0)

    result = pd.DataFrame({
        'month': pivot.index,
        'income': pivot.get(TransactionType.INCOME.value, pd.Series(0.0, index=pivot.index)).values,
        'expenses': pivot.get(TransactionType.EXPENSE.value, pd.Series(0.0, index=pivot.index)).values,
    })
    result['net'] = result['income'] - result['expenses']
    return result.sort_values('month').reset_index(drop=True)
