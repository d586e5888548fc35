"""Demo data for the finance tracker"""

from .csv_loader import load_transactions_csv

__all__ = ["load_transactions_csv"]
