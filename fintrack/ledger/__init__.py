"""In-memory ledger: categories, transactions and the session that owns them"""

from .category_registry import CategoryRegistry
from .transaction_store import TransactionStore
from .session import FinanceSession

__all__ = ["CategoryRegistry", "TransactionStore", "FinanceSession"]
