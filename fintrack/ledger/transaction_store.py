"""Transaction store: the ordered, in-memory collection of transactions"""

import uuid
from typing import Callable, Container, Iterable, List, Optional, Tuple
from fintrack.models import Transaction, TransactionDraft
from fintrack.utils.errors import UnknownCategoryError
from fintrack.utils.logging import get_logger
from fintrack.utils.metrics import ledger_mutations

logger = get_logger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class TransactionStore:
    """
    Holds transactions newest-first and validates category membership.

    Missing ids on update/remove are a reported no-op: the call returns
    False and logs a warning, the collection is left untouched.
    """

    def __init__(self, categories: Container[str], id_factory: Callable[[], str] = _new_id):
        self._categories = categories
        self._id_factory = id_factory
        self._transactions: List[Transaction] = []

    def _check_category(self, category: str) -> None:
        if category not in self._categories:
            raise UnknownCategoryError(category)

    def _checked_draft(self, draft: TransactionDraft) -> TransactionDraft:
        # model_copy(update=...) bypasses field validation, so re-run it here
        draft = TransactionDraft.model_validate(draft.model_dump(exclude={"id"}))
        self._check_category(draft.category)
        return draft

    def add(self, draft: TransactionDraft) -> Transaction:
        """
        Store a new transaction under a fresh id, ahead of existing ones.

        Raises:
            ValidationError: If the draft's fields break the model constraints
            UnknownCategoryError: If the draft's category is not registered
        """
        return self._insert(self._checked_draft(draft))

    def _insert(self, draft: TransactionDraft) -> Transaction:
        txn_id = self._id_factory()
        while self._index_of(txn_id) is not None:
            txn_id = self._id_factory()

        transaction = Transaction.from_draft(draft, txn_id)
        self._transactions.insert(0, transaction)
        ledger_mutations.labels(entity="transaction", action="add").inc()
        logger.info("Transaction added", txn_id=txn_id, description=transaction.description)
        return transaction

    def load(self, drafts: Iterable[TransactionDraft]) -> List[Transaction]:
        """
        Bulk add; the first draft ends up first in list().

        Every draft is checked before any is stored, so a failure leaves the
        store unchanged.
        """
        checked = [self._checked_draft(draft) for draft in drafts]
        added = [self._insert(draft) for draft in reversed(checked)]
        added.reverse()
        return added

    def update(self, record: Transaction) -> bool:
        """
        Replace the stored record with the same id, keeping its position.

        Returns:
            True if replaced, False if no record has that id

        Raises:
            ValidationError: If the record's fields break the model constraints
            UnknownCategoryError: If the new category is not registered
        """
        index = self._index_of(record.id)
        if index is None:
            logger.warning("Transaction not found for update", txn_id=record.id)
            return False

        record = Transaction.model_validate(record.model_dump())
        self._check_category(record.category)
        self._transactions[index] = record
        ledger_mutations.labels(entity="transaction", action="update").inc()
        logger.info("Transaction updated", txn_id=record.id)
        return True

    def remove(self, txn_id: str) -> bool:
        """
        Delete the record with the given id.

        Returns:
            True if removed, False if no record has that id
        """
        index = self._index_of(txn_id)
        if index is None:
            logger.warning("Transaction not found for removal", txn_id=txn_id)
            return False

        del self._transactions[index]
        ledger_mutations.labels(entity="transaction", action="remove").inc()
        logger.info("Transaction removed", txn_id=txn_id)
        return True

    def recategorize(self, old: str, new: str) -> int:
        """Re-tag every transaction in category `old` with `new`"""
        self._check_category(new)
        count = 0
        for index, transaction in enumerate(self._transactions):
            if transaction.category == old:
                self._transactions[index] = transaction.model_copy(update={"category": new})
                count += 1
        if count:
            logger.info("Transactions recategorized", old=old, new=new, count=count)
        return count

    def count_in_category(self, category: str) -> int:
        return sum(1 for t in self._transactions if t.category == category)

    def get(self, txn_id: str) -> Optional[Transaction]:
        index = self._index_of(txn_id)
        return None if index is None else self._transactions[index]

    def list(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def _index_of(self, txn_id: str) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == txn_id:
                return index
        return None

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self):
        return iter(self.list())
