"""Finance session: explicit owner of the category registry and transaction store"""

from typing import Any, Dict, List, Optional, Tuple
from fintrack.constants import ALL_CATEGORIES, CategoryDeletionPolicy, DEFAULT_MAX_TOOL_ROUNDS, UNCATEGORIZED
from fintrack.models import (
    Category,
    CategorySuggestion,
    CurrencyConversion,
    Totals,
    Transaction,
    TransactionDraft
)
from fintrack.analytics import aggregation
from fintrack.analytics.charts import monthly_cashflow, summary_chart_data
from fintrack.advisory.gateway import AdvisoryGateway
from fintrack.advisory.llm_client import OpenRouterChatModel
from fintrack.advisory.rates import build_rate_provider
from fintrack.advisory.requests import RequestGuard
from fintrack.advisory.tool_registry import build_default_registry
from fintrack.ledger.category_registry import CategoryRegistry
from fintrack.ledger.transaction_store import TransactionStore
from fintrack.utils.errors import CategoryInUseError, ConfigurationError, InvalidRequestError
from fintrack.utils.logging import get_logger

logger = get_logger(__name__)


class FinanceSession:
    """
    One user's in-memory finance state and the operations the UI consumes.

    Reads (transactions, totals, breakdowns) are recomputed from the store on
    every call. Advisory helpers are keyed by form field so a result for
    superseded input is dropped instead of applied.
    """

    def __init__(
        self,
        registry: Optional[CategoryRegistry] = None,
        gateway: Optional[AdvisoryGateway] = None,
        deletion_policy: CategoryDeletionPolicy = CategoryDeletionPolicy.REASSIGN,
    ):
        self.registry = registry or CategoryRegistry()
        self.store = TransactionStore(self.registry)
        self.gateway = gateway
        self.deletion_policy = CategoryDeletionPolicy(deletion_policy)
        self.requests = RequestGuard()

    @classmethod
    def from_config(cls, config: Dict[str, Any], gateway: Optional[AdvisoryGateway] = None) -> "FinanceSession":
        """Build a session (and, unless given, an OpenRouter-backed gateway) from config"""
        ledger = config.get("ledger") or {}
        try:
            policy = CategoryDeletionPolicy(ledger.get("category_deletion_policy", CategoryDeletionPolicy.REASSIGN.value))
        except ValueError:
            raise ConfigurationError(f"Unknown category deletion policy: {ledger.get('category_deletion_policy')}")

        registry = CategoryRegistry.from_config(config)
        if gateway is None:
            advisory = config.get("advisory") or {}
            gateway = AdvisoryGateway(
                model=OpenRouterChatModel.from_config(config),
                tools=build_default_registry(build_rate_provider(config)),
                categories=registry.list,
                max_tool_rounds=advisory.get("max_tool_rounds", DEFAULT_MAX_TOOL_ROUNDS),
            )
        return cls(registry=registry, gateway=gateway, deletion_policy=policy)

    # Transactions

    def add_transaction(self, draft: TransactionDraft) -> Transaction:
        return self.store.add(draft)

    def update_transaction(self, record: Transaction) -> bool:
        return self.store.update(record)

    def remove_transaction(self, txn_id: str) -> bool:
        return self.store.remove(txn_id)

    def get_transaction(self, txn_id: str) -> Optional[Transaction]:
        return self.store.get(txn_id)

    def transactions(self) -> Tuple[Transaction, ...]:
        return self.store.list()

    # Categories

    def add_category(self, name: str, icon: Optional[str] = None) -> Category:
        return self.registry.add(name, icon)

    def remove_category(self, name: str) -> bool:
        """
        Remove a category under the session's deletion policy.

        REASSIGN re-tags referencing transactions as Uncategorized; BLOCK
        refuses while any transaction references the category.

        Raises:
            CategoryInUseError: Under BLOCK, if the category is referenced
            InvalidCategoryError: For the Uncategorized sentinel
        """
        if name == UNCATEGORIZED or name not in self.registry:
            return self.registry.remove(name)

        in_use = self.store.count_in_category(name)
        if in_use and self.deletion_policy == CategoryDeletionPolicy.BLOCK:
            logger.warning("Category deletion blocked", category=name, transactions=in_use)
            raise CategoryInUseError(name, in_use)

        removed = self.registry.remove(name)
        if in_use:
            self.store.recategorize(name, UNCATEGORIZED)
        return removed

    def categories(self) -> Tuple[str, ...]:
        return self.registry.list()

    def category_icons(self) -> Dict[str, str]:
        return {category.name: category.icon for category in self.registry.categories()}

    # Derived views

    def totals(self) -> Totals:
        return aggregation.totals(self.store.list())

    def expense_by_category(self):
        return aggregation.expense_by_category(self.store.list())

    def visible_transactions(self, category: str = ALL_CATEGORIES) -> List[Transaction]:
        return aggregation.visible_transactions(self.store.list(), category)

    def chart_data(self):
        return summary_chart_data(self.store.list())

    def monthly_cashflow(self):
        return monthly_cashflow(self.store.list())

    # Advisory

    def _require_gateway(self) -> AdvisoryGateway:
        if self.gateway is None:
            raise InvalidRequestError("No advisory gateway configured for this session.")
        return self.gateway

    def suggest_category_for(self, field: str, description: str) -> Optional[CategorySuggestion]:
        """Suggest a category for a form field; None if the field's input moved on"""
        gateway = self._require_gateway()
        ticket = self.requests.begin(field, description)
        try:
            suggestion = gateway.suggest_category(description, self.registry.list())
        except Exception:
            self.requests.finish(ticket)
            raise
        return self.requests.resolve(ticket, suggestion)

    async def asuggest_category_for(self, field: str, description: str) -> Optional[CategorySuggestion]:
        gateway = self._require_gateway()
        ticket = self.requests.begin(field, description)
        try:
            suggestion = await gateway.asuggest_category(description, self.registry.list())
        except Exception:
            self.requests.finish(ticket)
            raise
        return self.requests.resolve(ticket, suggestion)

    def convert_for(self, field: str, amount: float, from_currency: str, to_currency: str) -> Optional[CurrencyConversion]:
        gateway = self._require_gateway()
        ticket = self.requests.begin(field, (amount, from_currency, to_currency))
        try:
            conversion = gateway.convert_currency(amount, from_currency, to_currency)
        except Exception:
            self.requests.finish(ticket)
            raise
        return self.requests.resolve(ticket, conversion)

    async def aconvert_for(self, field: str, amount: float, from_currency: str, to_currency: str) -> Optional[CurrencyConversion]:
        gateway = self._require_gateway()
        ticket = self.requests.begin(field, (amount, from_currency, to_currency))
        try:
            conversion = await gateway.aconvert_currency(amount, from_currency, to_currency)
        except Exception:
            self.requests.finish(ticket)
            raise
        return self.requests.resolve(ticket, conversion)
