"""Category registry: the mutable set of named categories and their icons"""

from typing import Dict, Iterable, Optional, Tuple, Any
from fintrack.constants import ALL_CATEGORIES, DEFAULT_CATEGORIES, DEFAULT_ICON, UNCATEGORIZED
from fintrack.models import Category
from fintrack.utils.errors import DuplicateCategoryError, InvalidCategoryError
from fintrack.utils.logging import get_logger
from fintrack.utils.metrics import ledger_mutations

logger = get_logger(__name__)


class CategoryRegistry:
    """
    Ordered, name-unique collection of categories.

    Built-ins come first in seed order, followed by user additions in
    insertion order. Name matching is exact and case-sensitive.
    """

    def __init__(self, seed: Optional[Iterable[Category]] = None, default_icon: str = DEFAULT_ICON):
        self.default_icon = default_icon
        self._categories: Dict[str, Category] = {}

        if seed is None:
            seed = [Category(name=name, icon=icon, builtin=True) for name, icon in DEFAULT_CATEGORIES.items()]

        for category in seed:
            if category.name not in self._categories:
                self._categories[category.name] = category

        if UNCATEGORIZED not in self._categories:
            self._categories[UNCATEGORIZED] = Category(name=UNCATEGORIZED, icon="circle-help", builtin=True)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CategoryRegistry":
        """Build a registry from the `categories` config section"""
        section = config.get("categories") or {}
        default_icon = section.get("default_icon", DEFAULT_ICON)
        builtin = section.get("builtin")
        if not builtin:
            return cls(default_icon=default_icon)

        seed = [
            Category(name=entry["name"], icon=entry.get("icon", default_icon), builtin=True)
            for entry in builtin
        ]
        return cls(seed=seed, default_icon=default_icon)

    def add(self, name: str, icon: Optional[str] = None) -> Category:
        """
        Register a new category.

        Raises:
            InvalidCategoryError: If the name is blank or the "all" filter value
            DuplicateCategoryError: If the name is already registered
        """
        name = (name or "").strip()
        if not name:
            raise InvalidCategoryError("Category name must not be blank.")
        if name == ALL_CATEGORIES:
            raise InvalidCategoryError(f'"{ALL_CATEGORIES}" is reserved for showing every category.')
        if name in self._categories:
            logger.warning("Category already exists", category=name)
            raise DuplicateCategoryError(name)

        category = Category(name=name, icon=icon or self.default_icon)
        self._categories[name] = category
        ledger_mutations.labels(entity="category", action="add").inc()
        logger.info("Category added", category=name)
        return category

    def remove(self, name: str) -> bool:
        """
        Remove a category and its icon.

        Does not look at transactions; the session applies the deletion policy.

        Returns:
            True if removed, False if the name was not registered
        """
        if name == UNCATEGORIZED:
            raise InvalidCategoryError(f'"{UNCATEGORIZED}" cannot be deleted.')
        if name not in self._categories:
            logger.warning("Category not found for removal", category=name)
            return False

        del self._categories[name]
        ledger_mutations.labels(entity="category", action="remove").inc()
        logger.info("Category deleted", category=name)
        return True

    def list(self) -> Tuple[str, ...]:
        return tuple(self._categories)

    def categories(self) -> Tuple[Category, ...]:
        return tuple(self._categories.values())

    def get(self, name: str) -> Optional[Category]:
        return self._categories.get(name)

    def icon_for(self, name: str) -> str:
        category = self._categories.get(name)
        return category.icon if category else self.default_icon

    def __contains__(self, name: object) -> bool:
        return name in self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self):
        return iter(self.list())
