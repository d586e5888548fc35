"""Constants and enums for the finance tracker"""

from enum import Enum


class TransactionType(str, Enum):
    """Direction of a transaction"""
    INCOME = "income"
    EXPENSE = "expense"


class CategoryDeletionPolicy(str, Enum):
    """What happens to transactions tagged with a removed category"""
    REASSIGN = "reassign"  # re-tag as UNCATEGORIZED
    BLOCK = "block"        # refuse removal while referenced


# Sentinel category; always registered, never removable
UNCATEGORIZED = "Uncategorized"

# Filter value meaning "every category"
ALL_CATEGORIES = "all"

# Icon placeholder for user-added categories
DEFAULT_ICON = "more-horizontal"

# Built-in seed set (name -> icon), used when config has none
DEFAULT_CATEGORIES = {
    "Food & Dining": "utensils",
    "Transportation": "car",
    "Shopping": "shopping-bag",
    "Entertainment": "film",
    "Bills & Utilities": "receipt",
    "Health & Fitness": "heart-pulse",
    "Travel": "plane",
    "Salary": "briefcase",
    "Investments": "trending-up",
    "Other": "more-horizontal",
}

# Advisory defaults
DEFAULT_LLM_MODEL = "anthropic/claude-haiku-4.5"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
EXCHANGE_RATE_TOOL = "get_exchange_rate"
DEFAULT_MAX_TOOL_ROUNDS = 3
SIMULATED_RATE_MIN = 0.5
SIMULATED_RATE_SPAN = 2.0
