"""Utility modules"""

from .config_loader import load_config, save_config
from .errors import (
    FinanceTrackerError,
    ConfigurationError,
    LLMError,
    DuplicateCategoryError,
    SuggestionUnavailable,
    RateUnavailable
)

__all__ = [
    "load_config",
    "save_config",
    "FinanceTrackerError",
    "ConfigurationError",
    "LLMError",
    "DuplicateCategoryError",
    "SuggestionUnavailable",
    "RateUnavailable"
]
