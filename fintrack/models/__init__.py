"""Data models for the finance tracker"""

from .transaction import Transaction, TransactionDraft
from .category import Category
from .summary import Totals
from .advisory import (
    CategorySuggestion,
    ConversionRequest,
    CurrencyConversion,
    ExchangeRateInput,
    ModelReply,
    RateAnswer,
    ToolCall
)

__all__ = [
    "Transaction",
    "TransactionDraft",
    "Category",
    "Totals",
    "CategorySuggestion",
    "ConversionRequest",
    "CurrencyConversion",
    "ExchangeRateInput",
    "ModelReply",
    "RateAnswer",
    "ToolCall"
]
