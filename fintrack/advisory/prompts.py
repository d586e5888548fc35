"""Prompt templates for the advisory gateway"""

from typing import Iterable
from fintrack.constants import EXCHANGE_RATE_TOOL


def category_suggestion_prompt(description: str, categories: Iterable[str]) -> str:
    return f"""You are a personal finance assistant. Your primary task is to categorize user transactions based on their descriptions. Given the transaction description, suggest the most appropriate category.

Description: {description}

Available categories: {', '.join(categories)}

Respond with ONLY a JSON object (no markdown) of the form:
{{"category": "<one of the available categories>", "confidence": <number between 0 and 1>}}

The confidence should represent your certainty that you have categorized it correctly.
"""


def exchange_rate_prompt(from_currency: str, to_currency: str) -> str:
    return f"""You are an exchange rate provider. Your only task is to use the {EXCHANGE_RATE_TOOL} tool to find the exchange rate between the two currencies provided.

From: {from_currency}
To: {to_currency}

Call the tool first. Once you have its result, respond with ONLY a JSON object (no markdown):
{{"rate": <the exchange rate>}}
"""
