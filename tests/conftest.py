"""Shared fixtures: stub chat model and ledger builders"""

import pytest
from datetime import datetime
from decimal import Decimal
from fintrack.advisory.llm_client import ChatModel
from fintrack.constants import TransactionType
from fintrack.ledger.category_registry import CategoryRegistry
from fintrack.ledger.session import FinanceSession
from fintrack.models import ModelReply, ToolCall, Transaction, TransactionDraft
from fintrack.utils.errors import LLMError


class StubChatModel(ChatModel):
    """Replays scripted replies; an Exception in the script is raised instead"""

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    def chat(self, messages, tools=None, response_format=None, operation="unknown"):
        self.calls.append({
            "messages": list(messages),
            "tools": tools,
            "response_format": response_format,
            "operation": operation,
        })
        if not self.replies:
            raise LLMError("stub has no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def content(text):
    return ModelReply(content=text)


def tool_request(name, arguments, call_id="call_1"):
    return ModelReply(tool_calls=[ToolCall(id=call_id, name=name, arguments=arguments)])


def make_draft(amount="10.00", txn_type=TransactionType.EXPENSE, category="Food & Dining",
               date=datetime(2024, 1, 1), description="Lunch"):
    return TransactionDraft(
        date=date,
        description=description,
        amount=Decimal(amount),
        type=txn_type,
        category=category,
    )


def make_txn(txn_id, amount, txn_type, category="Other", date=datetime(2024, 1, 1), description="Item"):
    return Transaction(
        id=txn_id,
        date=date,
        description=description,
        amount=Decimal(str(amount)),
        type=txn_type,
        category=category,
    )


@pytest.fixture
def registry():
    return CategoryRegistry()


@pytest.fixture
def session():
    return FinanceSession()
