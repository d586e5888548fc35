"""Transaction data models"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal
from fintrack.constants import TransactionType


class TransactionDraft(BaseModel):
    """Transaction fields as entered, before the store assigns an id"""

    date: datetime = Field(..., description="When the transaction happened")
    description: str = Field(..., min_length=1, description="What the money was for")
    amount: Decimal = Field(..., gt=0, decimal_places=2, description="Positive amount in currency units")
    type: TransactionType = Field(..., description="income or expense")
    category: str = Field(..., min_length=1, description="Registered category name")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "date": "2024-01-02T09:30:00",
                "description": "Coffee with a friend",
                "amount": "4.50",
                "type": "expense",
                "category": "Food & Dining"
            }
        }

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be blank")
        return value


class Transaction(TransactionDraft):
    """Stored transaction; id is assigned once and never changes"""

    id: str = Field(..., min_length=1, description="Opaque unique id")

    @classmethod
    def from_draft(cls, draft: TransactionDraft, txn_id: str) -> "Transaction":
        return cls(id=txn_id, **draft.model_dump())

    def to_draft(self) -> TransactionDraft:
        return TransactionDraft(**self.model_dump(exclude={"id"}))

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE
