"""Derived summary models (computed on demand, never stored)"""

from pydantic import BaseModel, Field
from decimal import Decimal


class Totals(BaseModel):
    """Income, expenses and net over a transaction snapshot"""

    income: Decimal = Field(Decimal("0"), description="Sum of income amounts")
    expenses: Decimal = Field(Decimal("0"), description="Sum of expense amounts")
    net: Decimal = Field(Decimal("0"), description="income - expenses")

    class Config:
        frozen = True
