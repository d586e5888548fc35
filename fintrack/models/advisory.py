"""Advisory gateway request/response models"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any


class CategorySuggestion(BaseModel):
    """Model-suggested category for a transaction description"""

    category: str = Field(..., min_length=1, description="Suggested category name")
    confidence: float = Field(..., ge=0, le=1, description="Certainty of the suggestion (0-1)")

    class Config:
        json_schema_extra = {
            "example": {"category": "Food & Dining", "confidence": 0.9}
        }


class ConversionRequest(BaseModel):
    """Validated currency conversion input"""

    amount: float = Field(..., gt=0, description="Amount to convert")
    from_currency: str = Field(..., description="ISO code to convert from (e.g. USD)")
    to_currency: str = Field(..., description="ISO code to convert to (e.g. EUR)")

    @field_validator("from_currency", "to_currency")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        value = value.strip().upper()
        if len(value) != 3 or not value.isascii() or not value.isalpha():
            raise ValueError("currency code must be three letters")
        return value


class CurrencyConversion(BaseModel):
    """Best-effort advisory conversion result; not a source of truth for rates"""

    converted_amount: float = Field(..., alias="convertedAmount", description="Amount in the target currency")
    rate: float = Field(..., gt=0, description="Rate applied")
    amount: float = Field(..., description="Original amount")
    from_currency: str
    to_currency: str

    class Config:
        populate_by_name = True


class ExchangeRateInput(BaseModel):
    """Arguments of the exchange-rate lookup tool"""

    from_currency: str = Field(..., alias="from", description="The currency to convert from (e.g., USD).")
    to_currency: str = Field(..., alias="to", description="The currency to convert to (e.g., EUR).")

    class Config:
        populate_by_name = True


class RateAnswer(BaseModel):
    """Direct rate answer when the model skips the tool"""

    rate: float = Field(..., gt=0)


class ToolCall(BaseModel):
    """Action proposed by the model for the host to execute"""

    id: str = Field(..., description="Call id echoed back in the tool result")
    name: str = Field(..., description="Registered tool name")
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ModelReply(BaseModel):
    """One assistant turn: final content and/or proposed tool calls"""

    content: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    model: Optional[str] = None
    total_tokens: int = 0
