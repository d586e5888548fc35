"""AI advisory gateway: category suggestions and currency conversion"""

import asyncio
import json
import math
import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
from pydantic import ValidationError
from fintrack.constants import DEFAULT_CATEGORIES, DEFAULT_MAX_TOOL_ROUNDS, EXCHANGE_RATE_TOOL
from fintrack.models import (
    CategorySuggestion,
    ConversionRequest,
    CurrencyConversion,
    ExchangeRateInput,
    ModelReply,
    RateAnswer,
    ToolCall
)
from fintrack.advisory.llm_client import ChatModel, assistant_message, tool_message
from fintrack.advisory.prompts import category_suggestion_prompt, exchange_rate_prompt
from fintrack.advisory.tool_registry import ToolRegistry
from fintrack.utils.errors import (
    InvalidRequestError,
    LLMError,
    RateUnavailable,
    SuggestionUnavailable,
    ToolExecutionError
)
from fintrack.utils.logging import get_logger
from fintrack.utils.metrics import advisory_requests

logger = get_logger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_json_payload(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse a model answer as a JSON object, tolerating markdown fences.

    Raises:
        ValueError: If the text is empty or not a JSON object
    """
    if not text or not text.strip():
        raise ValueError("empty model response")
    text = text.strip()
    match = _FENCE.match(text)
    if match:
        text = match.group(1)
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError("model response is not a JSON object")
    return payload


def _usable_rate(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        return None
    return value


class AdvisoryGateway:
    """
    Turns typed requests into model prompts and parses typed results.

    Failures surface as SuggestionUnavailable / RateUnavailable; the gateway
    never retries, callers decide whether to ask again.
    """

    def __init__(
        self,
        model: ChatModel,
        tools: ToolRegistry,
        categories: Optional[Callable[[], Iterable[str]]] = None,
        max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
    ):
        self.model = model
        self.tools = tools
        self.categories = categories or (lambda: DEFAULT_CATEGORIES.keys())
        self.max_tool_rounds = max(1, max_tool_rounds)

    def suggest_category(self, description: str, categories: Optional[Iterable[str]] = None) -> CategorySuggestion:
        """
        Ask the model which category fits a transaction description.

        Args:
            description: Non-empty transaction description
            categories: Candidate names (defaults to the gateway's category source)

        Returns:
            CategorySuggestion with confidence in [0, 1]

        Raises:
            InvalidRequestError: If the description is blank
            SuggestionUnavailable: If the model fails or answers off-schema
        """
        description = (description or "").strip()
        if not description:
            advisory_requests.labels(operation="suggest_category", outcome="invalid").inc()
            raise InvalidRequestError("Please enter a description first.")

        candidates = list(categories if categories is not None else self.categories())
        prompt = category_suggestion_prompt(description, candidates)

        try:
            reply = self._chat(
                [{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                operation="suggest_category",
            )
            suggestion = CategorySuggestion.model_validate(parse_json_payload(reply.content))
        except (LLMError, ValueError, ValidationError) as e:
            # pydantic's ValidationError and json's JSONDecodeError are ValueErrors
            advisory_requests.labels(operation="suggest_category", outcome="unavailable").inc()
            logger.error(f"Failed to get category suggestion: {e}")
            raise SuggestionUnavailable("Could not get a category suggestion at this time.") from e

        if suggestion.category not in candidates:
            logger.warning("Suggested category is not registered", category=suggestion.category)

        advisory_requests.labels(operation="suggest_category", outcome="success").inc()
        logger.info("Suggestion ready", category=suggestion.category, confidence=suggestion.confidence)
        return suggestion

    def convert_currency(self, amount: float, from_currency: str, to_currency: str) -> CurrencyConversion:
        """
        Convert an amount using a model-mediated rate lookup.

        Equal currencies short-circuit with rate 1. Otherwise the model is
        offered the exchange-rate tool, the host runs each proposed call and
        feeds the result back, and the converted amount is computed locally
        from the host-side rate.

        Raises:
            InvalidRequestError: If amount or currency codes are invalid
            RateUnavailable: If no usable rate is obtained
        """
        try:
            request = ConversionRequest(amount=amount, from_currency=from_currency, to_currency=to_currency)
        except ValidationError as e:
            advisory_requests.labels(operation="convert_currency", outcome="invalid").inc()
            raise InvalidRequestError(f"Invalid conversion request: {e}") from e

        if request.from_currency == request.to_currency:
            advisory_requests.labels(operation="convert_currency", outcome="success").inc()
            return self._conversion(request, 1.0)

        try:
            rate = self._lookup_rate(request)
        except (LLMError, ToolExecutionError, RateUnavailable) as e:
            advisory_requests.labels(operation="convert_currency", outcome="unavailable").inc()
            logger.error(f"Failed to convert currency: {e}")
            if isinstance(e, RateUnavailable):
                raise
            raise RateUnavailable("Could not get a conversion rate at this time.") from e

        advisory_requests.labels(operation="convert_currency", outcome="success").inc()
        return self._conversion(request, rate)

    async def asuggest_category(self, description: str, categories: Optional[Iterable[str]] = None) -> CategorySuggestion:
        return await asyncio.to_thread(self.suggest_category, description, categories)

    async def aconvert_currency(self, amount: float, from_currency: str, to_currency: str) -> CurrencyConversion:
        return await asyncio.to_thread(self.convert_currency, amount, from_currency, to_currency)

    def run_tool_loop(self, messages: List[Dict[str, Any]], operation: str) -> Tuple[ModelReply, List[Tuple[ToolCall, Any]]]:
        """
        Two-phase tool protocol.

        Each round the model may propose tool calls; the host executes them
        and appends the results, then re-submits the conversation. Stops when
        the model answers without tool calls or after max_tool_rounds.

        Returns:
            (last reply, [(call, result), ...] in execution order)
        """
        executed: List[Tuple[ToolCall, Any]] = []
        schemas = self.tools.schemas()
        reply = self._chat(messages, tools=schemas, operation=operation)

        for _ in range(self.max_tool_rounds):
            if not reply.tool_calls:
                break
            messages.append(assistant_message(reply))
            for call in reply.tool_calls:
                result = self.tools.execute(call)
                executed.append((call, result))
                messages.append(tool_message(call, result))
            reply = self._chat(messages, tools=schemas, operation=operation)

        return reply, executed

    def _chat(self, messages: List[Dict[str, Any]], **kwargs) -> ModelReply:
        """Model call with every failure surfaced as LLMError"""
        try:
            return self.model.chat(messages, **kwargs)
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(f"Model call failed: {e}") from e

    def _lookup_rate(self, request: ConversionRequest) -> float:
        messages = [{"role": "user", "content": exchange_rate_prompt(request.from_currency, request.to_currency)}]
        reply, executed = self.run_tool_loop(messages, operation="convert_currency")

        # Prefer the latest rate the host itself produced for the requested pair
        lookups = [(call, result) for call, result in executed if call.name == EXCHANGE_RATE_TOOL]
        for call, result in reversed(lookups):
            args = ExchangeRateInput.model_validate(call.arguments)
            pair = (args.from_currency.upper(), args.to_currency.upper())
            if pair != (request.from_currency, request.to_currency):
                logger.warning("Ignoring exchange rate for another currency pair",
                               requested=f"{request.from_currency}->{request.to_currency}",
                               looked_up=f"{pair[0]}->{pair[1]}")
                continue
            rate = _usable_rate(result)
            if rate is None:
                raise RateUnavailable(f"Exchange-rate tool returned an unusable rate: {result!r}")
            return rate

        if lookups:
            raise RateUnavailable("The model looked up a different currency pair.")

        try:
            return RateAnswer.model_validate(parse_json_payload(reply.content)).rate
        except (ValueError, ValidationError) as e:
            raise RateUnavailable("The model did not return an exchange rate.") from e

    @staticmethod
    def _conversion(request: ConversionRequest, rate: float) -> CurrencyConversion:
        return CurrencyConversion(
            converted_amount=request.amount * rate,
            rate=rate,
            amount=request.amount,
            from_currency=request.from_currency,
            to_currency=request.to_currency,
        )
