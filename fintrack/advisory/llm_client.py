"""OpenRouter chat model with cost tracking, behind a small injectable interface."""

from openai import OpenAI
import json
import os
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from fintrack.constants import DEFAULT_LLM_MODEL, OPENROUTER_BASE_URL
from fintrack.models import ModelReply, ToolCall
from fintrack.utils.metrics import llm_tokens_counter, llm_cost_counter, llm_api_latency, llm_rate_limit_hits
from fintrack.utils.errors import LLMError
from fintrack.utils.logging import get_logger

logger = get_logger(__name__)

# Lazy-initialize OpenRouter client
_client = None

# Pricing per 1M tokens (input tokens, simplified)
MODEL_PRICING = {
    "anthropic/claude-haiku-4.5": 0.80 / 1_000_000,
    "anthropic/claude-sonnet-4.5": 3.0 / 1_000_000,
    "openai/gpt-4o-mini": 0.15 / 1_000_000,
    "google/gemini-2.0-flash-001": 0.10 / 1_000_000,
}


def get_client(base_url: str = OPENROUTER_BASE_URL) -> OpenAI:
    """Get or create the OpenRouter client (lazy initialization)"""
    global _client
    if _client is None:
        api_key = os.getenv("OPENROUTER_API_KEY")
        if not api_key:
            raise LLMError("OPENROUTER_API_KEY environment variable is not set")
        _client = OpenAI(api_key=api_key, base_url=base_url)
    return _client


def calculate_cost(tokens: int, model: str) -> float:
    """
    Calculate cost based on token usage and model pricing.

    Args:
        tokens: Number of tokens used
        model: Model name

    Returns:
        Cost in USD
    """
    price_per_token = MODEL_PRICING.get(model, 0.15 / 1_000_000)
    return tokens * price_per_token


def assistant_message(reply: ModelReply) -> Dict[str, Any]:
    """Render a reply back into an OpenAI assistant message for the next round"""
    message: Dict[str, Any] = {"role": "assistant", "content": reply.content}
    if reply.tool_calls:
        message["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": json.dumps(call.arguments)},
            }
            for call in reply.tool_calls
        ]
    return message


def tool_message(call: ToolCall, result: Any) -> Dict[str, Any]:
    return {"role": "tool", "tool_call_id": call.id, "content": json.dumps(result, default=str)}


class ChatModel(ABC):
    """Language-model completion capability consumed by the advisory gateway"""

    @abstractmethod
    def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        response_format: Optional[Dict[str, Any]] = None,
        operation: str = "unknown",
    ) -> ModelReply:
        """
        Run one completion turn.

        Raises:
            LLMError: If the model cannot be reached or answers malformed
        """


class OpenRouterChatModel(ChatModel):
    """ChatModel backed by the OpenAI SDK pointed at OpenRouter"""

    def __init__(
        self,
        model: Optional[str] = None,
        base_url: str = OPENROUTER_BASE_URL,
        temperature: float = 0.1,
        max_retries: int = 1,
        timeout: float = 60,
    ):
        self.model = model or os.getenv("DEFAULT_LLM_MODEL", DEFAULT_LLM_MODEL)
        self.base_url = base_url
        self.temperature = temperature
        self.max_retries = max(1, max_retries)
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "OpenRouterChatModel":
        llm = config.get("llm") or {}
        return cls(
            model=os.getenv("DEFAULT_LLM_MODEL") or llm.get("model"),
            base_url=llm.get("base_url", OPENROUTER_BASE_URL),
            temperature=llm.get("temperature", 0.1),
            max_retries=llm.get("max_retries", 1),
            timeout=llm.get("timeout_seconds", 60),
        )

    def chat(self, messages, tools=None, response_format=None, operation="unknown") -> ModelReply:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "timeout": self.timeout,
        }
        if tools:
            kwargs["tools"] = tools
        if response_format:
            kwargs["response_format"] = response_format

        for attempt in range(self.max_retries):
            try:
                start_time = time.time()
                response = get_client(self.base_url).chat.completions.create(**kwargs)
                latency = time.time() - start_time

                # Track metrics
                tokens = response.usage.total_tokens if response.usage else 0
                cost = calculate_cost(tokens, self.model)
                llm_tokens_counter.labels(model_name=self.model, operation=operation).inc(tokens)
                llm_cost_counter.labels(model_name=self.model).inc(cost)
                llm_api_latency.labels(model_name=self.model).observe(latency)

                logger.info(
                    "LLM call successful",
                    model=self.model,
                    tokens=tokens,
                    cost=cost,
                    latency=latency,
                    operation=operation
                )
                return self._to_reply(response, tokens)

            except LLMError:
                raise
            except Exception as e:
                rate_limited = "rate_limit" in str(e).lower() or "429" in str(e)
                if rate_limited:
                    llm_rate_limit_hits.labels(model_name=self.model).inc()
                    logger.warning(f"Rate limit hit (attempt {attempt + 1}/{self.max_retries})")
                else:
                    logger.error(f"LLM API error: {e}", attempt=attempt)

                if attempt < self.max_retries - 1:
                    time.sleep(2 ** attempt if rate_limited else 1)
                else:
                    raise LLMError(f"LLM API call failed after {self.max_retries} attempts: {e}")

    def _to_reply(self, response, tokens: int) -> ModelReply:
        message = response.choices[0].message
        calls = []
        for call in message.tool_calls or []:
            try:
                arguments = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise LLMError(f"Malformed arguments for tool {call.function.name}: {e}")
            calls.append(ToolCall(id=call.id, name=call.function.name, arguments=arguments))

        return ModelReply(content=message.content, tool_calls=calls, model=self.model, total_tokens=tokens)
