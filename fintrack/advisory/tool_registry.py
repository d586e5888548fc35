"""Host-side tool registry for model-proposed actions"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type
from pydantic import BaseModel, ValidationError
from fintrack.constants import EXCHANGE_RATE_TOOL
from fintrack.models import ExchangeRateInput, ToolCall
from fintrack.advisory.rates import ExchangeRateProvider
from fintrack.utils.errors import ToolExecutionError
from fintrack.utils.logging import get_logger
from fintrack.utils.metrics import tool_calls_executed

logger = get_logger(__name__)


@dataclass(frozen=True)
class RegisteredTool:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


class ToolRegistry:
    """
    Named handlers the model may ask the host to run.

    Each tool's pydantic input model doubles as its OpenAI function schema
    and as the validator for the arguments the model sends back.
    """

    def __init__(self):
        self._tools: Dict[str, RegisteredTool] = {}

    def register(self, name: str, description: str, input_model: Type[BaseModel],
                 handler: Callable[[BaseModel], Any]) -> None:
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = RegisteredTool(name, description, input_model, handler)

    def schemas(self) -> List[Dict[str, Any]]:
        """Tool definitions in OpenAI `tools` format"""
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_model.model_json_schema(),
                },
            }
            for tool in self._tools.values()
        ]

    def execute(self, call: ToolCall) -> Any:
        """
        Validate the proposed arguments and run the handler.

        Raises:
            ToolExecutionError: Unknown tool, bad arguments, or handler failure
        """
        tool = self._tools.get(call.name)
        if tool is None:
            tool_calls_executed.labels(tool_name=call.name, status="unknown").inc()
            raise ToolExecutionError(f"Model requested unknown tool: {call.name}")

        try:
            arguments = tool.input_model.model_validate(call.arguments)
        except ValidationError as e:
            tool_calls_executed.labels(tool_name=call.name, status="invalid").inc()
            raise ToolExecutionError(f"Invalid arguments for {call.name}: {e}")

        try:
            result = tool.handler(arguments)
        except Exception as e:
            tool_calls_executed.labels(tool_name=call.name, status="failed").inc()
            raise ToolExecutionError(f"Tool {call.name} failed: {e}") from e

        tool_calls_executed.labels(tool_name=call.name, status="success").inc()
        logger.info("Tool executed", tool=call.name, call_id=call.id)
        return result

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry(rate_provider: ExchangeRateProvider) -> ToolRegistry:
    """Registry with the exchange-rate lookup backed by `rate_provider`"""
    registry = ToolRegistry()

    def get_exchange_rate(args: ExchangeRateInput) -> float:
        return rate_provider.get_rate(args.from_currency.upper(), args.to_currency.upper())

    registry.register(
        EXCHANGE_RATE_TOOL,
        "Get the exchange rate between two currencies. Rates are advisory and may be simulated.",
        ExchangeRateInput,
        get_exchange_rate,
    )
    return registry
