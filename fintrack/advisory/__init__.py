"""AI advisory gateway and its collaborators"""

from .gateway import AdvisoryGateway
from .llm_client import ChatModel, OpenRouterChatModel
from .rates import ExchangeRateProvider, SimulatedRateProvider, StaticRateProvider
from .requests import RequestGuard
from .tool_registry import ToolRegistry, build_default_registry

__all__ = [
    "AdvisoryGateway",
    "ChatModel",
    "OpenRouterChatModel",
    "ExchangeRateProvider",
    "SimulatedRateProvider",
    "StaticRateProvider",
    "RequestGuard",
    "ToolRegistry",
    "build_default_registry"
]
