"""Exchange-rate providers used by the rate-lookup tool"""

import random
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from fintrack.constants import SIMULATED_RATE_MIN, SIMULATED_RATE_SPAN
from fintrack.utils.errors import ConfigurationError, RateUnavailable
from fintrack.utils.logging import get_logger

logger = get_logger(__name__)


class ExchangeRateProvider(ABC):
    """(from, to) -> rate; equal codes always give 1"""

    @abstractmethod
    def get_rate(self, from_currency: str, to_currency: str) -> float:
        ...


class SimulatedRateProvider(ExchangeRateProvider):
    """
    Random, non-authoritative rates for demos.

    Equal codes return exactly 1; anything else draws from [0.5, 2.5).
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_rate(self, from_currency: str, to_currency: str) -> float:
        logger.info("Getting simulated exchange rate", from_currency=from_currency, to_currency=to_currency)
        if from_currency == to_currency:
            return 1.0
        return self.rng.random() * SIMULATED_RATE_SPAN + SIMULATED_RATE_MIN


class StaticRateProvider(ExchangeRateProvider):
    """Fixed rate table; the inverse of every listed pair is derived"""

    def __init__(self, rates: Dict[str, Dict[str, float]]):
        self._rates: Dict[tuple, float] = {}
        for base, quotes in rates.items():
            for quote, rate in (quotes or {}).items():
                rate = float(rate)
                if rate <= 0:
                    raise ConfigurationError(f"Exchange rate {base}->{quote} must be positive")
                self._rates[(base.upper(), quote.upper())] = rate
                self._rates.setdefault((quote.upper(), base.upper()), 1 / rate)

    def get_rate(self, from_currency: str, to_currency: str) -> float:
        from_currency, to_currency = from_currency.upper(), to_currency.upper()
        if from_currency == to_currency:
            return 1.0
        try:
            return self._rates[(from_currency, to_currency)]
        except KeyError:
            raise RateUnavailable(f"No rate configured for {from_currency}->{to_currency}")


def build_rate_provider(config: Dict[str, Any]) -> ExchangeRateProvider:
    """Pick the provider named by advisory.rate_provider"""
    advisory = config.get("advisory") or {}
    kind = advisory.get("rate_provider", "simulated")
    if kind == "simulated":
        return SimulatedRateProvider()
    if kind == "static":
        return StaticRateProvider(advisory.get("static_rates") or {})
    raise ConfigurationError(f"Unknown rate provider: {kind}")
