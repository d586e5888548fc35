"""Tests for the advisory gateway, tool registry and rate providers"""

import json
import random
import pytest
from fintrack.advisory.gateway import AdvisoryGateway, parse_json_payload
from fintrack.advisory.rates import SimulatedRateProvider, StaticRateProvider, build_rate_provider
from fintrack.advisory.tool_registry import ToolRegistry, build_default_registry
from fintrack.constants import EXCHANGE_RATE_TOOL
from fintrack.models import ExchangeRateInput, ToolCall
from fintrack.utils.errors import (
    ConfigurationError,
    InvalidRequestError,
    LLMError,
    RateUnavailable,
    SuggestionUnavailable,
    ToolExecutionError
)
from conftest import StubChatModel, content, tool_request


class FixedRate(SimulatedRateProvider):
    """Deterministic provider recording lookups"""

    def __init__(self, rate):
        super().__init__()
        self.rate = rate
        self.lookups = []

    def get_rate(self, from_currency, to_currency):
        self.lookups.append((from_currency, to_currency))
        return 1.0 if from_currency == to_currency else self.rate


def make_gateway(replies, provider=None, **kwargs):
    model = StubChatModel(replies)
    gateway = AdvisoryGateway(model, build_default_registry(provider or FixedRate(0.5)), **kwargs)
    return gateway, model


class TestSuggestCategory:
    """Category suggestion"""

    def test_returns_model_suggestion(self):
        """A well-formed payload comes back unchanged"""
        gateway, model = make_gateway([content('{"category": "Food & Dining", "confidence": 0.9}')])

        result = gateway.suggest_category("Coffee with a friend")

        assert result.model_dump() == {"category": "Food & Dining", "confidence": 0.9}
        assert model.calls[0]["operation"] == "suggest_category"
        assert model.calls[0]["response_format"] == {"type": "json_object"}

    def test_prompt_lists_description_and_categories(self):
        gateway, model = make_gateway([content('{"category": "Pets", "confidence": 0.4}')])

        gateway.suggest_category("Dog food", categories=["Pets", "Other"])

        prompt = model.calls[0]["messages"][0]["content"]
        assert "Description: Dog food" in prompt
        assert "Available categories: Pets, Other" in prompt

    def test_default_categories_come_from_source(self):
        gateway, model = make_gateway(
            [content('{"category": "Rent", "confidence": 1}')],
            categories=lambda: ("Rent", "Food"),
        )
        gateway.suggest_category("April rent")
        assert "Available categories: Rent, Food" in model.calls[0]["messages"][0]["content"]

    def test_fenced_json_accepted(self):
        gateway, _ = make_gateway([content('```json\n{"category": "Travel", "confidence": 0.75}\n```')])
        assert gateway.suggest_category("Flight to Rome").category == "Travel"

    @pytest.mark.parametrize("payload", [
        "I think this is food",
        '{"category": "Food"}',
        '{"category": "Food", "confidence": 1.7}',
        '["Food", 0.9]',
        "",
    ])
    def test_unparsable_payload_is_unavailable(self, payload):
        gateway, _ = make_gateway([content(payload)])
        with pytest.raises(SuggestionUnavailable):
            gateway.suggest_category("Coffee with a friend")

    def test_model_error_is_unavailable_without_retry(self):
        gateway, model = make_gateway([LLMError("boom"), content('{"category": "Other", "confidence": 0.1}')])

        with pytest.raises(SuggestionUnavailable):
            gateway.suggest_category("Coffee")

        assert len(model.calls) == 1

    @pytest.mark.parametrize("failure", [ConnectionError("network down"), TimeoutError("slow"), RuntimeError("?")])
    def test_transport_error_is_unavailable(self, failure):
        gateway, _ = make_gateway([failure])
        with pytest.raises(SuggestionUnavailable):
            gateway.suggest_category("Coffee with a friend")

    def test_blank_description_rejected_before_model_call(self):
        gateway, model = make_gateway([])
        with pytest.raises(InvalidRequestError):
            gateway.suggest_category("   ")
        assert model.calls == []


class TestConvertCurrency:
    """Currency conversion via the exchange-rate tool"""

    def test_same_currency_is_identity(self):
        """USD->USD returns the amount exactly, no model involved"""
        gateway, model = make_gateway([], provider=SimulatedRateProvider(random.Random(7)))

        result = gateway.convert_currency(10, "USD", "USD")

        assert result.converted_amount == 10
        assert result.model_dump(by_alias=True)["convertedAmount"] == 10
        assert result.rate == 1.0
        assert model.calls == []

    def test_tool_call_round_trip(self):
        """Model proposes the lookup, host runs it, result is fed back"""
        provider = FixedRate(0.9)
        gateway, model = make_gateway(
            [tool_request(EXCHANGE_RATE_TOOL, {"from": "USD", "to": "EUR"}), content('{"rate": 0.9}')],
            provider=provider,
        )

        result = gateway.convert_currency(200, "usd", "eur")

        assert result.converted_amount == pytest.approx(180.0)
        assert result.rate == 0.9
        assert (result.from_currency, result.to_currency) == ("USD", "EUR")
        assert provider.lookups == [("USD", "EUR")]

        # Second round carries the assistant tool call and the host's result
        assert len(model.calls) == 2
        assert model.calls[0]["tools"][0]["function"]["name"] == EXCHANGE_RATE_TOOL
        followup = model.calls[1]["messages"]
        assert followup[1]["role"] == "assistant"
        assert followup[1]["tool_calls"][0]["id"] == "call_1"
        assert followup[2] == {"role": "tool", "tool_call_id": "call_1", "content": json.dumps(0.9)}

    def test_host_rate_wins_over_model_answer(self):
        gateway, _ = make_gateway(
            [tool_request(EXCHANGE_RATE_TOOL, {"from": "USD", "to": "GBP"}), content('{"rate": 42}')],
            provider=FixedRate(0.8),
        )
        assert gateway.convert_currency(10, "USD", "GBP").converted_amount == pytest.approx(8.0)

    def test_direct_rate_answer_without_tool(self):
        gateway, _ = make_gateway([content('{"rate": 1.25}')])
        assert gateway.convert_currency(4, "GBP", "USD").converted_amount == pytest.approx(5.0)

    def test_no_rate_is_unavailable(self):
        gateway, _ = make_gateway([content("I cannot help with that")])
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

    def test_unknown_tool_is_unavailable(self):
        gateway, _ = make_gateway([tool_request("get_weather", {"city": "Paris"})])
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

    def test_model_error_is_unavailable(self):
        gateway, _ = make_gateway([LLMError("timeout")])
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

    @pytest.mark.parametrize("failure", [ConnectionError("network down"), TimeoutError("slow")])
    def test_transport_error_is_unavailable(self, failure):
        gateway, _ = make_gateway([failure])
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

    def test_transport_error_after_tool_round_is_unavailable(self):
        gateway, _ = make_gateway([tool_request(EXCHANGE_RATE_TOOL, {"from": "USD", "to": "EUR"}),
                                   ConnectionError("reset")])
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

    def test_rate_for_other_pair_is_not_used(self):
        provider = FixedRate(190.0)
        gateway, _ = make_gateway(
            [tool_request(EXCHANGE_RATE_TOOL, {"from": "GBP", "to": "JPY"}), content('{"rate": 0.9}')],
            provider=provider,
        )

        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "EUR")

        assert provider.lookups == [("GBP", "JPY")]

    def test_matching_pair_wins_over_later_mismatch(self):
        gateway, _ = make_gateway(
            [
                tool_request(EXCHANGE_RATE_TOOL, {"from": "usd", "to": "eur"}, call_id="c1"),
                tool_request(EXCHANGE_RATE_TOOL, {"from": "EUR", "to": "USD"}, call_id="c2"),
                content('{"rate": 0.9}'),
            ],
            provider=FixedRate(0.5),
        )
        assert gateway.convert_currency(10, "USD", "EUR").converted_amount == pytest.approx(5.0)

    def test_missing_static_rate_is_unavailable(self):
        gateway, _ = make_gateway(
            [tool_request(EXCHANGE_RATE_TOOL, {"from": "USD", "to": "CHF"})],
            provider=StaticRateProvider({"USD": {"EUR": 0.9}}),
        )
        with pytest.raises(RateUnavailable):
            gateway.convert_currency(10, "USD", "CHF")

    def test_tool_rounds_are_bounded(self):
        loop = [tool_request(EXCHANGE_RATE_TOOL, {"from": "USD", "to": "EUR"}, call_id=f"c{i}") for i in range(5)]
        gateway, model = make_gateway(loop, provider=FixedRate(2.0), max_tool_rounds=2)

        result = gateway.convert_currency(3, "USD", "EUR")

        assert result.converted_amount == pytest.approx(6.0)
        assert len(model.calls) == 3

    @pytest.mark.parametrize("amount,source,target", [
        (0, "USD", "EUR"),
        (-5, "USD", "EUR"),
        (10, "US", "EUR"),
        (10, "USD", "EURO"),
        (10, "U1D", "EUR"),
    ])
    def test_invalid_requests_rejected(self, amount, source, target):
        gateway, model = make_gateway([])
        with pytest.raises(InvalidRequestError):
            gateway.convert_currency(amount, source, target)
        assert model.calls == []


class TestToolRegistry:
    """Host-side tool registry"""

    def test_schema_uses_input_model(self):
        registry = build_default_registry(FixedRate(1.1))
        schema = registry.schemas()[0]

        assert schema["type"] == "function"
        assert schema["function"]["name"] == EXCHANGE_RATE_TOOL
        assert set(schema["function"]["parameters"]["properties"]) == {"from", "to"}

    def test_execute_validates_arguments(self):
        registry = build_default_registry(FixedRate(1.1))
        with pytest.raises(ToolExecutionError):
            registry.execute(ToolCall(id="x", name=EXCHANGE_RATE_TOOL, arguments={"from": "USD"}))

    def test_handler_failure_wrapped(self):
        registry = ToolRegistry()

        def explode(args):
            raise RuntimeError("down")

        registry.register("lookup", "always fails", ExchangeRateInput, explode)
        with pytest.raises(ToolExecutionError):
            registry.execute(ToolCall(id="x", name="lookup", arguments={"from": "USD", "to": "EUR"}))

    def test_duplicate_registration_rejected(self):
        registry = build_default_registry(FixedRate(1.1))
        with pytest.raises(ValueError):
            registry.register(EXCHANGE_RATE_TOOL, "again", ExchangeRateInput, lambda args: 1.0)


class TestRateProviders:
    """Exchange-rate providers"""

    def test_simulated_same_currency_is_one(self):
        assert SimulatedRateProvider().get_rate("EUR", "EUR") == 1.0

    def test_simulated_range(self):
        provider = SimulatedRateProvider(random.Random(1))
        rates = [provider.get_rate("USD", "EUR") for _ in range(50)]
        assert all(0.5 <= rate < 2.5 for rate in rates)

    def test_static_inverse_pairs(self):
        provider = StaticRateProvider({"USD": {"EUR": 0.8}})
        assert provider.get_rate("usd", "eur") == 0.8
        assert provider.get_rate("EUR", "USD") == pytest.approx(1.25)

    def test_static_rejects_non_positive(self):
        with pytest.raises(ConfigurationError):
            StaticRateProvider({"USD": {"EUR": 0}})

    def test_build_from_config(self):
        assert isinstance(build_rate_provider({"advisory": {}}), SimulatedRateProvider)
        static = build_rate_provider({"advisory": {"rate_provider": "static", "static_rates": {"USD": {"JPY": 150}}}})
        assert static.get_rate("USD", "JPY") == 150
        with pytest.raises(ConfigurationError):
            build_rate_provider({"advisory": {"rate_provider": "ecb"}})


def test_parse_json_payload_rejects_empty():
    with pytest.raises(ValueError):
        parse_json_payload(None)
