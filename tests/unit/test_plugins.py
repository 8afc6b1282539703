import httpx
import pytest

from chat_agent.agent.plugins import (
    MathPlugin,
    WeatherPlugin,
    evaluate_expression,
    register_builtin_plugins,
)
from chat_agent.agent.registry import PluginRegistry
from chat_agent.agent.weather import WeatherReport
from chat_agent.config import PluginConfig
from chat_agent.errors import InvalidExpressionError, LocationNotFoundError


class _FakeWeather:
    def __init__(self, report: WeatherReport | None = None, error: Exception | None = None) -> None:
        self.report = report
        self.error = error
        self.locations: list[str] = []

    def lookup(self, location: str) -> WeatherReport:
        self.locations.append(location)
        if self.error is not None:
            raise self.error
        assert self.report is not None
        return self.report


def test_math_plugin_end_to_end_from_message() -> None:
    plugin = MathPlugin()

    params = plugin.extract_params("What is 12 + 7?")
    result = plugin.execute(params)

    assert params == {"expression": "12 + 7"}
    assert result.success is True
    assert result.data == {"expression": "12 + 7", "result": 19, "steps": "Evaluated: 12 + 7 = 19"}
    assert result.error is None


def test_math_plugin_rejects_expression_that_cleans_to_nothing() -> None:
    result = MathPlugin().execute({"expression": "???"})

    assert result.success is False
    assert result.error
    assert result.data is None


def test_math_plugin_strips_words_and_honors_precedence() -> None:
    result = MathPlugin().execute({"expression": "2 + 3 * 4 apples"})

    assert result.success is True
    assert result.data["expression"] == "2 + 3 * 4"
    assert result.data["result"] == 14


def test_math_plugin_without_operator_has_no_steps() -> None:
    result = MathPlugin().execute({"expression": "42"})

    assert result.data == {"expression": "42", "result": 42, "steps": ""}


def test_math_plugin_division_and_errors() -> None:
    assert MathPlugin().execute({"expression": "10 / 4"}).data["result"] == 2.5
    assert MathPlugin().execute({"expression": "10 / 2"}).data["result"] == 5

    by_zero = MathPlugin().execute({"expression": "1 / 0"})
    assert by_zero.success is False
    assert "Failed to evaluate expression" in by_zero.error

    unbalanced = MathPlugin().execute({"expression": "(1 + 2"})
    assert unbalanced.success is False


def test_math_plugin_requires_expression() -> None:
    result = MathPlugin().execute({})

    assert result.success is False
    assert "expression" in result.error


def test_evaluate_expression_handles_unary_and_leading_zeros() -> None:
    assert evaluate_expression("-(3 - 5) * 2") == 4
    assert evaluate_expression("007 + 1.05") == pytest.approx(8.05)


def test_weather_plugin_formats_report() -> None:
    lookup = _FakeWeather(
        WeatherReport(temperature_c=21.5, condition="Sunny", humidity=40, wind_kph=11.0, location="Paris")
    )
    plugin = WeatherPlugin(lookup)

    result = plugin.execute({"location": "paris"})

    assert lookup.locations == ["paris"]
    assert result.success is True
    assert result.data == {
        "temperature": "22°C",
        "condition": "Sunny",
        "humidity": "40%",
        "wind": "11 km/h",
        "location": "Paris",
    }


def test_weather_plugin_location_not_found() -> None:
    plugin = WeatherPlugin(_FakeWeather(error=LocationNotFoundError("Atlantis")))

    result = plugin.execute({"location": "Atlantis"})

    assert result.success is False
    assert result.error == "Location not found: Atlantis"


def test_weather_plugin_transport_failure_is_captured() -> None:
    plugin = WeatherPlugin(_FakeWeather(error=httpx.ConnectError("boom")))

    result = plugin.execute({"location": "Paris"})

    assert result.success is False
    assert result.error.startswith("Failed to get weather data")


def test_weather_plugin_without_location_fails_cleanly() -> None:
    lookup = _FakeWeather()

    result = WeatherPlugin(lookup).execute({})

    assert result.success is False
    assert "location" in result.error
    assert lookup.locations == []


def test_register_builtin_plugins_honors_enable_flags() -> None:
    registry = PluginRegistry()
    register_builtin_plugins(
        registry,
        weather_lookup=_FakeWeather(),
        config=PluginConfig(weather_enabled=False, math_enabled=True),
    )
    assert [p.name for p in registry.plugins()] == ["math"]

    registry = PluginRegistry()
    register_builtin_plugins(registry, weather_lookup=_FakeWeather())
    assert [p.name for p in registry.plugins()] == ["weather", "math"]

    registry = PluginRegistry()
    register_builtin_plugins(registry)
    assert [p.name for p in registry.plugins()] == ["math"]


def test_evaluate_expression_uses_float_arithmetic() -> None:
    assert evaluate_expression("0.1 + 0.2") == pytest.approx(0.3)
    assert evaluate_expression("4 / 2") == 2
    assert isinstance(evaluate_expression("(10 * 10) * 10"), int)


def test_evaluate_expression_rejects_overflowing_results() -> None:
    with pytest.raises(InvalidExpressionError, match="not finite"):
        evaluate_expression(" * ".join(["(" + "9" * 200 + ")"] * 3))
