"""Built-in plugin implementations: weather lookup and arithmetic."""

from __future__ import annotations

import ast
import logging
import math
import operator
import re
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from chat_agent.agent.extractors import extract_location, extract_math_expression
from chat_agent.agent.registry import Plugin, PluginRegistry
from chat_agent.agent.weather import WeatherLookup
from chat_agent.config import PluginConfig
from chat_agent.errors import InvalidExpressionError, LocationNotFoundError
from chat_agent.types import PluginResult

logger = logging.getLogger(__name__)

WEATHER_PLUGIN = "weather"
MATH_PLUGIN = "math"

_NON_MATH_CHARS = re.compile(r"[^\d+\-*/().\s]")
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")
_OPERATORS = ("+", "-", "*", "/")

_BINARY_OPS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class WeatherParams(BaseModel):
    location: str = Field(min_length=1)


class MathParams(BaseModel):
    expression: str


class WeatherPlugin(Plugin):
    name: ClassVar[str] = WEATHER_PLUGIN
    description: ClassVar[str] = "Get current weather information for a location"
    keywords: ClassVar[tuple[str, ...]] = (
        "weather",
        "temperature",
        "forecast",
        "climate",
        "hot",
        "cold",
        "rain",
        "sunny",
    )
    params_schema: ClassVar[type[BaseModel]] = WeatherParams

    def __init__(self, lookup: WeatherLookup) -> None:
        self._lookup = lookup

    def extract_params(self, message: str) -> dict[str, Any]:
        location = extract_location(message)
        return {"location": location} if location else {}

    def run(self, params: WeatherParams) -> PluginResult:  # type: ignore[override]
        try:
            report = self._lookup.lookup(params.location)
        except LocationNotFoundError as exc:
            return PluginResult.failure(str(exc))
        except Exception as exc:
            logger.error("Weather plugin error: %s", exc)
            return PluginResult.failure(f"Failed to get weather data: {exc}")

        return PluginResult.ok(
            {
                "temperature": f"{_round_half_up(report.temperature_c)}°C",
                "condition": report.condition,
                "humidity": f"{report.humidity}%",
                "wind": f"{_format_number(report.wind_kph)} km/h",
                "location": report.location,
            }
        )


class MathPlugin(Plugin):
    name: ClassVar[str] = MATH_PLUGIN
    description: ClassVar[str] = "Evaluate mathematical expressions"
    keywords: ClassVar[tuple[str, ...]] = (
        "calculate",
        "solve",
        "math",
        "compute",
        "add",
        "subtract",
        "multiply",
        "divide",
        "+",
        "-",
        "*",
        "/",
        "=",
        "equation",
    )
    params_schema: ClassVar[type[BaseModel]] = MathParams

    def extract_params(self, message: str) -> dict[str, Any]:
        expression = extract_math_expression(message)
        return {"expression": expression} if expression else {}

    def run(self, params: MathParams) -> PluginResult:  # type: ignore[override]
        try:
            expression = clean_expression(params.expression)
        except InvalidExpressionError as exc:
            return PluginResult.failure(str(exc))

        try:
            result = evaluate_expression(expression)
        except (InvalidExpressionError, ArithmeticError) as exc:
            logger.error("Math plugin error: %s", exc)
            return PluginResult.failure(f"Failed to evaluate expression: {exc}")

        steps = ""
        if any(op in expression for op in _OPERATORS):
            steps = f"Evaluated: {expression} = {result}"
        return PluginResult.ok({"expression": expression, "result": result, "steps": steps})


def clean_expression(expression: str) -> str:
    """Drop everything but digits, whitespace, parentheses, `.` and `+-*/`."""

    cleaned = _NON_MATH_CHARS.sub("", expression).strip()
    if not cleaned:
        raise InvalidExpressionError("Invalid mathematical expression")
    return cleaned


def evaluate_expression(expression: str) -> int | float:
    """Evaluate an arithmetic expression with the usual operator precedence.

    Only numeric literals, `+ - * /` and unary signs are accepted. Arithmetic
    runs on floats, so oversized operands overflow instead of growing without
    bound; integral results come back as `int`.
    """

    try:
        tree = ast.parse(_LEADING_ZEROS.sub("", expression), mode="eval")
    except (SyntaxError, ValueError) as exc:
        raise InvalidExpressionError(f"Cannot parse expression: {expression}") from exc
    value = _evaluate_node(tree.body)
    if not math.isfinite(value):
        raise InvalidExpressionError("Expression result is not finite")
    if value.is_integer():
        return int(value)
    return value


def _evaluate_node(node: ast.AST) -> float:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        try:
            return float(node.value)
        except OverflowError:
            return math.inf
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_evaluate_node(node.left), _evaluate_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate_node(node.operand))
    raise InvalidExpressionError(f"Unsupported expression element: {type(node).__name__}")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def register_builtin_plugins(
    registry: PluginRegistry,
    *,
    weather_lookup: WeatherLookup | None = None,
    config: PluginConfig | None = None,
) -> None:
    """Register the default plugin set, honoring the enable flags.

    The weather plugin also needs a lookup collaborator; without one it is
    left out even when enabled.
    """

    config = config or PluginConfig()
    if config.weather_enabled:
        if weather_lookup is None:
            logger.warning("Weather plugin enabled but no weather lookup configured")
        else:
            registry.register(WeatherPlugin(weather_lookup))
    if config.math_enabled:
        registry.register(MathPlugin())
