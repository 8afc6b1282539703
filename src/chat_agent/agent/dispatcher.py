"""Keyword intent detection and plugin dispatch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from chat_agent.agent.plugins import MATH_PLUGIN, WEATHER_PLUGIN
from chat_agent.agent.registry import PluginRegistry
from chat_agent.types import IntentDetection, IntentType, PluginResult, PluginTrace

logger = logging.getLogger(__name__)

TRIGGERED_CONFIDENCE = 0.8
UNTRIGGERED_CONFIDENCE = 0.1


class PluginDispatcher:
    """Classifies messages against the registry and runs the selected plugins."""

    def __init__(self, registry: PluginRegistry) -> None:
        self.registry = registry

    def detect_intent(self, message: str) -> IntentDetection:
        """Match every plugin's keywords against the message.

        Triggered plugins are listed in registration order and each one's
        extractor contributes to `extracted_params`. When several plugins fire
        the intent type follows a fixed precedence: weather, then math, then
        any other plugin.
        """

        triggered: list[str] = []
        extracted: dict[str, Any] = {}
        for plugin in self.registry.plugins():
            if not plugin.matches(message):
                continue
            triggered.append(plugin.name)
            extracted.update(plugin.extract_params(message))

        return IntentDetection(
            type=_intent_type(triggered),
            plugins=triggered,
            confidence=TRIGGERED_CONFIDENCE if triggered else UNTRIGGERED_CONFIDENCE,
            extracted_params=extracted,
        )

    def execute_plugins(
        self,
        intent: IntentDetection,
        *,
        observer: Callable[[PluginTrace], None] | None = None,
    ) -> list[PluginResult]:
        results: list[PluginResult] = []
        for name in intent.plugins:
            plugin = self.registry.get(name)
            if plugin is None:
                continue
            params = plugin.select_params(intent.extracted_params)
            try:
                result = self.registry.execute(name, params, observer=observer)
            except Exception as exc:
                logger.error("Error executing plugin %s: %s", name, exc)
                result = PluginResult.failure(f"Plugin execution failed: {exc}")
            results.append(result)
        return results


def _intent_type(triggered: list[str]) -> IntentType:
    if WEATHER_PLUGIN in triggered:
        return "weather_query"
    if MATH_PLUGIN in triggered:
        return "math_query"
    if triggered:
        return "plugin_request"
    return "general_knowledge"
