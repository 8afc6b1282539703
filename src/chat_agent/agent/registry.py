"""Plugin interface and registry built on Pydantic v2 models."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from chat_agent.obs.tracing import Timer
from chat_agent.types import PluginResult, PluginTrace

logger = logging.getLogger(__name__)


class Plugin(ABC):
    """A statically registered capability triggered by keywords.

    Subclasses declare `name`, `description`, `keywords` and a pydantic
    `params_schema`, and implement `extract_params` and `run`. `execute` never
    raises: validation errors and anything `run` throws end up in
    `PluginResult.error`.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    keywords: ClassVar[tuple[str, ...]]
    params_schema: ClassVar[type[BaseModel]]

    def matches(self, message: str) -> bool:
        lowered = message.lower()
        return any(keyword.lower() in lowered for keyword in self.keywords)

    @abstractmethod
    def extract_params(self, message: str) -> dict[str, Any]:
        """Pull this plugin's parameters out of raw message text."""

    @abstractmethod
    def run(self, params: BaseModel) -> PluginResult:
        """Execute with validated parameters."""

    def select_params(self, extracted: dict[str, Any]) -> dict[str, Any]:
        """Keep only the extracted values this plugin's schema declares."""
        fields = self.params_schema.model_fields
        return {key: value for key, value in extracted.items() if key in fields}

    def execute(self, params: dict[str, Any]) -> PluginResult:
        try:
            data = self.params_schema.model_validate(params)
        except ValidationError as exc:
            missing = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            return PluginResult.failure(
                f"Invalid parameters for {self.name}: {missing or exc.error_count()}"
            )
        try:
            return self.run(data)
        except Exception as exc:
            logger.error("%s plugin error: %s", self.name, exc)
            return PluginResult.failure(f"Plugin execution failed: {exc}")


class PluginRegistry:
    """Maps plugin names to implementations, in registration order."""

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}

    def register(self, plugin: Plugin) -> None:
        if plugin.name in self._plugins:
            raise ValueError(f"Plugin already registered: {plugin.name}")
        self._plugins[plugin.name] = plugin
        logger.info("Registered plugin: %s", plugin.name)

    def get(self, name: str) -> Plugin | None:
        return self._plugins.get(name)

    def plugins(self) -> list[Plugin]:
        return list(self._plugins.values())

    def execute(
        self,
        name: str,
        params: dict[str, Any],
        *,
        observer: Callable[[PluginTrace], None] | None = None,
    ) -> PluginResult:
        """Run a plugin and hand its trace to `observer`, if one is given."""
        plugin = self._plugins.get(name)
        if plugin is None:
            raise KeyError(f"Unknown plugin: {name}")

        with Timer() as timer:
            result = plugin.execute(params)

        trace = PluginTrace(
            name=plugin.name,
            params=params,
            success=result.success,
            latency_ms=timer.elapsed_ms,
        )
        if observer is not None:
            observer(trace)
        return result
