"""Error taxonomy for the agent core.

Component-local failures (plugins, single chunk embeddings) are captured where
they happen; `EmbeddingError` and `GenerationError` surface to the orchestrator,
which turns them into a degraded response instead of propagating.
"""

from __future__ import annotations


class AgentError(Exception):
    """Base class for all agent errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DimensionMismatchError(AgentError, ValueError):
    """Raised when two embedding vectors of different length are compared."""

    def __init__(self, left: int, right: int) -> None:
        self.left = left
        self.right = right
        super().__init__(f"Vectors must have the same length (got {left} and {right})")


class EmbeddingError(AgentError):
    """Raised when the embedding provider returns no vector."""


class GenerationError(AgentError):
    """Raised when the language model returns no content."""


class PluginExecutionError(AgentError):
    """Raised inside a plugin; always captured into a failed PluginResult."""


class LocationNotFoundError(PluginExecutionError):
    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Location not found: {location}")


class InvalidExpressionError(PluginExecutionError, ValueError):
    """Raised when a math expression is empty or unparsable after cleaning."""
