"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

Role = Literal["user", "assistant"]
IntentType = Literal["general_knowledge", "weather_query", "math_query", "plugin_request"]
ResponseOutcome = Literal["generated", "degraded"]

_ROLES = ("user", "assistant")


@dataclass(slots=True, frozen=True)
class AgentMessage:
    """An incoming user message bound to a conversation session."""

    message: str
    session_id: str


@dataclass(slots=True, frozen=True)
class MemoryEntry:
    """One conversation turn kept in session memory."""

    role: Role
    content: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"Unsupported memory role: {self.role!r}")


@dataclass(slots=True)
class SessionMemory:
    session_id: str
    messages: list[MemoryEntry]
    last_updated: datetime


@dataclass(slots=True)
class ParsedDocument:
    """A parsed source document before chunking."""

    doc_id: str
    text: str
    metadata: dict[str, Any]


@dataclass(slots=True, frozen=True)
class DocumentChunk:
    """A chunked section of a source document."""

    chunk_id: str
    content: str
    source: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class EmbeddedChunk:
    chunk: DocumentChunk
    embedding: list[float]


@dataclass(slots=True)
class SearchResult:
    """A retrieval hit with its cosine similarity to the query."""

    chunk_id: str
    content: str
    source: str
    similarity: float
    metadata: dict[str, Any]


@dataclass(slots=True)
class RankedItem:
    id: str
    similarity: float
    payload: Any


@dataclass(slots=True)
class IntentDetection:
    """Classified purpose of a message and the plugins it selected."""

    type: IntentType
    plugins: list[str]
    confidence: float
    extracted_params: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PluginResult:
    """Outcome of one plugin execution.

    `data` is meaningful only when `success` is true, `error` only when it is
    false. Use `ok` / `failure` rather than building instances by hand.
    """

    success: bool
    data: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: dict[str, Any]) -> "PluginResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str) -> "PluginResult":
        return cls(success=False, error=error)


@dataclass(slots=True)
class PluginTrace:
    """Trace record for an executed plugin call."""

    name: str
    params: dict[str, Any]
    success: bool
    latency_ms: float


@dataclass(slots=True)
class PromptContext:
    """Everything the prompt builder needs for a single request."""

    system_instructions: str
    memory: list[MemoryEntry]
    context: list[str]
    plugins: list[PluginResult]
    user_message: str
    memory_summary: str | None = None


@dataclass(slots=True)
class AgentResponse:
    """Structured answer returned by the orchestrator.

    `outcome` is `"generated"` when the language model produced the answer and
    `"degraded"` when the pipeline failed and `response` holds an apology; in
    the degraded case `error` carries the failure detail.
    """

    response: str
    session_id: str
    context_used: list[str]
    plugins_called: list[str]
    timestamp: str
    outcome: ResponseOutcome = "generated"
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.outcome == "degraded"
