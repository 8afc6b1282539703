"""FastAPI entrypoint for message/stats/clear/health/ingest endpoints."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from chat_agent.agent.dispatcher import PluginDispatcher
from chat_agent.agent.fallback import DeterministicGenerator
from chat_agent.agent.llm import Generator, LangChainGenerator, create_chat_model
from chat_agent.agent.orchestrator import Orchestrator
from chat_agent.agent.plugins import register_builtin_plugins
from chat_agent.agent.registry import PluginRegistry
from chat_agent.agent.weather import WeatherAPIClient
from chat_agent.config import AgentConfig, load_config_from_env
from chat_agent.ingest.chunker import TextChunker
from chat_agent.ingest.embedder import Embedder, HashingEmbedder, OpenAIEmbedder
from chat_agent.ingest.parser import ParserRegistry
from chat_agent.ingest.pipeline import IngestPipeline
from chat_agent.memory.session_store import SessionMemoryStore
from chat_agent.obs.logging import setup_logging
from chat_agent.retrieval.vector_store import InMemoryDocumentStore
from chat_agent.types import AgentMessage

logger = logging.getLogger(__name__)


class MessageRequest(BaseModel):
    message: str = Field(min_length=1)
    session_id: str = Field(min_length=1)


class IngestRequest(BaseModel):
    path: str
    doc_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


def _create_embedder(config: AgentConfig) -> Embedder:
    if not os.getenv("OPENAI_API_KEY"):
        return HashingEmbedder()
    return OpenAIEmbedder(model=config.llm.embedding_model)


def _create_generator(config: AgentConfig) -> Generator:
    llm = create_chat_model(config.llm)
    if llm is None:
        return DeterministicGenerator()
    return LangChainGenerator(llm)


def _envelope(data: Any) -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


_config = load_config_from_env()
setup_logging(_config.log_level)

_document_store = InMemoryDocumentStore(_create_embedder(_config))
_memory = SessionMemoryStore(_config.memory)
_registry = PluginRegistry()
register_builtin_plugins(
    _registry,
    weather_lookup=WeatherAPIClient(_config.weather),
    config=_config.plugins,
)
_generator = _create_generator(_config)
_orchestrator = Orchestrator(
    memory=_memory,
    document_store=_document_store,
    dispatcher=PluginDispatcher(_registry),
    generator=_generator,
    config=_config,
)
_ingest_pipeline = IngestPipeline(ParserRegistry(), TextChunker(_config.chunking), _document_store)

app = FastAPI(title="Conversational Agent", version="0.1.0")


@app.post("/agent/message")
def agent_message(request: MessageRequest) -> dict[str, Any]:
    logger.info("Received message request for session: %s", request.session_id)
    response = _orchestrator.process_message(
        AgentMessage(message=request.message, session_id=request.session_id)
    )
    return _envelope(asdict(response))


@app.get("/agent/stats")
def agent_stats() -> dict[str, Any]:
    return _envelope(_orchestrator.get_stats())


@app.post("/agent/clear")
def agent_clear() -> dict[str, Any]:
    _orchestrator.clear_all_data()
    return _envelope({"message": "All agent data cleared successfully"})


@app.get("/agent/health")
def agent_health() -> dict[str, Any]:
    return _envelope(
        {
            "status": "healthy",
            "llm_configured": not isinstance(_generator, DeterministicGenerator),
            "generator": type(_generator).__name__,
        }
    )


@app.post("/ingest")
def ingest(request: IngestRequest) -> dict[str, Any]:
    try:
        chunks = _ingest_pipeline.ingest_path(
            request.path,
            doc_id=request.doc_id,
            extra_metadata=request.metadata,
        )
    except (OSError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "chunks_created": len(chunks),
        "chunk_ids": [chunk.chunk_id for chunk in chunks],
    }
