"""Per-message orchestration: memory, intent, plugins, retrieval, generation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from chat_agent.agent.dispatcher import PluginDispatcher
from chat_agent.agent.llm import Generator
from chat_agent.agent.prompt import DEFAULT_SYSTEM_INSTRUCTIONS, build_prompt
from chat_agent.config import AgentConfig
from chat_agent.memory.session_store import SessionMemoryStore
from chat_agent.obs.tracing import Timer, estimate_token_count
from chat_agent.retrieval.vector_store import DocumentStore
from chat_agent.types import AgentMessage, AgentResponse, IntentDetection, PluginTrace, PromptContext

logger = logging.getLogger(__name__)

APOLOGY_PREFIX = "I apologize, but I encountered an error while processing your message"


class Orchestrator:
    """Sequences one request through the agent pipeline.

    Stages run strictly in order:

    1. read session memory and its two-turn summary;
    2. detect intent from the raw message;
    3. execute the plugins the intent selected;
    4. search the document store, but only when no plugin fired or the
       intent is general knowledge;
    5. assemble the prompt;
    6. generate the answer;
    7. append the user message, then the answer, to session memory.

    The orchestrator owns no state of its own. A failure in any stage is never
    raised to the caller: it comes back as an `AgentResponse` with
    `outcome="degraded"`, an apology in `response` and nothing written to
    memory.
    """

    def __init__(
        self,
        *,
        memory: SessionMemoryStore,
        document_store: DocumentStore,
        dispatcher: PluginDispatcher,
        generator: Generator,
        config: AgentConfig | None = None,
        system_instructions: str = DEFAULT_SYSTEM_INSTRUCTIONS,
    ) -> None:
        self.memory = memory
        self.document_store = document_store
        self.dispatcher = dispatcher
        self.generator = generator
        self.config = config or AgentConfig()
        self.system_instructions = system_instructions

    def process_message(self, message: AgentMessage) -> AgentResponse:
        logger.info("Processing message for session: %s", message.session_id)
        traces: list[PluginTrace] = []
        try:
            with Timer() as timer:
                response = self._run_pipeline(message, traces)
        except Exception as exc:
            logger.exception("Error processing message for session %s", message.session_id)
            return self._degraded(message, exc)

        for trace in traces:
            logger.info(
                "Plugin %s success=%s latency_ms=%.1f", trace.name, trace.success, trace.latency_ms
            )
        logger.info("Message processed successfully in %.0fms", timer.elapsed_ms)
        return response

    def _run_pipeline(self, message: AgentMessage, traces: list[PluginTrace]) -> AgentResponse:
        memory = self.memory.get_session(message.session_id)
        summary = self.memory.create_memory_summary(message.session_id) if memory else None

        intent = self.dispatcher.detect_intent(message.message)
        logger.info(
            "Detected intent %s plugins=%s confidence=%.1f",
            intent.type,
            intent.plugins,
            intent.confidence,
        )
        plugin_results = self.dispatcher.execute_plugins(intent, observer=traces.append)

        context_chunks: list[str] = []
        if should_retrieve(intent):
            hits = self.document_store.search(
                message.message,
                self.config.retrieval.top_k,
                self.config.retrieval.similarity_threshold,
            )
            context_chunks = [hit.content for hit in hits]

        prompt = build_prompt(
            PromptContext(
                system_instructions=self.system_instructions,
                memory=memory,
                context=context_chunks,
                plugins=plugin_results,
                user_message=message.message,
                memory_summary=summary,
            )
        )
        logger.debug("Prompt assembled (~%d tokens)", estimate_token_count(prompt))

        answer = self.generator.generate(prompt)

        self.memory.add_message(message.session_id, "user", message.message)
        self.memory.add_message(message.session_id, "assistant", answer)

        return AgentResponse(
            response=answer,
            session_id=message.session_id,
            context_used=context_chunks,
            plugins_called=list(intent.plugins),
            timestamp=_timestamp(),
            outcome="generated",
        )

    def _degraded(self, message: AgentMessage, exc: Exception) -> AgentResponse:
        return AgentResponse(
            response=f"{APOLOGY_PREFIX}: {exc}",
            session_id=message.session_id,
            context_used=[],
            plugins_called=[],
            timestamp=_timestamp(),
            outcome="degraded",
            error=str(exc),
        )

    def get_stats(self) -> dict[str, Any]:
        return {
            "vector_db": self.document_store.stats(),
            "memory": self.memory.stats(),
            "plugins": [
                {"name": plugin.name, "description": plugin.description}
                for plugin in self.dispatcher.registry.plugins()
            ],
        }

    def clear_all_data(self) -> None:
        """Drop every stored document and session."""
        self.document_store.clear()
        self.memory.clear_all_sessions()
        logger.info("All agent data cleared")


def should_retrieve(intent: IntentDetection) -> bool:
    """Retrieval runs only when no plugin already answers the request."""
    return not intent.plugins or intent.type == "general_knowledge"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()
