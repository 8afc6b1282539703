"""Generation collaborator backed by a LangChain chat model."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any

from langchain_core.messages import SystemMessage

from chat_agent.config import LLMConfig
from chat_agent.errors import GenerationError

logger = logging.getLogger(__name__)


class Generator(ABC):
    """Turns an assembled prompt into the assistant's answer."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return generated text; raise `GenerationError` when there is none."""


class LangChainGenerator(Generator):
    """Sends the whole prompt as a single system message to a chat model."""

    def __init__(self, llm: Any) -> None:
        self.llm = llm

    def generate(self, prompt: str) -> str:
        logger.info("Generating LLM response...")
        try:
            message = self.llm.invoke([SystemMessage(content=prompt)])
        except Exception as exc:
            logger.error("Error generating LLM response: %s", exc)
            raise GenerationError(f"Failed to generate response: {exc}") from exc

        content = _message_text(message)
        if not content:
            raise GenerationError("No response generated from the language model")
        logger.info("LLM response generated successfully")
        return content


def create_chat_model(config: LLMConfig | None = None) -> Any:
    """Build a `ChatOpenAI` model, or return None when no API key is set."""

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return None

    from langchain_openai import ChatOpenAI

    config = config or LLMConfig()
    return ChatOpenAI(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )


def _message_text(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts: list[str] = []
        for item in content:
            if isinstance(item, dict) and "text" in item:
                parts.append(str(item["text"]))
            else:
                parts.append(str(item))
        return " ".join(parts).strip()
    return str(content or "").strip()
