"""Embedding abstractions, a deterministic baseline and an OpenAI adapter."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from hashlib import blake2b
from math import sqrt
from typing import Any

from chat_agent.errors import EmbeddingError

logger = logging.getLogger(__name__)


class Embedder(ABC):
    """Embedder interface used by the document store.

    Implementations must return vectors of the same length on every call and
    raise `EmbeddingError` when no vector can be produced.
    """

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Embed one text."""


class HashingEmbedder(Embedder):
    """Deterministic sparse-like embedding without external model calls.

    Used for offline runs and tests. Texts sharing words land close together,
    which is enough for keyword-level retrieval over a handful of documents.
    """

    def __init__(self, dimension: int = 256) -> None:
        self.dimension = dimension

    def embed(self, text: str) -> list[float]:
        vector = [0.0 for _ in range(self.dimension)]
        tokens = text.lower().split()
        if not tokens:
            return vector

        for token in tokens:
            digest = blake2b(token.encode("utf-8"), digest_size=8).digest()
            idx = int.from_bytes(digest[:4], "little") % self.dimension
            sign = -1.0 if digest[4] % 2 else 1.0
            vector[idx] += sign

        norm = sqrt(sum(value * value for value in vector))
        if norm == 0:
            return vector
        return [value / norm for value in vector]


class OpenAIEmbedder(Embedder):
    """Embeddings from the OpenAI API through LangChain."""

    def __init__(self, model: str = "text-embedding-ada-002", client: Any | None = None) -> None:
        if client is None:
            from langchain_openai import OpenAIEmbeddings

            client = OpenAIEmbeddings(model=model)
        self._client = client

    def embed(self, text: str) -> list[float]:
        try:
            vector = self._client.embed_query(text)
        except Exception as exc:
            logger.error("Error generating embedding: %s", exc)
            raise EmbeddingError(f"Failed to generate embedding: {exc}") from exc
        if not vector:
            raise EmbeddingError("No embedding generated")
        return [float(value) for value in vector]
