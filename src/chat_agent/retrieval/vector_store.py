"""Vector store interface and the in-process document store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any, Protocol

from chat_agent.errors import EmbeddingError
from chat_agent.ingest.embedder import Embedder
from chat_agent.retrieval.similarity import top_k_similar
from chat_agent.types import DocumentChunk, EmbeddedChunk, SearchResult

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    """Minimal document store contract used by the orchestrator."""

    def add_documents(self, chunks: Sequence[DocumentChunk]) -> int:
        """Embed and store chunks, returning how many were stored."""

    def search(self, query: str, top_k: int, threshold: float) -> list[SearchResult]:
        """Return stored chunks similar to `query`, best first."""

    def clear(self) -> None:
        """Drop every stored chunk."""

    def stats(self) -> dict[str, Any]:
        """Return `{"count", "name"}`."""


class InMemoryDocumentStore:
    """Embedded chunks held in a Python list for the lifetime of the process.

    Appends keep insertion order, which is what breaks similarity ties during
    search. A lock serializes appends, clears and search snapshots; the
    embedder is never called while the lock is held.
    """

    name = "in_memory_vector_db"

    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder
        self._documents: list[EmbeddedChunk] = []
        self._dimension: int | None = None
        self._lock = threading.Lock()

    def add_documents(self, chunks: Sequence[DocumentChunk]) -> int:
        if not chunks:
            return 0
        logger.info("Adding %d document chunks to vector database", len(chunks))

        embedded: list[EmbeddedChunk] = []
        failed = 0
        for chunk in chunks:
            try:
                embedding = self._embedder.embed(chunk.content)
            except EmbeddingError as exc:
                failed += 1
                logger.warning("Skipping chunk %s: %s", chunk.chunk_id, exc)
                continue
            embedded.append(EmbeddedChunk(chunk=chunk, embedding=list(embedding)))

        stored = 0
        with self._lock:
            for item in embedded:
                if self._dimension is None:
                    self._dimension = len(item.embedding)
                if len(item.embedding) != self._dimension:
                    failed += 1
                    logger.warning(
                        "Skipping chunk %s: embedding dimension %d != store dimension %d",
                        item.chunk.chunk_id,
                        len(item.embedding),
                        self._dimension,
                    )
                    continue
                self._documents.append(item)
                stored += 1

        if failed:
            logger.warning(
                "Failed to embed %d of %d chunks (%.1f%%)",
                failed,
                len(chunks),
                100.0 * failed / len(chunks),
            )
        logger.info("Stored %d chunks in vector database", stored)
        return stored

    def search(self, query: str, top_k: int = 3, threshold: float = 0.7) -> list[SearchResult]:
        with self._lock:
            snapshot = list(self._documents)
        if not snapshot:
            return []

        query_embedding = self._embedder.embed(query)
        ranked = top_k_similar(
            query_embedding,
            ((item.chunk.chunk_id, item.embedding, item.chunk) for item in snapshot),
            top_k,
        )
        results = [
            SearchResult(
                chunk_id=hit.id,
                content=hit.payload.content,
                source=hit.payload.source,
                similarity=hit.similarity,
                metadata=dict(hit.payload.metadata),
            )
            for hit in ranked
            if hit.similarity >= threshold
        ]
        logger.info("Found %d relevant documents for query", len(results))
        return results

    def clear(self) -> None:
        with self._lock:
            self._documents = []
            self._dimension = None
        logger.info("Cleared vector database")

    def stats(self) -> dict[str, Any]:
        with self._lock:
            count = len(self._documents)
        return {"count": count, "name": self.name}

    def documents(self) -> list[DocumentChunk]:
        """Stored chunks without their embeddings, in insertion order."""
        with self._lock:
            return [item.chunk for item in self._documents]
