"""End-to-end ingest pipeline: parse -> chunk -> embed + store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from chat_agent.ingest.chunker import TextChunker
from chat_agent.ingest.parser import ParserRegistry
from chat_agent.retrieval.vector_store import DocumentStore
from chat_agent.types import DocumentChunk

logger = logging.getLogger(__name__)


class IngestPipeline:
    """Coordinates parser/chunker/document store stages.

    The store owns embedding, so this class only turns files into chunks and
    hands them over. Directory ingestion keeps going past files that fail to
    parse.
    """

    def __init__(
        self,
        parser_registry: ParserRegistry,
        chunker: TextChunker,
        document_store: DocumentStore,
    ) -> None:
        self._parser_registry = parser_registry
        self._chunker = chunker
        self._document_store = document_store

    def ingest_path(
        self,
        path: str | Path,
        *,
        doc_id: str | None = None,
        extra_metadata: dict[str, Any] | None = None,
    ) -> list[DocumentChunk]:
        """Ingest a single file, or every supported file of a directory."""

        source = Path(path)
        if source.is_dir():
            return self.ingest_directory(source)

        parsed = self._parser_registry.parse_path(source, doc_id=doc_id)
        if extra_metadata:
            parsed.metadata.update(extra_metadata)

        chunks = self._chunker.chunk_document(parsed)
        self._document_store.add_documents(chunks)
        logger.info("Processed %s: %d chunks", source, len(chunks))
        return chunks

    def ingest_directory(self, directory: str | Path) -> list[DocumentChunk]:
        root = Path(directory)
        files = sorted(p for p in root.iterdir() if p.is_file() and self._parser_registry.supports(p))
        if not files:
            logger.warning("No supported documents found in %s", root)
            return []

        logger.info("Found %d files to process in %s", len(files), root)
        all_chunks: list[DocumentChunk] = []
        for file_path in files:
            try:
                all_chunks.extend(self.ingest_path(file_path))
            except (OSError, UnicodeDecodeError, ValueError) as exc:
                logger.error("Failed to process %s: %s", file_path, exc)
        return all_chunks
