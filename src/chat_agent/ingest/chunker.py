"""Character-window chunking with sentence-boundary snapping."""

from __future__ import annotations

from chat_agent.config import ChunkingConfig
from chat_agent.types import DocumentChunk, ParsedDocument

# A window is cut at its last "." or newline only if that boundary lies past
# this fraction of the window; otherwise it is cut hard and overlapped.
_BOUNDARY_MIN_FRACTION = 0.7


class TextChunker:
    """Splits documents into overlapping character windows.

    Each window spans at most `chunk_size` characters. When a window ends
    mid-text, the chunker looks back for the last sentence end or newline; if
    one exists in the final 30% of the window the chunk ends there and the next
    window starts right after it. Otherwise the window is cut at `chunk_size`
    and the next one starts `chunk_overlap` characters earlier, so text spanning
    the cut stays retrievable from both sides.
    """

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        self.config = config or ChunkingConfig()

    def chunk_text(self, text: str) -> list[str]:
        size = self.config.chunk_size
        overlap = self.config.chunk_overlap
        chunks: list[str] = []
        start = 0

        while start < len(text):
            end = min(start + size, len(text))
            window = text[start:end]

            if end < len(text):
                boundary = max(window.rfind("."), window.rfind("\n"))
                if boundary > size * _BOUNDARY_MIN_FRACTION:
                    window = window[: boundary + 1]
                    start += boundary + 1
                else:
                    start = end - overlap
            else:
                start = end

            window = window.strip()
            if window:
                chunks.append(window)

        return chunks

    def chunk_document(self, document: ParsedDocument) -> list[DocumentChunk]:
        pieces = self.chunk_text(document.text)
        source = str(document.metadata.get("source", document.doc_id))
        return [
            DocumentChunk(
                chunk_id=f"{document.doc_id}_chunk_{index}",
                content=piece,
                source=source,
                metadata={
                    **document.metadata,
                    "chunk_index": index,
                    "total_chunks": len(pieces),
                    "chunk_size": len(piece),
                },
            )
            for index, piece in enumerate(pieces)
        ]
