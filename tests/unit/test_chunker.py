from chat_agent.config import ChunkingConfig
from chat_agent.ingest.chunker import TextChunker
from chat_agent.ingest.parser import remove_frontmatter
from chat_agent.types import ParsedDocument


def test_short_text_is_a_single_chunk() -> None:
    chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=20))

    assert chunker.chunk_text("  Markdown is a lightweight markup language.  ") == [
        "Markdown is a lightweight markup language."
    ]
    assert chunker.chunk_text("   ") == []


def test_chunks_snap_to_sentence_boundaries() -> None:
    sentence = "Markdown keeps writing simple. "
    text = sentence * 10
    chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=20))

    chunks = chunker.chunk_text(text)

    assert len(chunks) >= 3
    assert all(len(chunk) <= 100 for chunk in chunks)
    assert all(chunk.endswith(".") for chunk in chunks)


def test_hard_cut_windows_overlap() -> None:
    text = "".join(chr(ord("a") + i % 26) for i in range(250))
    chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=20))

    chunks = chunker.chunk_text(text)

    assert chunks[0] == text[:100]
    assert chunks[1] == text[80:180]
    assert chunks[0][-20:] == chunks[1][:20]
    assert chunks[-1].endswith(text[-10:])


def test_chunk_document_ids_and_metadata() -> None:
    chunker = TextChunker(ChunkingConfig(chunk_size=100, chunk_overlap=20))
    document = ParsedDocument(
        doc_id="guide", text="Headings use hashes. " * 12, metadata={"source": "guide"}
    )

    chunks = chunker.chunk_document(document)

    assert [c.chunk_id for c in chunks] == [f"guide_chunk_{i}" for i in range(len(chunks))]
    assert all(c.source == "guide" for c in chunks)
    assert chunks[0].metadata["total_chunks"] == len(chunks)
    assert chunks[-1].metadata["chunk_index"] == len(chunks) - 1


def test_frontmatter_is_removed() -> None:
    content = "---\ntitle: Guide\ntags: [md]\n---\n# Heading\nBody"

    assert remove_frontmatter(content) == "# Heading\nBody"
    assert remove_frontmatter("# No frontmatter") == "# No frontmatter"
