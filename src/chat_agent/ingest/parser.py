"""Parsing interfaces and concrete parsers for knowledge-base sources."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path

from chat_agent.types import ParsedDocument

_FRONTMATTER = re.compile(r"^---\s*\n([\s\S]*?)\n---\s*\n")


class Parser(ABC):
    """Base parser interface used by the ingest pipeline."""

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def parse(self, path: Path, *, doc_id: str | None = None) -> ParsedDocument:
        """Parse a file into normalized text + metadata."""


class TextParser(Parser):
    """Parser for plain text documents."""

    extensions = (".txt",)

    def parse(self, path: Path, *, doc_id: str | None = None) -> ParsedDocument:
        text = path.read_text(encoding="utf-8")
        return ParsedDocument(
            doc_id=doc_id or path.stem,
            text=text,
            metadata={"source": path.stem, "file_path": str(path), "format": "text"},
        )


class MarkdownParser(Parser):
    """Parser for markdown documents; YAML frontmatter is dropped."""

    extensions = (".md", ".markdown")

    def parse(self, path: Path, *, doc_id: str | None = None) -> ParsedDocument:
        text = remove_frontmatter(path.read_text(encoding="utf-8"))
        return ParsedDocument(
            doc_id=doc_id or path.stem,
            text=text,
            metadata={"source": path.stem, "file_path": str(path), "format": "markdown"},
        )


class ParserRegistry:
    """Maps file extension to parser implementation."""

    def __init__(self, parsers: list[Parser] | None = None) -> None:
        self._parsers: dict[str, Parser] = {}
        for parser in parsers or [TextParser(), MarkdownParser()]:
            self.register(parser)

    def register(self, parser: Parser) -> None:
        for extension in parser.extensions:
            self._parsers[extension.lower()] = parser

    def supports(self, path: Path) -> bool:
        return path.suffix.lower() in self._parsers

    def parse_path(self, path: str | Path, *, doc_id: str | None = None) -> ParsedDocument:
        file_path = Path(path)
        parser = self._parsers.get(file_path.suffix.lower())
        if parser is None:
            raise ValueError(f"No parser registered for extension: {file_path.suffix}")
        return parser.parse(file_path, doc_id=doc_id)


def remove_frontmatter(content: str) -> str:
    return _FRONTMATTER.sub("", content, count=1)
