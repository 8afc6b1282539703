"""Deterministic fallback generator when no external LLM is configured."""

from __future__ import annotations

import re

from chat_agent.agent.llm import Generator
from chat_agent.agent.prompt import (
    DOCUMENTATION_HEADER,
    PLUGIN_OUTPUTS_HEADER,
    USER_MESSAGE_HEADER,
)

NO_ANSWER = "I could not find relevant information in the indexed documents to answer that."

_CHUNK_LINE = re.compile(r"^\[Chunk (?P<index>\d+)\]\s+(?P<body>.+)$")


class DeterministicGenerator(Generator):
    """Answers straight from the prompt's plugin and documentation sections.

    Keeps the same contract as `LangChainGenerator` and is useful for local or
    offline environments where `OPENAI_API_KEY` is not set. Plugin outputs win
    over documentation, mirroring the retrieval-skip rule of the orchestrator.
    """

    def __init__(self, max_chunks: int = 3) -> None:
        self.max_chunks = max_chunks

    def generate(self, prompt: str) -> str:
        plugin_lines = _section_lines(prompt, PLUGIN_OUTPUTS_HEADER)
        if plugin_lines:
            return "\n".join(plugin_lines)

        snippets = _parse_chunks(_section_lines(prompt, DOCUMENTATION_HEADER))
        if not snippets:
            return NO_ANSWER

        lines = ["Based on the documentation:"]
        for idx, snippet in enumerate(snippets[: self.max_chunks], start=1):
            lines.append(f"{idx}. {snippet}")
        return "\n".join(lines)


def _section_lines(prompt: str, header: str) -> list[str]:
    # Sections are blank-line separated; the user message always comes last.
    user_at = prompt.rfind(f"\n\n{USER_MESSAGE_HEADER}\n")
    body = prompt if user_at < 0 else prompt[:user_at]
    start = body.find(f"{header}\n")
    if start < 0:
        return []
    section = body[start + len(header) + 1 :].split("\n\n", 1)[0]
    return [line.strip() for line in section.splitlines() if line.strip()]


def _parse_chunks(lines: list[str]) -> list[str]:
    snippets: list[str] = []
    for line in lines:
        match = _CHUNK_LINE.match(line)
        if match:
            snippets.append(match.group("body").strip())
    return snippets
