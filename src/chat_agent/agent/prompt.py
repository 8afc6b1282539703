"""Deterministic prompt assembly for the generation call."""

from __future__ import annotations

import json
from typing import Any

from chat_agent.types import MemoryEntry, PluginResult, PromptContext

DEFAULT_SYSTEM_INSTRUCTIONS = """
You are an intelligent AI assistant with expertise in Markdown, blogging, and technical writing. You have access to relevant documentation and can execute plugins when needed.

Your responses should be:
- Helpful and informative
- Based on the provided context when available
- Natural and conversational
- Accurate and well-structured
- Professional yet friendly

When using plugin outputs, incorporate them naturally into your response. If you're asked about weather, provide the weather information clearly. If you're asked to calculate something, show the calculation and result.

Always be helpful and provide detailed, accurate information based on the context provided.
""".strip()

MEMORY_SUMMARY_HEADER = "MEMORY SUMMARY (last 2):"
MEMORY_CONTEXT_HEADER = "MEMORY CONTEXT:"
DOCUMENTATION_HEADER = "RELEVANT DOCUMENTATION:"
PLUGIN_OUTPUTS_HEADER = "PLUGIN OUTPUTS:"
USER_MESSAGE_HEADER = "USER MESSAGE:"

MEMORY_TRANSCRIPT_TURNS = 4


def build_prompt(context: PromptContext) -> str:
    """Render a `PromptContext` into a single prompt string.

    Sections always appear in this order and are separated by one blank line:
    system instructions, memory summary, recent transcript, numbered
    documentation chunks, plugin outputs, user message. Empty sections are
    left out.
    """

    sections = [context.system_instructions]

    if context.memory_summary and context.memory_summary.strip():
        sections.append(f"{MEMORY_SUMMARY_HEADER}\n{context.memory_summary}")

    if context.memory:
        sections.append(f"{MEMORY_CONTEXT_HEADER}\n{format_memory(context.memory)}")

    if context.context:
        chunk_lines = [f"[Chunk {i}] {chunk}" for i, chunk in enumerate(context.context, start=1)]
        sections.append(DOCUMENTATION_HEADER + "\n" + "\n".join(chunk_lines))

    plugin_lines = [line for line in map(format_plugin_result, context.plugins) if line]
    if plugin_lines:
        sections.append(PLUGIN_OUTPUTS_HEADER + "\n" + "\n".join(plugin_lines))

    sections.append(f"{USER_MESSAGE_HEADER}\n{context.user_message}")
    return "\n\n".join(sections)


def format_memory(memory: list[MemoryEntry]) -> str:
    return "\n".join(
        f"{entry.role}: {entry.content}" for entry in memory[-MEMORY_TRANSCRIPT_TURNS:]
    )


def format_plugin_result(result: PluginResult) -> str | None:
    """One prompt line per plugin result; None when there is nothing to show."""

    if result.success and result.data:
        data = result.data
        if _is_weather(data):
            return (
                f"Weather for {data['location']}: {data['temperature']}, "
                f"{data.get('condition', '')}, Humidity: {data.get('humidity', '')}, "
                f"Wind: {data.get('wind', '')}"
            )
        if _is_math(data):
            steps = f" ({data['steps']})" if data.get("steps") else ""
            return f"Math calculation: {data['expression']} = {data['result']}{steps}"
        return json.dumps(data, ensure_ascii=False, sort_keys=True, default=str)
    if result.error:
        return f"Error: {result.error}"
    return None


def _is_weather(data: dict[str, Any]) -> bool:
    return bool(data.get("temperature")) and bool(data.get("location"))


def _is_math(data: dict[str, Any]) -> bool:
    return bool(data.get("expression")) and data.get("result") is not None
