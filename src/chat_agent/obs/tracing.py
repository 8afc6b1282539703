"""Latency and prompt-size helpers shared by the orchestrator and plugin registry."""

from __future__ import annotations

import time

# Rough characters-per-token ratio for English text with OpenAI tokenizers.
_CHARS_PER_TOKEN = 4


class Timer:
    """Measures wall-clock latency of a `with` block in milliseconds.

    `elapsed_ms` is set on exit whether or not the block raised, so plugin
    traces report latency for failed calls too.
    """

    def __init__(self) -> None:
        self._started_at: float | None = None
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._started_at = time.monotonic()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        if self._started_at is not None:
            self.elapsed_ms = (time.monotonic() - self._started_at) * 1000.0


def estimate_token_count(text: str) -> int:
    if not text:
        return 0
    return max(1, len(text) // _CHARS_PER_TOKEN)
