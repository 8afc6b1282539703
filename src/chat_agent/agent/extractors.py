"""Pattern-based parameter extraction for built-in plugins.

Extractors are plain functions so they can be tested and swapped without
touching intent classification.
"""

from __future__ import annotations

import re

_TERMINATOR = r"(?:\?|$|\s+and|\s+how)"

_LOCATION_PATTERNS = (
    re.compile(rf"weather\s+(?:like\s+)?(?:in\s+)?([A-Za-z\s]+?){_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"(?:in|at)\s+([A-Za-z\s]+?){_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"weather\s+(?:for\s+)?([A-Za-z\s]+?){_TERMINATOR}", re.IGNORECASE),
)

_LOCATION_STOP_WORDS = frozenset(
    {"like", "what", "is", "the", "weather", "temperature", "forecast"}
)

_MATH_PATTERNS = (
    re.compile(r"(\d+\s*[+\-*/]\s*\d+)"),
    re.compile(r"calculate\s+(.+)", re.IGNORECASE),
    re.compile(r"solve\s+(.+)", re.IGNORECASE),
)


def extract_location(message: str) -> str | None:
    """Pull a place name out of a weather question.

    >>> extract_location("What's the weather in Paris?")
    'Paris'
    """

    for pattern in _LOCATION_PATTERNS:
        match = pattern.search(message)
        if not match or not match.group(1):
            continue
        words = [
            word
            for word in match.group(1).split()
            if word.lower() not in _LOCATION_STOP_WORDS
        ]
        if words:
            return " ".join(words)
    return None


def extract_math_expression(message: str) -> str | None:
    for pattern in _MATH_PATTERNS:
        match = pattern.search(message)
        if match and match.group(1):
            return match.group(1).strip()
    return None
