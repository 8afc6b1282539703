"""Process-wide logging configuration."""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the service."""

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=_FORMAT,
    )
    # httpx logs every request at INFO, which drowns out pipeline lines.
    logging.getLogger("httpx").setLevel(logging.WARNING)
