"""Conversational agent package."""

from .config import AgentConfig, MemoryConfig, RetrievalConfig

__all__ = ["AgentConfig", "MemoryConfig", "RetrievalConfig"]
