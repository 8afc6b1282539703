"""Configuration models for the conversational agent."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, model_validator


class ChunkingConfig(BaseModel):
    """Configures character-window chunking of markdown sources."""

    chunk_size: int = Field(default=1000, ge=50)
    chunk_overlap: int = Field(default=200, ge=0)

    @model_validator(mode="after")
    def _check_overlap(self) -> "ChunkingConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be less than chunk_size")
        return self


class RetrievalConfig(BaseModel):
    """Configures document-store search for knowledge questions."""

    top_k: int = Field(default=3, ge=1)
    similarity_threshold: float = Field(default=0.7, ge=-1.0, le=1.0)


class MemoryConfig(BaseModel):
    """Caps for per-session history and the number of live sessions."""

    max_messages_per_session: int = Field(default=10, ge=1)
    max_sessions: int = Field(default=1000, ge=1)


class PluginConfig(BaseModel):
    weather_enabled: bool = True
    math_enabled: bool = True


class LLMConfig(BaseModel):
    model: str = "gpt-4"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, ge=1)
    embedding_model: str = "text-embedding-ada-002"


class WeatherConfig(BaseModel):
    """Settings for the WeatherAPI.com current-conditions endpoint."""

    base_url: str = "http://api.weatherapi.com/v1"
    api_key: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class AgentConfig(BaseModel):
    """Top-level configuration, read once when the agent is assembled."""

    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    plugins: PluginConfig = Field(default_factory=PluginConfig)
    chunking: ChunkingConfig = Field(default_factory=ChunkingConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    log_level: str = "INFO"


def load_config_from_env() -> AgentConfig:
    """Build an `AgentConfig`, overriding defaults from environment variables."""

    defaults = AgentConfig()
    return AgentConfig(
        llm=LLMConfig(model=os.getenv("OPENAI_MODEL", defaults.llm.model)),
        weather=WeatherConfig(
            base_url=os.getenv("WEATHER_BASE_URL", defaults.weather.base_url),
            api_key=os.getenv("WEATHER_API_KEY", ""),
        ),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level),
    )
