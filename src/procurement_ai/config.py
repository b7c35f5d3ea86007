"""Centralized configuration for the procurement AI core."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenAIConfig(BaseSettings):
    """Generative-text endpoint settings."""

    model_config = SettingsConfigDict(env_prefix="GENAI_", frozen=True)

    endpoint: str = "http://localhost:8080/v1/generate:stream"
    app_id: str = ""
    app_id_header: str = "X-App-Id"
    timeout: float = Field(default=120.0, gt=0)

    @field_validator("endpoint")
    @classmethod
    def _endpoint_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = f"endpoint must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v


class ServerConfig(BaseSettings):
    """HTTP server settings for the web interface."""

    model_config = SettingsConfigDict(env_prefix="SERVER_", frozen=True)

    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, le=65535)


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    model_config = SettingsConfigDict(frozen=True)

    genai: GenAIConfig = Field(default_factory=GenAIConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
