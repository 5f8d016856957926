"""Application configuration using pydantic-settings."""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "staging", "production"] = "development"

    # ==========================================================================
    # Provider API Keys
    # ==========================================================================
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (Whisper, chat completions, TTS, moderation)",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL for the OpenAI REST API",
    )
    groq_api_key: str = Field(
        default="",
        description="Groq API key (alternative Whisper STT and LLM backend)",
    )

    mock_external_calls: bool = Field(
        default=False,
        description=(
            "Route every capability (STT, LLM, TTS, moderation) to the stub "
            "providers instead of calling hosted services"
        ),
    )

    # ==========================================================================
    # STT Configuration
    # ==========================================================================
    stt_provider: Literal["openai_whisper", "groq_whisper", "stub"] = "openai_whisper"
    stt_model: str = "whisper-1"

    # ==========================================================================
    # LLM Configuration
    # ==========================================================================
    llm_provider: Literal["openai", "groq", "stub"] = "openai"
    llm_model: str = Field(
        default="gpt-3.5-turbo",
        description="Chat completion model ID",
    )
    llm_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for voice replies",
    )
    llm_max_tokens: int = Field(
        default=500,
        description="Maximum tokens generated per voice reply",
    )
    llm_response_format: str = Field(
        default="",
        description="Optional structured-output hint (e.g. 'json_object'); empty disables it",
    )

    # ==========================================================================
    # TTS Configuration
    # ==========================================================================
    tts_provider: Literal["openai", "stub"] = Field(
        default="openai",
        description="Text-to-speech provider backend (openai or stub)",
    )
    tts_model: str = "tts-1"
    tts_default_voice: str = Field(
        default="alloy",
        description="Voice used when a session does not request one",
    )

    # ==========================================================================
    # Moderation Configuration
    # ==========================================================================
    moderation_provider: Literal["openai", "stub"] = "openai"

    # ==========================================================================
    # Pipeline limits
    # ==========================================================================
    rate_limit_max_requests: int = Field(
        default=10,
        description="Voice requests allowed per user within one window",
    )
    rate_limit_window_seconds: float = Field(
        default=60.0,
        description="Length of the per-user rate limit window",
    )
    response_cache_max_size: int = Field(
        default=100,
        description="Maximum number of cached voice responses",
    )
    response_cache_ttl_seconds: float = Field(
        default=30 * 60,
        description="Seconds a cached voice response stays valid",
    )
    audio_store_max_items: int = Field(
        default=1000,
        description="Maximum synthesized clips kept in memory (preloaded phrases excluded)",
    )
    audio_url_prefix: str = Field(
        default="/api/v1/voice/audio",
        description="URL prefix under which synthesized audio is served",
    )

    preload_enabled: bool = Field(
        default=True,
        description="Warm the common-phrase audio cache at startup",
    )
    preload_delay_seconds: float = Field(
        default=0.2,
        description="Pause between preload synthesis calls",
    )

    provider_timeout_stt_seconds: float = Field(
        default=60,
        description="Timeout in seconds for STT transcribe calls",
    )
    provider_timeout_llm_seconds: float = Field(
        default=60,
        description="Timeout in seconds for chat completion calls",
    )
    provider_timeout_tts_seconds: float = Field(
        default=60,
        description="Timeout in seconds for TTS synthesize calls",
    )
    provider_timeout_moderation_seconds: float = Field(
        default=15,
        description="Timeout in seconds for moderation calls",
    )

    # ==========================================================================
    # Logging and HTTP
    # ==========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_debug_namespaces: str = Field(
        default="",
        description="Logger namespaces that also emit DEBUG (e.g. 'voice,stt')",
    )
    cors_allow_origins: str = Field(
        default="",
        description="Allowed CORS origins outside development, comma-separated",
    )

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @computed_field
    @property
    def debug_namespaces(self) -> list[str]:
        return _split_csv(self.log_debug_namespaces)

    @computed_field
    @property
    def cors_allow_origins_list(self) -> list[str]:
        return _split_csv(self.cors_allow_origins)

    def log_config_summary(self) -> None:
        """Log which providers and limits are active; secrets are reported as present/absent only."""
        logger.info(
            "Voice assistant configuration loaded",
            extra={
                "service": "config",
                "metadata": {
                    "environment": self.environment,
                    "mock_external_calls": self.mock_external_calls,
                    "openai_base_url": _mask_credentials(self.openai_base_url),
                    "openai_key_present": bool(self.openai_api_key),
                    "groq_key_present": bool(self.groq_api_key),
                    "providers": {
                        "stt": self.stt_provider,
                        "llm": self.llm_provider,
                        "tts": self.tts_provider,
                        "moderation": self.moderation_provider,
                    },
                    "llm_model": self.llm_model,
                    "rate_limit": f"{self.rate_limit_max_requests}/{self.rate_limit_window_seconds:g}s",
                    "response_cache_max_size": self.response_cache_max_size,
                    "preload_enabled": self.preload_enabled,
                    "log_level": self.log_level,
                    "debug_namespaces": self.debug_namespaces,
                },
            },
        )


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _mask_credentials(url: str) -> str:
    """Hide ``user:password@`` in a URL."""
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest:
        return url
    return f"{scheme}://***:***@{rest.rsplit('@', 1)[1]}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
