"""Resolve configured provider names into provider instances.

Providers self-register on import, so the factory only knows names and
credentials. With ``MOCK_EXTERNAL_CALLS`` every capability resolves to its
stub. A hosted provider whose API key is missing resolves to ``None``; the
calling adapter applies its own degraded behaviour.
"""

import logging
from functools import lru_cache
from typing import Any

from hrvoice.ai.providers.base import (
    LLMProvider,
    ModerationProvider,
    STTProvider,
    TTSProvider,
)
from hrvoice.ai.providers.registry import (
    ProviderRegistry,
    llm_providers,
    moderation_providers,
    stt_providers,
    tts_providers,
)
from hrvoice.config import Settings, get_settings

# Importing the provider packages registers every backend.
from hrvoice.ai.providers import llm as _llm  # noqa: F401,E402
from hrvoice.ai.providers import moderation as _moderation  # noqa: F401,E402
from hrvoice.ai.providers import stt as _stt  # noqa: F401,E402
from hrvoice.ai.providers import tts as _tts  # noqa: F401,E402
from hrvoice.ai.providers.llm import stub as _stub  # noqa: F401,E402

logger = logging.getLogger("providers")

# provider name -> (settings attribute holding its key, env var to report)
_CREDENTIALS = {
    "openai": ("openai_api_key", "OPENAI_API_KEY"),
    "openai_whisper": ("openai_api_key", "OPENAI_API_KEY"),
    "groq": ("groq_api_key", "GROQ_API_KEY"),
    "groq_whisper": ("groq_api_key", "GROQ_API_KEY"),
}

# Providers that talk to the OpenAI REST API and honour OPENAI_BASE_URL
_OPENAI_REST = frozenset({"openai", "openai_whisper"})


def expected_env_var(provider: str) -> str:
    return _CREDENTIALS.get(provider, (None, f"{provider.upper()}_API_KEY"))[1]


def _api_key(settings: Settings, provider: str) -> str | None:
    attr = _CREDENTIALS.get(provider, (None, None))[0]
    return (getattr(settings, attr, "") if attr else "") or None


def _build(
    registry: ProviderRegistry,
    requested: str | None,
    **init_kwargs: Any,
) -> Any:
    """Instantiate ``requested`` from ``registry``; None when its credential is missing."""
    settings = get_settings()
    name = (requested or "").lower().strip()

    if settings.mock_external_calls and name != "stub":
        logger.info(
            f"Using stub {registry.kind} provider (MOCK_EXTERNAL_CALLS enabled)",
            extra={
                "service": "providers",
                "provider": "stub",
                "metadata": {"requested_provider": name},
            },
        )
        name = "stub"

    provider_class = registry.get(name)
    if name == "stub":
        return provider_class()

    api_key = _api_key(settings, name)
    if not api_key:
        logger.warning(
            f"{registry.kind} provider not configured, {expected_env_var(name)} not set",
            extra={
                "service": "providers",
                "provider": name,
                "error_code": "SERVICE_NOT_CONFIGURED",
            },
        )
        return None

    if name in _OPENAI_REST:
        init_kwargs["base_url"] = settings.openai_base_url

    logger.info(
        f"{registry.kind} provider initialized",
        extra={"service": "providers", "provider": name, "metadata": init_kwargs},
    )
    return provider_class(api_key=api_key, **init_kwargs)


def _uses_stub(settings: Settings, name: str | None) -> bool:
    return settings.mock_external_calls or (name or "").lower().strip() == "stub"


@lru_cache
def get_llm_provider(provider: str | None = None) -> LLMProvider | None:
    """LLM provider by name ('openai', 'groq', 'stub'); defaults to ``LLM_PROVIDER``.

    Raises:
        ProviderNotFoundError: If the name is not registered
    """
    return _build(llm_providers, provider or get_settings().llm_provider)


@lru_cache
def get_stt_provider(provider: str | None = None) -> STTProvider | None:
    """STT provider by name ('openai_whisper', 'groq_whisper', 'stub')."""
    settings = get_settings()
    name = provider or settings.stt_provider
    if _uses_stub(settings, name):
        return _build(stt_providers, name)
    model = stt_providers.get(name.lower().strip()).resolve_model(settings.stt_model)
    return _build(stt_providers, name, model=model)


@lru_cache
def get_tts_provider(provider: str | None = None) -> TTSProvider | None:
    """TTS provider by name ('openai', 'stub')."""
    settings = get_settings()
    name = provider or settings.tts_provider
    if _uses_stub(settings, name):
        return _build(tts_providers, name)
    return _build(tts_providers, name, model=settings.tts_model)


@lru_cache
def get_moderation_provider(provider: str | None = None) -> ModerationProvider | None:
    return _build(moderation_providers, provider or get_settings().moderation_provider)


def clear_provider_cache() -> None:
    """Drop cached provider instances (settings changes, tests)."""
    for getter in (get_llm_provider, get_stt_provider, get_tts_provider, get_moderation_provider):
        getter.cache_clear()
