"""AI provider implementations.

This module contains STT, LLM, TTS and moderation provider implementations.
"""

from hrvoice.ai.providers.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModerationProvider,
    ModerationResult,
    STTProvider,
    STTResult,
    TTSProvider,
    TTSResult,
)
from hrvoice.ai.providers.factory import (
    clear_provider_cache,
    get_llm_provider,
    get_moderation_provider,
    get_stt_provider,
    get_tts_provider,
)
from hrvoice.ai.providers.llm import GroqProvider, OpenAIProvider
from hrvoice.ai.providers.llm.stub import (
    StubLLMProvider,
    StubModerationProvider,
    StubSTTProvider,
    StubTTSProvider,
)
from hrvoice.ai.providers.moderation import OpenAIModerationProvider
from hrvoice.ai.providers.stt import GroqWhisperSTTProvider, OpenAIWhisperSTTProvider
from hrvoice.ai.providers.tts import OpenAITTSProvider

__all__ = [
    "clear_provider_cache",
    "get_llm_provider",
    "get_moderation_provider",
    "get_stt_provider",
    "get_tts_provider",
    "LLMProvider",
    "STTProvider",
    "TTSProvider",
    "ModerationProvider",
    "LLMMessage",
    "LLMResponse",
    "STTResult",
    "TTSResult",
    "ModerationResult",
    "GroqProvider",
    "OpenAIProvider",
    "StubLLMProvider",
    "StubSTTProvider",
    "StubTTSProvider",
    "StubModerationProvider",
    "GroqWhisperSTTProvider",
    "OpenAIWhisperSTTProvider",
    "OpenAITTSProvider",
    "OpenAIModerationProvider",
]
