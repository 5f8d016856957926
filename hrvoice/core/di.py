"""Dependency injection container."""

from dataclasses import dataclass
from functools import lru_cache

from hrvoice.ai.providers import (
    get_llm_provider,
    get_moderation_provider,
    get_stt_provider,
    get_tts_provider,
)
from hrvoice.ai.providers.base import (
    LLMProvider,
    ModerationProvider,
    STTProvider,
    TTSProvider,
)
from hrvoice.config import Settings, get_settings
from hrvoice.domains.voice.services import (
    ContentModerator,
    PhrasePreloader,
    PreloadedPhraseCache,
    RateLimiter,
    ResponseCache,
    ResponseGenerator,
    SpeechToTextAdapter,
    TextToSpeechAdapter,
    VoicePipelineOrchestrator,
)
from hrvoice.infrastructure.audio_store import AudioStore


@dataclass
class Container:
    """DI container for providers and the process-wide voice pipeline state.

    Providers are ``None`` when their API key is missing; the adapters built
    around them apply the degraded behaviour.
    """

    settings: Settings
    stt_provider: STTProvider | None
    llm_provider: LLMProvider | None
    tts_provider: TTSProvider | None
    moderation_provider: ModerationProvider | None
    rate_limiter: RateLimiter
    response_cache: ResponseCache
    audio_store: AudioStore
    phrase_cache: PreloadedPhraseCache

    def __post_init__(self) -> None:
        self.tts = TextToSpeechAdapter(
            provider=self.tts_provider,
            audio_store=self.audio_store,
            phrase_cache=self.phrase_cache,
            default_voice=self.settings.tts_default_voice,
            timeout_seconds=self.settings.provider_timeout_tts_seconds,
        )
        self.orchestrator = self.create_orchestrator()
        self.preloader = PhrasePreloader(
            tts=self.tts,
            phrase_cache=self.phrase_cache,
            delay_seconds=self.settings.preload_delay_seconds,
        )

    def create_orchestrator(self) -> VoicePipelineOrchestrator:
        """Create a VoicePipelineOrchestrator sharing this container's state."""
        s = self.settings
        return VoicePipelineOrchestrator(
            stt=SpeechToTextAdapter(
                provider=self.stt_provider,
                timeout_seconds=s.provider_timeout_stt_seconds,
            ),
            moderator=ContentModerator(
                provider=self.moderation_provider,
                timeout_seconds=s.provider_timeout_moderation_seconds,
            ),
            generator=ResponseGenerator(
                provider=self.llm_provider,
                model=s.llm_model,
                temperature=s.llm_temperature,
                max_tokens=s.llm_max_tokens,
                response_format=s.llm_response_format,
                timeout_seconds=s.provider_timeout_llm_seconds,
            ),
            tts=self.tts,
            rate_limiter=self.rate_limiter,
            cache=self.response_cache,
        )

    async def aclose(self) -> None:
        """Close the HTTP clients held by the hosted providers."""
        for provider in (
            self.stt_provider,
            self.llm_provider,
            self.tts_provider,
            self.moderation_provider,
        ):
            close = getattr(provider, "aclose", None)
            if close is not None:
                await close()


def build_container(settings: Settings | None = None) -> Container:
    """Build a fresh container from settings."""
    settings = settings or get_settings()
    return Container(
        settings=settings,
        stt_provider=get_stt_provider(),
        llm_provider=get_llm_provider(),
        tts_provider=get_tts_provider(),
        moderation_provider=get_moderation_provider(),
        rate_limiter=RateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        response_cache=ResponseCache(
            max_size=settings.response_cache_max_size,
            ttl_seconds=settings.response_cache_ttl_seconds,
        ),
        audio_store=AudioStore(
            max_items=settings.audio_store_max_items,
            url_prefix=settings.audio_url_prefix,
        ),
        phrase_cache=PreloadedPhraseCache(),
    )


@lru_cache
def get_container() -> Container:
    """Get the process-wide DI container."""
    return build_container()
