"""Text-to-speech stage: synthesize a reply and publish it as an audio URL."""

import logging
import math
import time

from hrvoice.ai.providers.base import TTSProvider
from hrvoice.domains.voice.models import SynthesisResult, VoiceSessionConfig
from hrvoice.domains.voice.services.timeouts import call_with_timeout
from hrvoice.exceptions import ServiceNotConfiguredError
from hrvoice.infrastructure.audio_store import AudioStore

logger = logging.getLogger("tts")

DEFAULT_VOICE = "alloy"


def estimate_tokens(text: str) -> int:
    """Rough token estimate for synthesized text (1.3 tokens per word)."""
    return math.ceil(len(text.split(" ")) * 1.3)


class PreloadedPhraseCache:
    """Phrase text -> audio URL for clips synthesized ahead of time. Never evicted."""

    def __init__(self) -> None:
        self._urls: dict[str, str] = {}

    def get(self, phrase: str) -> str | None:
        return self._urls.get(phrase)

    def set(self, phrase: str, audio_url: str) -> None:
        self._urls[phrase] = audio_url

    def __contains__(self, phrase: str) -> bool:
        return phrase in self._urls

    def __len__(self) -> int:
        return len(self._urls)


class TextToSpeechAdapter:
    """Wraps a TTS provider; errors propagate to the caller."""

    def __init__(
        self,
        provider: TTSProvider | None,
        audio_store: AudioStore,
        phrase_cache: PreloadedPhraseCache | None = None,
        default_voice: str = DEFAULT_VOICE,
        audio_format: str = "mp3",
        timeout_seconds: float | None = 60.0,
    ) -> None:
        self.provider = provider
        self.audio_store = audio_store
        self.phrase_cache = phrase_cache if phrase_cache is not None else PreloadedPhraseCache()
        self.default_voice = default_voice
        self.audio_format = audio_format
        self.timeout_seconds = timeout_seconds

    async def synthesize(self, text: str, session: VoiceSessionConfig) -> SynthesisResult:
        token_count = estimate_tokens(text)

        preloaded_url = self.phrase_cache.get(text)
        if preloaded_url is not None:
            logger.debug(
                "Using preloaded audio for common phrase",
                extra={"service": "tts", "conversation_id": session.conversation_id},
            )
            return SynthesisResult(audio_url=preloaded_url, text=text, token_count=token_count)

        url = await self.render(text, voice=session.voice)
        return SynthesisResult(audio_url=url, text=text, token_count=token_count)

    async def render(self, text: str, voice: str | None = None, pinned: bool = False) -> str:
        """Call the provider and store the clip; returns its URL."""
        if self.provider is None:
            raise ServiceNotConfiguredError("text-to-speech", "OPENAI_API_KEY")

        start_time = time.time()
        resolved_voice = voice or self.default_voice
        result = await call_with_timeout(
            self.provider.synthesize(text, voice=resolved_voice, format=self.audio_format),
            provider=self.provider.name,
            operation="synthesize",
            timeout_seconds=self.timeout_seconds,
        )
        url = self.audio_store.put(result.audio_data, format=result.format, pinned=pinned)

        logger.info(
            "Reply synthesized",
            extra={
                "service": "tts",
                "provider": self.provider.name,
                "voice": resolved_voice,
                "duration_ms": int((time.time() - start_time) * 1000),
                "metadata": {"audio_bytes": len(result.audio_data), "pinned": pinned},
            },
        )
        return url
