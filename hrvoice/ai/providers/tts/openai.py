"""OpenAI TTS provider implementation using the REST API."""

import logging
import time

import httpx

from hrvoice.ai.providers.base import TTSProvider, TTSResult
from hrvoice.ai.providers.openai_http import DEFAULT_OPENAI_BASE_URL, OpenAIRestClient
from hrvoice.ai.providers.registry import register_tts_provider

logger = logging.getLogger("tts")


@register_tts_provider
class OpenAITTSProvider(OpenAIRestClient, TTSProvider):
    """OpenAI speech synthesis via ``POST /audio/speech``.

    Supports the built-in voices (alloy, echo, fable, onyx, nova, shimmer) and
    MP3, Opus, AAC, FLAC, WAV output formats.
    """

    DEFAULT_VOICE = "alloy"

    VOICES = frozenset({"alloy", "echo", "fable", "onyx", "nova", "shimmer"})

    @classmethod
    def resolve_voice(cls, voice: str | None) -> str | None:
        v = (voice or "").strip().lower()
        if v in cls.VOICES:
            return v
        # Unknown value: fall back to default voice
        return cls.DEFAULT_VOICE

    def __init__(
        self,
        api_key: str,
        model: str = "tts-1",
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize OpenAI TTS provider.

        Args:
            api_key: OpenAI API key
            model: Speech model ID (tts-1, tts-1-hd)
            base_url: API base URL
            timeout: Request timeout in seconds
            client: Optional pre-built httpx client
        """
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, client=client)
        self.model = model

        logger.info(
            "OpenAI TTS provider initialized",
            extra={"service": "tts", "provider": "openai", "model": model},
        )

    @property
    def name(self) -> str:
        """Provider name for logging."""
        return "openai"

    async def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = "mp3",
        **kwargs,
    ) -> TTSResult:
        """Synthesize text to speech.

        Args:
            text: Text to synthesize
            voice: Voice name (e.g. 'alloy')
            format: Output format ('mp3', 'opus', 'wav', ...)
            **kwargs: Additional options:
                - speed: Speaking rate (0.25 to 4.0)

        Returns:
            TTSResult with the audio bytes
        """
        start_time = time.time()
        resolved_voice = type(self).resolve_voice(voice)

        payload = {
            "model": self.model,
            "voice": resolved_voice,
            "input": text,
            "response_format": format,
        }
        if "speed" in kwargs:
            payload["speed"] = kwargs["speed"]

        try:
            response = await self._post("/audio/speech", payload)
        except Exception as e:
            logger.error(
                "OpenAI TTS synthesis failed",
                extra={
                    "service": "tts",
                    "provider": self.name,
                    "voice": resolved_voice,
                    "error": str(e),
                    "latency_ms": int((time.time() - start_time) * 1000),
                },
            )
            raise

        audio_data = response.content
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "OpenAI TTS synthesis complete",
            extra={
                "service": "tts",
                "provider": self.name,
                "model": self.model,
                "voice": resolved_voice,
                "latency_ms": latency_ms,
                "metadata": {"text_chars": len(text), "audio_bytes": len(audio_data)},
            },
        )

        return TTSResult(audio_data=audio_data, format=format)
