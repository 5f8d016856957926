"""Whisper transcription hosted by Groq."""

import logging
import time
from typing import Any

from groq import AsyncGroq

from hrvoice.ai.providers.base import STTProvider, STTResult
from hrvoice.ai.providers.registry import register_stt_provider

logger = logging.getLogger("stt")

# Whisper invents filler on silence; an explicit instruction suppresses most of it
SILENCE_PROMPT = (
    "Transcribe the user's speech. If there is only silence or noise, "
    "return an empty transcript. Do not invent words or phrases."
)


def _field(response: Any, key: str) -> Any:
    # The SDK returns a model object; mocked or raw responses may be dicts
    if isinstance(response, dict):
        return response.get(key)
    return getattr(response, key, None)


@register_stt_provider
class GroqWhisperSTTProvider(STTProvider):
    DEFAULT_MODEL = "whisper-large-v3"

    @classmethod
    def resolve_model(cls, model: str | None) -> str:
        requested = (model or "").strip()
        # "whisper-1" is OpenAI's hosted name
        if requested == "whisper-1":
            requested = ""
        return requested or cls.DEFAULT_MODEL

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        client: AsyncGroq | None = None,
    ) -> None:
        self.model = model
        self._client = client or AsyncGroq(api_key=api_key)

    @property
    def name(self) -> str:
        return "groq_whisper"

    async def aclose(self) -> None:
        await self._client.close()

    async def transcribe(
        self,
        audio_data: bytes,
        format: str = "webm",
        language: str | None = None,
        **kwargs,
    ) -> STTResult:
        kwargs.pop("user_token", None)
        if language:
            kwargs["language"] = language

        started = time.time()
        try:
            response = await self._client.audio.transcriptions.create(
                file=(f"audio.{format or 'webm'}", audio_data),
                model=self.model,
                response_format="verbose_json",
                prompt=SILENCE_PROMPT,
                **kwargs,
            )
        except Exception as e:
            logger.error(
                "Groq Whisper transcription failed",
                extra={
                    "service": "stt",
                    "provider": self.name,
                    "model": self.model,
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.time() - started) * 1000),
                },
            )
            raise

        transcript = _field(response, "text") or ""
        duration = _field(response, "duration")

        logger.info(
            "Groq Whisper transcription complete",
            extra={
                "service": "stt",
                "provider": self.name,
                "model": self.model,
                "duration_ms": int((time.time() - started) * 1000),
                "metadata": {"transcript_chars": len(transcript)},
            },
        )

        return STTResult(
            transcript=transcript,
            language=_field(response, "language"),
            duration_ms=int(float(duration) * 1000) if duration is not None else None,
        )
