"""OpenAI Whisper STT provider using the REST API."""

import logging
import time
from typing import Any

import httpx

from hrvoice.ai.providers.base import STTProvider, STTResult
from hrvoice.ai.providers.openai_http import DEFAULT_OPENAI_BASE_URL, OpenAIRestClient
from hrvoice.ai.providers.registry import register_stt_provider

logger = logging.getLogger("stt")

FORMAT_MIME_TYPES = {
    "webm": "audio/webm",
    "wav": "audio/wav",
    "mp3": "audio/mpeg",
    "mp4": "audio/mp4",
    "m4a": "audio/mp4",
    "ogg": "audio/ogg",
}


@register_stt_provider
class OpenAIWhisperSTTProvider(OpenAIRestClient, STTProvider):
    """Transcribes audio with ``POST /audio/transcriptions``."""

    DEFAULT_MODEL = "whisper-1"

    def __init__(
        self,
        api_key: str,
        model: str = "whisper-1",
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, client=client)
        self.model = model

        logger.info(
            "OpenAI Whisper STT provider initialized",
            extra={
                "service": "stt",
                "provider": "openai_whisper",
                "model": model,
            },
        )

    @property
    def name(self) -> str:
        return "openai_whisper"

    async def transcribe(
        self,
        audio_data: bytes,
        format: str = "webm",
        language: str | None = None,
        **kwargs,
    ) -> STTResult:
        start_time = time.time()
        user_token = kwargs.pop("user_token", None)
        fmt = (format or "webm").lower()
        filename = f"audio.{fmt}"

        data: dict[str, Any] = {"model": self.model, "response_format": "verbose_json"}
        if language:
            data["language"] = language

        logger.debug(
            "Whisper transcription request",
            extra={
                "service": "stt",
                "provider": self.name,
                "model": self.model,
                "metadata": {"format": fmt, "audio_bytes": len(audio_data)},
            },
        )

        try:
            response = await self._get_client().post(
                self._url("/audio/transcriptions"),
                headers=self._get_headers(json_body=False, user_token=user_token),
                data=data,
                files={"file": (filename, audio_data, FORMAT_MIME_TYPES.get(fmt, "application/octet-stream"))},
            )
            response.raise_for_status()
        except Exception as e:
            logger.error(
                "Whisper transcription failed",
                extra={
                    "service": "stt",
                    "provider": self.name,
                    "model": self.model,
                    "error": str(e),
                    "latency_ms": int((time.time() - start_time) * 1000),
                },
            )
            raise

        payload = response.json()
        transcript = payload.get("text") or ""
        duration = payload.get("duration")
        segments = payload.get("segments")
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "Whisper transcription complete",
            extra={
                "service": "stt",
                "provider": self.name,
                "model": self.model,
                "latency_ms": latency_ms,
                "metadata": {"transcript_chars": len(transcript)},
            },
        )

        return STTResult(
            transcript=transcript,
            language=payload.get("language"),
            duration_ms=int(float(duration) * 1000) if duration is not None else None,
            segments=segments if isinstance(segments, list) else None,
        )
