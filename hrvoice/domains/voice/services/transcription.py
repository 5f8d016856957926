"""Speech-to-text stage: transcribe a clip and annotate its tone."""

import logging
import time

from hrvoice.ai.providers.base import STTProvider
from hrvoice.domains.voice.models import EmotionalAnnotation, VoiceSessionConfig
from hrvoice.domains.voice.services.timeouts import call_with_timeout
from hrvoice.domains.voice.services.tone import KeywordToneDetector, ToneDetector
from hrvoice.exceptions import ServiceNotConfiguredError

logger = logging.getLogger("stt")


class SpeechToTextAdapter:
    """Wraps an STT provider for the voice pipeline.

    Provider, transport and timeout errors propagate to the caller. A blank
    transcript is returned as-is without tone; an empty clip is never sent.
    """

    def __init__(
        self,
        provider: STTProvider | None,
        timeout_seconds: float | None = 60.0,
        tone_detector: ToneDetector | None = None,
    ) -> None:
        self.provider = provider
        self.timeout_seconds = timeout_seconds
        self.tone_detector = tone_detector or KeywordToneDetector()

    async def transcribe(
        self,
        audio: bytes,
        session: VoiceSessionConfig,
        user_token: str | None = None,
        audio_format: str = "webm",
    ) -> EmotionalAnnotation:
        if self.provider is None:
            raise ServiceNotConfiguredError("speech-to-text", "OPENAI_API_KEY")
        if not audio:
            return EmotionalAnnotation(text="")

        start_time = time.time()
        kwargs = {}
        if user_token:
            kwargs["user_token"] = user_token

        result = await call_with_timeout(
            self.provider.transcribe(audio, format=audio_format, **kwargs),
            provider=self.provider.name,
            operation="transcribe",
            timeout_seconds=self.timeout_seconds,
        )

        text = result.transcript or ""
        if not text.strip():
            return EmotionalAnnotation(text=text)

        tone = self.tone_detector.detect(text)

        logger.info(
            "Voice clip transcribed",
            extra={
                "service": "stt",
                "provider": self.provider.name,
                "conversation_id": session.conversation_id,
                "duration_ms": int((time.time() - start_time) * 1000),
                "metadata": {
                    "transcript_chars": len(text),
                    "tone": tone.value if tone else None,
                },
            },
        )

        return EmotionalAnnotation(text=text, tone=tone)
