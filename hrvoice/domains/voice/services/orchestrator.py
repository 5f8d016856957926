"""VoicePipelineOrchestrator.

Runs one voice turn through rate limiting, STT, moderation, the response
cache, generation and TTS. Every stage degrades to a text-only reply instead
of raising.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TypeVar

from hrvoice.domains.voice.models import (
    EmotionalAnnotation,
    ModerationVerdict,
    VoiceErrorTag,
    VoiceResponse,
    VoiceSessionConfig,
)
from hrvoice.domains.voice.services.generation import ResponseGenerator
from hrvoice.domains.voice.services.moderation import ContentModerator
from hrvoice.domains.voice.services.rate_limiter import RateLimiter
from hrvoice.domains.voice.services.response_cache import ResponseCache, make_key
from hrvoice.domains.voice.services.synthesis import TextToSpeechAdapter
from hrvoice.domains.voice.services.transcription import SpeechToTextAdapter
from hrvoice.exceptions import PipelineCancelledError
from hrvoice.infrastructure.logging import redact_sensitive
from hrvoice.prompts.assistant_modes import build_voice_system_prompt

logger = logging.getLogger("voice")

T = TypeVar("T")

RATE_LIMITED_MESSAGE = (
    "You've reached the rate limit for voice processing. Please try again in a minute."
)
STT_FAILED_MESSAGE = (
    "I couldn't understand that. Let's continue by text. Could you type your message instead?"
)
EMPTY_TRANSCRIPTION_MESSAGE = (
    "I didn't catch that. Could you please speak more clearly or try typing your message?"
)
MODERATION_FLAGGED_MESSAGE = (
    "I'm sorry, but I detected content that violates our usage policies. "
    "Please try again with different wording."
)
TTS_FAILED_NOTE = " (Note: Audio generation failed. Let's continue by text.)"
CANCELLED_MESSAGE = "Voice processing was stopped. Let's continue by text."
GENERAL_ERROR_MESSAGE = (
    "Sorry, I encountered an error in the voice processing pipeline. Let's continue by text."
)


def text_processing_failed_message(transcript: str) -> str:
    return (
        f'I understood you said: "{transcript}", but I\'m having trouble processing it. '
        "Let's continue by text."
    )


@dataclass
class PipelineRun:
    """Tracks one in-flight voice turn so it can be cancelled.

    ``checkpoint`` stops the run between stages; ``guard`` races a stage's
    provider call against the cancel signal and abandons the call if the
    signal wins.
    """

    conversation_id: str
    user_id: str
    started_at: float = field(default_factory=time.time)
    _cancel_event: asyncio.Event = field(default_factory=asyncio.Event, repr=False)

    @property
    def canceled(self) -> bool:
        return self._cancel_event.is_set()

    def cancel(self) -> None:
        self._cancel_event.set()

    def checkpoint(self, stage: str) -> None:
        if self.canceled:
            raise PipelineCancelledError(self.conversation_id, stage)

    async def guard(self, stage: str, call: Awaitable[T]) -> T:
        call_task = asyncio.ensure_future(call)
        cancel_wait = asyncio.ensure_future(self._cancel_event.wait())
        try:
            await asyncio.wait({call_task, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_wait.cancel()
            if not call_task.done():
                call_task.cancel()

        if not call_task.done() or call_task.cancelled():
            raise PipelineCancelledError(self.conversation_id, stage)
        return call_task.result()


class VoicePipelineOrchestrator:
    """Service for orchestrating the voice pipeline.

    Responsibilities:
    - Admission control per user
    - STT -> moderation -> cache -> LLM -> TTS sequencing
    - Stage-specific text fallbacks
    - Pipeline cancellation by conversation
    """

    def __init__(
        self,
        stt: SpeechToTextAdapter,
        moderator: ContentModerator,
        generator: ResponseGenerator,
        tts: TextToSpeechAdapter,
        rate_limiter: RateLimiter,
        cache: ResponseCache,
    ) -> None:
        """Initialize pipeline orchestrator.

        Args:
            stt: Speech-to-text adapter
            moderator: Content moderator
            generator: Response generator
            tts: Text-to-speech adapter
            rate_limiter: Shared per-user rate limiter
            cache: Shared response cache
        """
        self.stt = stt
        self.moderator = moderator
        self.generator = generator
        self.tts = tts
        self.rate_limiter = rate_limiter
        self.cache = cache

        # Active pipeline runs by conversation_id for cancellation
        self._active_pipelines: dict[str, PipelineRun] = {}

    async def process_voice_input(
        self,
        audio: bytes,
        session: VoiceSessionConfig,
        mode: str,
        user_token: str | None = None,
        audio_format: str = "webm",
    ) -> VoiceResponse:
        """Turn a recorded clip into a spoken reply.

        Args:
            audio: Raw audio bytes
            session: Per-turn session settings
            mode: Assistant mode (e.g. 'resume-coach')
            user_token: Optional caller token forwarded to the STT provider
            audio_format: Container format of ``audio``

        Returns:
            VoiceResponse; ``error`` names the degraded stage, if any
        """
        user_id = session.user_id or "anonymous"
        run = PipelineRun(conversation_id=session.conversation_id, user_id=user_id)
        self._active_pipelines[session.conversation_id] = run

        try:
            return await self._run(run, audio, session, mode, user_token, audio_format)
        except PipelineCancelledError as e:
            logger.info(
                "Voice pipeline stopped after cancellation",
                extra={
                    "service": "voice",
                    "conversation_id": session.conversation_id,
                    "stage": e.stage,
                },
            )
            return VoiceResponse.fallback(CANCELLED_MESSAGE, VoiceErrorTag.CANCELLED)
        except Exception as e:
            logger.error(
                "Error in voice processing pipeline",
                extra={
                    "service": "voice",
                    "conversation_id": session.conversation_id,
                    "error_type": type(e).__name__,
                    "error": redact_sensitive(str(e)),
                    "duration_ms": int((time.time() - run.started_at) * 1000),
                },
            )
            return VoiceResponse.fallback(
                GENERAL_ERROR_MESSAGE, VoiceErrorTag.GENERAL_VOICE_PROCESSING_ERROR
            )
        finally:
            if self._active_pipelines.get(session.conversation_id) is run:
                del self._active_pipelines[session.conversation_id]

    async def _run(
        self,
        run: PipelineRun,
        audio: bytes,
        session: VoiceSessionConfig,
        mode: str,
        user_token: str | None,
        audio_format: str,
    ) -> VoiceResponse:
        if not self.rate_limiter.check(run.user_id):
            return VoiceResponse.fallback(RATE_LIMITED_MESSAGE, VoiceErrorTag.RATE_LIMITED)

        run.checkpoint("transcribe")
        try:
            annotation = await run.guard(
                "transcribe",
                self.stt.transcribe(
                    audio, session, user_token=user_token, audio_format=audio_format
                ),
            )
        except PipelineCancelledError:
            raise
        except Exception as e:
            self._log_stage_failure("transcribe", session, e)
            return VoiceResponse.fallback(STT_FAILED_MESSAGE, VoiceErrorTag.SPEECH_TO_TEXT_FAILED)

        if annotation.is_blank:
            return VoiceResponse.fallback(
                EMPTY_TRANSCRIPTION_MESSAGE, VoiceErrorTag.EMPTY_TRANSCRIPTION
            )

        run.checkpoint("moderate")
        verdict = await run.guard("moderate", self.moderator.moderate(annotation.text))
        if verdict.flagged:
            return VoiceResponse.fallback(
                MODERATION_FLAGGED_MESSAGE,
                moderation=verdict,
                transcript=annotation.text,
            )

        cache_key = make_key(mode, annotation.annotated_text)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(
                "Using cached voice response",
                extra={"service": "voice", "conversation_id": session.conversation_id, "mode": mode},
            )
            return cached

        system_prompt = build_voice_system_prompt(mode, session.system_prompt)
        run.checkpoint("generate")
        try:
            generation = await run.guard(
                "generate",
                self.generator.generate(
                    annotation,
                    mode,
                    system_prompt_override=system_prompt,
                    user_name=session.user_name,
                ),
            )
        except PipelineCancelledError:
            raise
        except Exception as e:
            self._log_stage_failure("generate", session, e)
            return VoiceResponse.fallback(
                text_processing_failed_message(annotation.text),
                VoiceErrorTag.TEXT_PROCESSING_FAILED,
                moderation=verdict,
                transcript=annotation.text,
                tone=annotation.tone,
            )

        run.checkpoint("synthesize")
        try:
            synthesis = await run.guard(
                "synthesize", self.tts.synthesize(generation.content, session)
            )
        except PipelineCancelledError:
            raise
        except Exception as e:
            self._log_stage_failure("synthesize", session, e)
            return VoiceResponse.fallback(
                generation.content + TTS_FAILED_NOTE,
                VoiceErrorTag.TEXT_TO_SPEECH_FAILED,
                token_count=generation.token_count,
                moderation=verdict,
                transcript=annotation.text,
                tone=annotation.tone,
            )

        run.checkpoint("store")
        response = self._compose(
            synthesis.audio_url, synthesis.text, synthesis.token_count, verdict, annotation
        )
        if not generation.degraded:
            self.cache.put(cache_key, response)

        logger.info(
            "Voice turn complete",
            extra={
                "service": "voice",
                "conversation_id": session.conversation_id,
                "mode": mode,
                "token_count": response.token_count,
                "duration_ms": int((time.time() - run.started_at) * 1000),
            },
        )
        return response

    @staticmethod
    def _compose(
        audio_url: str,
        text: str,
        token_count: int,
        verdict: ModerationVerdict,
        annotation: EmotionalAnnotation,
    ) -> VoiceResponse:
        return VoiceResponse(
            audio_url=audio_url,
            text=text,
            token_count=token_count,
            moderation=verdict,
            transcript=annotation.text,
            tone=annotation.tone,
        )

    @staticmethod
    def _log_stage_failure(stage: str, session: VoiceSessionConfig, error: Exception) -> None:
        logger.warning(
            f"Voice stage {stage} failed, continuing by text",
            extra={
                "service": "voice",
                "conversation_id": session.conversation_id,
                "stage": stage,
                "error_type": type(error).__name__,
                "error": redact_sensitive(str(error)),
                "error_code": getattr(error, "code", None),
                "metadata": getattr(error, "details", None),
            },
        )

    def cancel_pipeline(self, conversation_id: str) -> bool:
        """Cancel the active pipeline for a conversation.

        Args:
            conversation_id: Conversation ID

        Returns:
            True if pipeline was cancelled, False if none active
        """
        run = self._active_pipelines.get(conversation_id)
        if not run:
            return False

        run.cancel()

        logger.info(
            "Voice pipeline canceled",
            extra={
                "service": "voice",
                "conversation_id": conversation_id,
                "user_id": run.user_id,
            },
        )
        return True

    def is_active(self, conversation_id: str) -> bool:
        return conversation_id in self._active_pipelines
