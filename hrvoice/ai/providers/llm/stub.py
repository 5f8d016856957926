"""Stub providers for testing and development.

Selected when ``MOCK_EXTERNAL_CALLS=true`` or when a provider is explicitly
configured as ``stub``. Behaviour can be steered through ``STUB_*`` env vars.
"""

import asyncio
import logging
import os
import random

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
from hrvoice.ai.providers.registry import (
    register_llm_provider,
    register_moderation_provider,
    register_stt_provider,
    register_tts_provider,
)

logger = logging.getLogger("stub")

MOCK_TRANSCRIPTS = [
    "How can I prepare for my upcoming performance review?",
    "I'm not sure how to approach my manager about a raise.",
    "This is amazing! I got the promotion!",
    "Why won't this system recognize my achievements?",
]


def _env_str(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None:
        return None
    s = str(value).strip()
    return s if s else None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str) -> bool:
    return (_env_str(name) or "").lower() in ("1", "true", "yes")


def _mock_reply(system_prompt: str, query: str) -> str:
    prompt_lc = system_prompt.lower()
    query_lc = query.lower()

    if "resume coach" in prompt_lc:
        if "format" in query_lc:
            return (
                "I recommend using a clean, ATS-friendly format with clear section headings "
                "and bullet points for achievements. This ensures your resume is both "
                "human-readable and can pass through automated screening systems."
            )
        if "skills" in query_lc or "abilities" in query_lc:
            return (
                "When listing skills, prioritize those mentioned in the job description. "
                "Use a mix of hard skills (technical abilities) and soft skills (communication, "
                "leadership) that are relevant to the position you're applying for."
            )
        return (
            "I can help optimize your resume for job applications. Could you share a "
            "specific section you'd like feedback on, such as your summary, skills, "
            "experience, or education?"
        )

    if "negotiation advisor" in prompt_lc:
        return (
            "When negotiating a job offer, always research market rates for your position "
            "and location first. Be prepared to justify your ask with specific achievements "
            "and value you bring. Remember that compensation includes more than just salary - "
            "consider benefits, work-life balance, and growth opportunities."
        )

    return (
        "I'm here to help with your HR and career questions. Could you provide more "
        "details about what you're looking for assistance with?"
    )


@register_llm_provider
class StubLLMProvider(LLMProvider):
    """Stub LLM provider for testing."""

    @property
    def name(self) -> str:
        return "stub"

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs,
    ) -> LLMResponse:
        """Return a canned HR answer chosen from the system prompt and query."""
        await asyncio.sleep(_env_int("STUB_LLM_DELAY_MS", 100) / 1000)

        if _env_flag("STUB_LLM_FAIL"):
            raise RuntimeError("stub_llm_error")

        system_prompt = "\n".join(m.content for m in messages if m.role == "system")
        query = "\n".join(m.content for m in messages if m.role == "user")
        content = _env_str("STUB_LLM_FORCE_RESPONSE") or _mock_reply(system_prompt, query)

        tokens_in = sum(len(m.content.split()) for m in messages)
        return LLMResponse(
            content=content,
            model=model or "stub",
            tokens_in=tokens_in,
            tokens_out=len(content.split()),
            finish_reason="stop",
        )


@register_stt_provider
class StubSTTProvider(STTProvider):
    """Stub STT provider for testing."""

    @property
    def name(self) -> str:
        return "stub"

    async def transcribe(
        self,
        audio_data: bytes,
        format: str = "webm",
        language: str | None = None,
        **kwargs,
    ) -> STTResult:
        """Return a stub transcription."""
        await asyncio.sleep(_env_int("STUB_STT_DELAY_MS", 100) / 1000)

        mode = (_env_str("STUB_STT_MODE") or "normal").lower()
        if mode in ("error", "fail"):
            raise RuntimeError(_env_str("STUB_STT_ERROR_MESSAGE") or "stub_stt_error")

        if _env_flag("STUB_STT_EMPTY_TRANSCRIPT"):
            transcript = ""
        else:
            forced = _env_str("STUB_STT_FORCE_TRANSCRIPT")
            transcript = forced if forced is not None else random.choice(MOCK_TRANSCRIPTS)

        logger.debug(
            "Stub transcription",
            extra={"service": "stt", "provider": "stub", "metadata": {"transcript": transcript}},
        )

        return STTResult(
            transcript=transcript,
            language=language or "en",
            duration_ms=len(audio_data) // 16,
        )


@register_tts_provider
class StubTTSProvider(TTSProvider):
    """Stub TTS provider for testing."""

    DEFAULT_VOICE = "alloy"

    @property
    def name(self) -> str:
        return "stub"

    async def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = "mp3",
        **kwargs,
    ) -> TTSResult:
        """Return silent audio bytes."""
        await asyncio.sleep(_env_int("STUB_TTS_DELAY_MS", 100) / 1000)

        if _env_flag("STUB_TTS_FAIL"):
            raise RuntimeError("stub_tts_error")

        audio_bytes = _env_int("STUB_TTS_AUDIO_BYTES", 1024)
        return TTSResult(
            audio_data=b"\x00" * max(0, audio_bytes),
            format=format,
            duration_ms=len(text) * 50,  # Rough estimate
        )


@register_moderation_provider
class StubModerationProvider(ModerationProvider):
    """Stub moderation provider; flags only text containing STUB_MODERATION_FLAG_TERM."""

    @property
    def name(self) -> str:
        return "stub"

    async def moderate(self, text: str) -> ModerationResult:
        term = _env_str("STUB_MODERATION_FLAG_TERM")
        flagged = bool(term) and term.lower() in text.lower()
        return ModerationResult(
            flagged=flagged,
            categories={"harassment": flagged},
            category_scores={"harassment": 0.99 if flagged else 0.01},
        )
