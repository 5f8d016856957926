"""Capability contracts for the hosted services a voice turn depends on.

Each capability (chat completion, speech-to-text, speech synthesis,
moderation) is an ABC. Concrete providers register themselves by ``name``
and are chosen at runtime by the factory.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMMessage:
    """One chat message."""

    role: str  # 'system', 'user', 'assistant'
    content: str


@dataclass
class LLMResponse:
    content: str
    model: str
    tokens_in: int
    tokens_out: int
    finish_reason: str | None = None

    @property
    def total_tokens(self) -> int:
        return self.tokens_in + self.tokens_out


@dataclass
class STTResult:
    transcript: str
    language: str | None = None
    duration_ms: int | None = None
    segments: list[dict[str, Any]] | None = None


@dataclass
class TTSResult:
    audio_data: bytes
    format: str  # 'mp3', 'wav', 'opus'
    duration_ms: int | None = None


@dataclass
class ModerationResult:
    """Raw classifier output for one input string."""

    flagged: bool
    categories: dict[str, bool] = field(default_factory=dict)
    category_scores: dict[str, float] = field(default_factory=dict)


def _pick(value: str | None, default: str | None) -> str | None:
    value = (value or "").strip()
    return value or default


class Provider(ABC):
    """Common root: every provider exposes a short ``name`` used in logs."""

    @property
    @abstractmethod
    def name(self) -> str: ...


class LLMProvider(Provider):
    """Chat completion (OpenAI, Groq, stub)."""

    DEFAULT_MODEL: str | None = None

    @classmethod
    def resolve_model(cls, model: str | None) -> str | None:
        """Configured model, or ``DEFAULT_MODEL`` when unset. Override to restrict families."""
        return _pick(model, cls.DEFAULT_MODEL)

    @abstractmethod
    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs,
    ) -> LLMResponse:
        """Return a full completion for ``messages``.

        ``kwargs`` carries provider options such as ``response_format``.
        """


class STTProvider(Provider):
    """Speech-to-text (Whisper over OpenAI or Groq, stub)."""

    DEFAULT_MODEL: str | None = None

    @classmethod
    def resolve_model(cls, model: str | None) -> str | None:
        return _pick(model, cls.DEFAULT_MODEL)

    @abstractmethod
    async def transcribe(
        self,
        audio_data: bytes,
        format: str = "webm",
        language: str | None = None,
        **kwargs,
    ) -> STTResult:
        """Transcribe one clip. ``kwargs`` may carry ``user_token``."""


class TTSProvider(Provider):
    """Speech synthesis (OpenAI, stub)."""

    DEFAULT_VOICE: str | None = None

    @classmethod
    def resolve_voice(cls, voice: str | None) -> str | None:
        return _pick(voice, cls.DEFAULT_VOICE)

    @abstractmethod
    async def synthesize(
        self,
        text: str,
        voice: str | None = None,
        format: str = "mp3",
        **kwargs,
    ) -> TTSResult: ...


class ModerationProvider(Provider):
    """Content classification (OpenAI, stub)."""

    @abstractmethod
    async def moderate(self, text: str) -> ModerationResult: ...
