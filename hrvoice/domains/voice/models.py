"""Value objects for the voice pipeline."""

import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum

# Fallback replies carry a fixed usage estimate
FALLBACK_TOKEN_COUNT = 20

_TONE_SUFFIX_RE = re.compile(r"\s*\(tone: [a-z]+\)\s*$")


class Tone(str, Enum):
    """Emotional tone detected heuristically from a transcript."""

    EXCITED = "excited"
    QUESTIONING = "questioning"
    FRUSTRATED = "frustrated"
    UNCERTAIN = "uncertain"


class VoiceErrorTag(str, Enum):
    """Identifies the pipeline stage that degraded a voice turn."""

    RATE_LIMITED = "rate_limited"
    SPEECH_TO_TEXT_FAILED = "speech_to_text_failed"
    EMPTY_TRANSCRIPTION = "empty_transcription"
    TEXT_PROCESSING_FAILED = "text_processing_failed"
    TEXT_TO_SPEECH_FAILED = "text_to_speech_failed"
    GENERAL_VOICE_PROCESSING_ERROR = "general_voice_processing_error"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class VoiceSessionConfig:
    """Caller-supplied context for a single voice turn."""

    conversation_id: str
    user_id: str
    system_prompt: str | None = None
    voice: str | None = None
    user_name: str | None = None


@dataclass(frozen=True)
class EmotionalAnnotation:
    """Transcript plus the tone detected for it."""

    text: str
    tone: Tone | None = None

    @property
    def annotated_text(self) -> str:
        """Transcript with the tone rendered as a trailing ``(tone: ...)`` marker."""
        if self.tone is None:
            return self.text
        return f"{self.text} (tone: {self.tone.value})"

    @property
    def is_blank(self) -> bool:
        return not self.text or not self.text.strip()


@dataclass
class ModerationVerdict:
    flagged: bool
    categories: list[str] = field(default_factory=list)
    score: float | None = None


@dataclass
class GenerationResult:
    """Reply text from the response generator.

    ``degraded`` marks canned replies produced without a usable completion;
    those are never cached.
    """

    content: str
    token_count: int
    degraded: bool = False


@dataclass
class SynthesisResult:
    audio_url: str
    text: str
    token_count: int


@dataclass
class VoiceResponse:
    """Terminal output of one voice turn.

    ``text`` is always populated. An empty ``audio_url`` tells the client to
    continue the conversation by text.
    """

    audio_url: str
    text: str
    token_count: int
    moderation: ModerationVerdict | None = None
    error: VoiceErrorTag | None = None
    transcript: str | None = None
    tone: Tone | None = None

    @property
    def word_usage(self) -> int:
        """Usage in words as billed against the user's credit balance."""
        return math.ceil(self.token_count * 0.75)

    @property
    def display_text(self) -> str:
        return strip_tone_annotation(self.text)

    def copy(self) -> "VoiceResponse":
        return replace(self)

    @classmethod
    def fallback(
        cls,
        text: str,
        error: VoiceErrorTag | None = None,
        **kwargs,
    ) -> "VoiceResponse":
        """Text-only reply used when a stage degrades."""
        kwargs.setdefault("token_count", FALLBACK_TOKEN_COUNT)
        return cls(audio_url="", text=text, error=error, **kwargs)


def strip_tone_annotation(text: str) -> str:
    """Remove a trailing ``(tone: ...)`` marker before showing text to a user."""
    return _TONE_SUFFIX_RE.sub("", text)
