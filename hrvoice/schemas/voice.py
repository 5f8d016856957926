"""Pydantic schemas for the voice HTTP endpoints."""

from pydantic import BaseModel, Field

from hrvoice.domains.voice.models import (
    ModerationVerdict,
    Tone,
    VoiceErrorTag,
    VoiceResponse,
)


class ModerationVerdictSchema(BaseModel):
    flagged: bool
    categories: list[str] = Field(default_factory=list)
    score: float | None = None

    @classmethod
    def from_verdict(cls, verdict: ModerationVerdict) -> "ModerationVerdictSchema":
        return cls(flagged=verdict.flagged, categories=list(verdict.categories), score=verdict.score)


class VoiceResponseSchema(BaseModel):
    """Outcome of one voice turn."""

    audio_url: str = Field(..., description="Audio URL; empty means continue by text")
    text: str = Field(..., description="Reply text, possibly carrying a tone marker")
    display_text: str = Field(..., description="Reply text with any tone marker removed")
    token_count: int
    word_usage: int = Field(..., description="Usage billed in words (ceil(tokens * 0.75))")
    moderation: ModerationVerdictSchema | None = None
    error: VoiceErrorTag | None = None
    transcript: str | None = None
    tone: Tone | None = None

    @classmethod
    def from_response(cls, response: VoiceResponse) -> "VoiceResponseSchema":
        return cls(
            audio_url=response.audio_url,
            text=response.text,
            display_text=response.display_text,
            token_count=response.token_count,
            word_usage=response.word_usage,
            moderation=(
                ModerationVerdictSchema.from_verdict(response.moderation)
                if response.moderation
                else None
            ),
            error=response.error,
            transcript=response.transcript,
            tone=response.tone,
        )


class CancelPipelineResponse(BaseModel):
    cancelled: bool


class PreloadResponse(BaseModel):
    scheduled: bool
