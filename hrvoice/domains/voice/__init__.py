"""Voice domain - turns a recorded clip into a spoken HR-assistant reply.

Models:
    - VoiceSessionConfig, EmotionalAnnotation, VoiceResponse and friends

Services:
    - VoicePipelineOrchestrator: rate limit -> STT -> moderation -> cache -> LLM -> TTS
"""

from hrvoice.domains.voice.models import (
    EmotionalAnnotation,
    ModerationVerdict,
    Tone,
    VoiceErrorTag,
    VoiceResponse,
    VoiceSessionConfig,
)
from hrvoice.domains.voice.services import VoicePipelineOrchestrator

__all__ = [
    "EmotionalAnnotation",
    "ModerationVerdict",
    "Tone",
    "VoiceErrorTag",
    "VoiceResponse",
    "VoiceSessionConfig",
    "VoicePipelineOrchestrator",
]
