"""STT (Speech-to-Text) provider implementations."""

from hrvoice.ai.providers.stt.groq_whisper import GroqWhisperSTTProvider
from hrvoice.ai.providers.stt.openai_whisper import OpenAIWhisperSTTProvider

__all__ = [
    "GroqWhisperSTTProvider",
    "OpenAIWhisperSTTProvider",
]
