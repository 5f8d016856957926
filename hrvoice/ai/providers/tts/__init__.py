"""TTS (Text-to-Speech) provider implementations."""

from hrvoice.ai.providers.tts.openai import OpenAITTSProvider

__all__ = ["OpenAITTSProvider"]
