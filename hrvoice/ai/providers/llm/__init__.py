"""LLM provider implementations."""

from hrvoice.ai.providers.llm.groq import GroqProvider
from hrvoice.ai.providers.llm.openai import OpenAIProvider

__all__ = [
    "GroqProvider",
    "OpenAIProvider",
]
