"""Content moderation provider implementations."""

from hrvoice.ai.providers.moderation.openai import OpenAIModerationProvider

__all__ = ["OpenAIModerationProvider"]
