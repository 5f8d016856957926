"""Content moderation stage. Fails open on every error path."""

import logging

from hrvoice.ai.providers.base import ModerationProvider
from hrvoice.domains.voice.models import ModerationVerdict
from hrvoice.domains.voice.services.timeouts import call_with_timeout
from hrvoice.infrastructure.logging import redact_sensitive

logger = logging.getLogger("moderation")


class ContentModerator:
    def __init__(
        self,
        provider: ModerationProvider | None,
        timeout_seconds: float | None = 15.0,
    ) -> None:
        self.provider = provider
        self.timeout_seconds = timeout_seconds

    async def moderate(self, text: str) -> ModerationVerdict:
        """Classify ``text``; an unavailable or failing provider yields not-flagged."""
        if self.provider is None:
            return ModerationVerdict(flagged=False)

        try:
            result = await call_with_timeout(
                self.provider.moderate(text),
                provider=self.provider.name,
                operation="moderate",
                timeout_seconds=self.timeout_seconds,
            )
        except Exception as e:
            logger.warning(
                "Moderation unavailable, allowing content",
                extra={
                    "service": "moderation",
                    "provider": self.provider.name,
                    "error_type": type(e).__name__,
                    "error": redact_sensitive(str(e)),
                },
            )
            return ModerationVerdict(flagged=False)

        categories = [name for name, hit in result.categories.items() if hit is True]
        score = max(result.category_scores.values()) if result.category_scores else None

        if result.flagged:
            logger.info(
                "Transcript flagged by moderation",
                extra={
                    "service": "moderation",
                    "provider": self.provider.name,
                    "metadata": {"categories": categories, "score": score},
                },
            )

        return ModerationVerdict(flagged=bool(result.flagged), categories=categories, score=score)
