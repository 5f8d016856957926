"""OpenAI moderation provider implementation using the REST API."""

import logging
import time

import httpx

from hrvoice.ai.providers.base import ModerationProvider, ModerationResult
from hrvoice.ai.providers.openai_http import DEFAULT_OPENAI_BASE_URL, OpenAIRestClient
from hrvoice.ai.providers.registry import register_moderation_provider

logger = logging.getLogger("moderation")


@register_moderation_provider
class OpenAIModerationProvider(OpenAIRestClient, ModerationProvider):
    """OpenAI content classification via ``POST /moderations``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, client=client)

    @property
    def name(self) -> str:
        return "openai"

    async def moderate(self, text: str) -> ModerationResult:
        start_time = time.time()

        data = (await self._post("/moderations", {"input": text})).json()
        results = data.get("results") or []
        if not results:
            raise ValueError("Moderation response contained no results")
        result = results[0]

        categories = {str(k): bool(v) for k, v in (result.get("categories") or {}).items()}
        scores = {
            str(k): float(v)
            for k, v in (result.get("category_scores") or {}).items()
            if isinstance(v, (int, float))
        }

        logger.debug(
            "OpenAI moderation complete",
            extra={
                "service": "moderation",
                "provider": self.name,
                "latency_ms": int((time.time() - start_time) * 1000),
                "metadata": {"flagged": bool(result.get("flagged"))},
            },
        )

        return ModerationResult(
            flagged=bool(result.get("flagged")),
            categories=categories,
            category_scores=scores,
        )
