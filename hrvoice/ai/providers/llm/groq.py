"""Chat completion through the Groq SDK (OpenAI-compatible API, Llama models)."""

import logging
import time
from typing import Any

from groq import AsyncGroq

from hrvoice.ai.providers.base import LLMMessage, LLMProvider, LLMResponse
from hrvoice.ai.providers.registry import register_llm_provider

logger = logging.getLogger("llm")


@register_llm_provider
class GroqProvider(LLMProvider):
    DEFAULT_MODEL = "llama-3.1-8b-instant"

    @classmethod
    def resolve_model(cls, model: str | None) -> str | None:
        """Use ``DEFAULT_MODEL`` for blank or OpenAI (``gpt-*``) model IDs."""
        requested = (model or "").strip()
        if requested.startswith("gpt-"):
            requested = ""
        return requested or cls.DEFAULT_MODEL

    def __init__(self, api_key: str, client: AsyncGroq | None = None) -> None:
        self._client = client or AsyncGroq(api_key=api_key)

    @property
    def name(self) -> str:
        return "groq"

    async def aclose(self) -> None:
        await self._client.close()

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs: Any,
    ) -> LLMResponse:
        resolved = type(self).resolve_model(model)
        options = dict(kwargs)
        if options.get("response_format"):
            options["response_format"] = {"type": options["response_format"]}
        else:
            options.pop("response_format", None)

        started = time.time()
        try:
            completion = await self._client.chat.completions.create(
                model=resolved,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
                **options,
            )
        except Exception as e:
            logger.error(
                "Groq completion failed",
                extra={
                    "service": "llm",
                    "provider": self.name,
                    "model": resolved,
                    "error_type": type(e).__name__,
                    "duration_ms": int((time.time() - started) * 1000),
                },
            )
            raise

        choice = completion.choices[0]
        usage = completion.usage
        result = LLMResponse(
            content=choice.message.content or "",
            model=resolved,
            tokens_in=usage.prompt_tokens if usage else 0,
            tokens_out=usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason,
        )

        logger.info(
            "Groq completion received",
            extra={
                "service": "llm",
                "provider": self.name,
                "model": resolved,
                "tokens_in": result.tokens_in,
                "tokens_out": result.tokens_out,
                "duration_ms": int((time.time() - started) * 1000),
            },
        )
        return result
