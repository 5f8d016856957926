"""Chat completions over the OpenAI REST API."""

import logging
import time
from typing import Any

import httpx

from hrvoice.ai.providers.base import LLMMessage, LLMProvider, LLMResponse
from hrvoice.ai.providers.openai_http import DEFAULT_OPENAI_BASE_URL, OpenAIRestClient
from hrvoice.ai.providers.registry import register_llm_provider

logger = logging.getLogger("llm")


def _completion_to_response(body: dict[str, Any], requested_model: str) -> LLMResponse:
    choice = (body.get("choices") or [{}])[0]
    usage = body.get("usage") or {}
    return LLMResponse(
        content=(choice.get("message") or {}).get("content") or "",
        model=str(body.get("model") or requested_model),
        tokens_in=int(usage.get("prompt_tokens") or 0),
        tokens_out=int(usage.get("completion_tokens") or 0),
        finish_reason=choice.get("finish_reason"),
    )


@register_llm_provider
class OpenAIProvider(OpenAIRestClient, LLMProvider):
    DEFAULT_MODEL = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, client=client)

    @property
    def name(self) -> str:
        return "openai"

    async def generate(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        **kwargs: Any,
    ) -> LLMResponse:
        resolved = type(self).resolve_model(model)
        response_format = kwargs.pop("response_format", None)
        payload: dict[str, Any] = {
            "model": resolved,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if response_format:
            payload["response_format"] = {"type": response_format}

        started = time.time()
        response = await self._post("/chat/completions", payload)
        result = _completion_to_response(response.json(), resolved)

        logger.info(
            "OpenAI completion received",
            extra={
                "service": "llm",
                "provider": self.name,
                "model": result.model,
                "tokens_in": result.tokens_in,
                "tokens_out": result.tokens_out,
                "duration_ms": int((time.time() - started) * 1000),
                "metadata": {"message_count": len(messages)},
            },
        )
        return result
