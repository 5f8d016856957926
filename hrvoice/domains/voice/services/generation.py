"""Response generation stage: chat completion for an annotated transcript."""

import logging
import time

from hrvoice.ai.providers.base import LLMMessage, LLMProvider
from hrvoice.domains.voice.models import (
    FALLBACK_TOKEN_COUNT,
    EmotionalAnnotation,
    GenerationResult,
)
from hrvoice.domains.voice.services.timeouts import call_with_timeout
from hrvoice.infrastructure.logging import redact_sensitive
from hrvoice.prompts.assistant_modes import get_system_prompt_for_mode, personalize

logger = logging.getLogger("llm")

GENERATION_FAILED_MESSAGE = (
    "Sorry, I encountered an error while generating a response. Please try again later."
)
NOT_CONFIGURED_MESSAGE = (
    "OpenAI API key is not set. Please add it to your environment variables."
)


class ResponseGenerator:
    """Produces the assistant reply for a voice turn.

    Provider errors and timeouts never escape: they become a canned apology
    flagged ``degraded``. A missing provider yields the not-configured notice.
    """

    def __init__(
        self,
        provider: LLMProvider | None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 500,
        response_format: str | None = None,
        timeout_seconds: float | None = 60.0,
    ) -> None:
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.response_format = response_format or None
        self.timeout_seconds = timeout_seconds

    def build_messages(
        self,
        annotation: EmotionalAnnotation,
        mode: str,
        system_prompt_override: str | None = None,
        user_name: str | None = None,
    ) -> list[LLMMessage]:
        system_prompt = personalize(
            system_prompt_override or get_system_prompt_for_mode(mode),
            user_name,
        )
        return [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=annotation.annotated_text),
        ]

    async def generate(
        self,
        annotation: EmotionalAnnotation,
        mode: str,
        system_prompt_override: str | None = None,
        user_name: str | None = None,
    ) -> GenerationResult:
        if self.provider is None:
            logger.error(
                "LLM provider not configured",
                extra={"service": "llm", "mode": mode, "error_code": "SERVICE_NOT_CONFIGURED"},
            )
            return GenerationResult(
                content=NOT_CONFIGURED_MESSAGE,
                token_count=FALLBACK_TOKEN_COUNT,
                degraded=True,
            )

        messages = self.build_messages(annotation, mode, system_prompt_override, user_name)
        kwargs = {}
        if self.response_format:
            kwargs["response_format"] = self.response_format

        start_time = time.time()
        try:
            response = await call_with_timeout(
                self.provider.generate(
                    messages,
                    model=self.model,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    **kwargs,
                ),
                provider=self.provider.name,
                operation="generate",
                timeout_seconds=self.timeout_seconds,
            )
        except Exception as e:
            logger.error(
                "Response generation failed",
                extra={
                    "service": "llm",
                    "provider": self.provider.name,
                    "mode": mode,
                    "error_type": type(e).__name__,
                    "error": redact_sensitive(str(e)),
                    "duration_ms": int((time.time() - start_time) * 1000),
                },
            )
            return GenerationResult(
                content=GENERATION_FAILED_MESSAGE,
                token_count=FALLBACK_TOKEN_COUNT,
                degraded=True,
            )

        logger.info(
            "Response generated",
            extra={
                "service": "llm",
                "provider": self.provider.name,
                "model": response.model,
                "mode": mode,
                "tokens_in": response.tokens_in,
                "tokens_out": response.tokens_out,
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )

        return GenerationResult(content=response.content, token_count=response.total_tokens)
