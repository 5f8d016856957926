"""Error types for the voice assistant.

    AppError
    ├── ConfigurationError
    │   └── ServiceNotConfiguredError
    ├── ProviderError
    │   └── ProviderTimeoutError
    └── PipelineCancelledError

Adapters raise these and the voice orchestrator turns them into error tags on
the returned ``VoiceResponse``; none of them reach the HTTP layer.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base for application errors.

    ``code`` is machine-readable, ``details`` is structured context that goes
    into the log line, ``retryable`` says whether a later attempt may succeed.
    """

    code: str = "APP_ERROR"
    message: str = "An unexpected error occurred"
    retryable: bool = False

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool | None = None,
    ) -> None:
        self.message = message or type(self).message
        self.details = dict(details or {})
        if retryable is not None:
            self.retryable = retryable
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(AppError):
    """Settings or credentials prevent an operation."""

    code = "CONFIGURATION_ERROR"
    message = "Invalid configuration"


class ServiceNotConfiguredError(ConfigurationError):
    """A capability was used while its provider has no API key (and mocks are off)."""

    code = "SERVICE_NOT_CONFIGURED"
    message = "Service not configured"

    def __init__(self, capability: str, expected_env_var: str | None = None) -> None:
        self.capability = capability
        self.expected_env_var = expected_env_var
        details: dict[str, Any] = {"capability": capability}
        if expected_env_var:
            details["expected_env_var"] = expected_env_var
        super().__init__(
            message=f"{capability} service is not configured",
            details=details,
        )


class ProviderError(AppError):
    """Raised when an external provider returns an unusable result."""

    code = "PROVIDER_ERROR"
    message = "Provider call failed"
    retryable = True

    def __init__(
        self,
        provider: str,
        operation: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.provider = provider
        self.operation = operation
        full_details = {"provider": provider, "operation": operation}
        if details:
            full_details.update(details)
        super().__init__(
            message=f"{provider} {operation} failed: {reason}",
            details=full_details,
        )


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its configured timeout."""

    code = "PROVIDER_TIMEOUT"
    message = "Provider call timed out"

    def __init__(self, provider: str, operation: str, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            provider=provider,
            operation=operation,
            reason=f"no response within {timeout_seconds}s",
            details={"timeout_seconds": timeout_seconds},
        )


class PipelineCancelledError(AppError):
    """Raised when a cancelled voice pipeline run reaches or is waiting on a stage."""

    code = "PIPELINE_CANCELLED"
    message = "Voice pipeline was cancelled"

    def __init__(self, conversation_id: str, stage: str) -> None:
        self.conversation_id = conversation_id
        self.stage = stage
        super().__init__(
            message=f"Voice pipeline for {conversation_id} cancelled at {stage}",
            details={"conversation_id": conversation_id, "stage": stage},
        )


__all__ = [
    "AppError",
    "ConfigurationError",
    "ServiceNotConfiguredError",
    "ProviderError",
    "ProviderTimeoutError",
    "PipelineCancelledError",
]
