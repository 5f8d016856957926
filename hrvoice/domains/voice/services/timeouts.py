"""Per-call timeouts for provider requests."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from hrvoice.exceptions import ProviderTimeoutError

T = TypeVar("T")


async def call_with_timeout(
    awaitable: Awaitable[T],
    *,
    provider: str,
    operation: str,
    timeout_seconds: float | None,
) -> T:
    """Await a provider call, raising ProviderTimeoutError once ``timeout_seconds`` pass.

    A ``None`` or non-positive timeout disables the bound.
    """
    if not timeout_seconds or timeout_seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except TimeoutError as e:
        raise ProviderTimeoutError(provider, operation, timeout_seconds) from e
