"""Bounded, TTL-checked memo of completed voice responses."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from hrvoice.domains.voice.models import VoiceResponse

logger = logging.getLogger("voice")

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry:
    response: VoiceResponse
    timestamp: float


def make_key(mode: str, annotated_text: str) -> str:
    """Cache key for a turn: assistant mode plus the tone-annotated transcript."""
    return f"{mode}:{annotated_text}"


class ResponseCache:
    """Voice response cache with insertion-time eviction and lazy expiry.

    - ``get`` treats entries older than ``ttl_seconds`` as absent but leaves
      them resident.
    - ``put`` into a full cache evicts the entry with the oldest
      insertion timestamp first, even when ``key`` is already resident.
      Reads never refresh timestamps.
    - Responses are copied on the way in and on the way out.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> VoiceResponse | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now - entry.timestamp >= self.ttl_seconds:
                return None
            return entry.response.copy()

    def put(self, key: str, response: VoiceResponse) -> None:
        now = self._clock()
        evicted: str | None = None

        with self._lock:
            if self._entries and len(self._entries) >= self.max_size:
                evicted = min(self._entries, key=lambda k: self._entries[k].timestamp)
                del self._entries[evicted]
            self._entries[key] = CacheEntry(response=response.copy(), timestamp=now)

        if evicted is not None:
            logger.debug(
                "Evicted oldest voice response",
                extra={"service": "voice", "metadata": {"key": evicted}},
            )

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
