"""In-memory store for synthesized audio clips served over HTTP."""

import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass

logger = logging.getLogger("tts")

AUDIO_MIME_TYPES = {
    "mp3": "audio/mpeg",
    "opus": "audio/ogg",
    "aac": "audio/aac",
    "flac": "audio/flac",
    "wav": "audio/wav",
    "pcm": "audio/L16",
}


@dataclass(frozen=True)
class StoredAudio:
    audio_id: str
    data: bytes
    format: str

    @property
    def media_type(self) -> str:
        return AUDIO_MIME_TYPES.get(self.format, "application/octet-stream")


class AudioStore:
    """Maps opaque audio IDs to clip bytes.

    Regular clips are kept in insertion order and the oldest is dropped once
    ``max_items`` is exceeded. Pinned clips (preloaded phrases) are held
    separately and never evicted.
    """

    def __init__(self, max_items: int = 1000, url_prefix: str = "/api/v1/voice/audio") -> None:
        self.max_items = max_items
        self.url_prefix = url_prefix.rstrip("/")
        self._clips: OrderedDict[str, StoredAudio] = OrderedDict()
        self._pinned: dict[str, StoredAudio] = {}
        self._lock = threading.Lock()

    def put(self, data: bytes, format: str = "mp3", pinned: bool = False) -> str:
        """Store a clip and return the URL it is served from."""
        audio_id = uuid.uuid4().hex
        clip = StoredAudio(audio_id=audio_id, data=data, format=format)

        with self._lock:
            if pinned:
                self._pinned[audio_id] = clip
            else:
                self._clips[audio_id] = clip
                while len(self._clips) > self.max_items:
                    dropped, _ = self._clips.popitem(last=False)
                    logger.debug(
                        "Dropped oldest audio clip",
                        extra={"service": "tts", "metadata": {"audio_id": dropped}},
                    )

        return self.url_for(audio_id)

    def get(self, audio_id: str) -> StoredAudio | None:
        with self._lock:
            return self._pinned.get(audio_id) or self._clips.get(audio_id)

    def url_for(self, audio_id: str) -> str:
        return f"{self.url_prefix}/{audio_id}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._clips) + len(self._pinned)
