"""Background warm-up of audio for frequently spoken phrases."""

import asyncio
import contextlib
import logging

from hrvoice.domains.voice.services.synthesis import PreloadedPhraseCache, TextToSpeechAdapter

logger = logging.getLogger("tts")

COMMON_PHRASES = (
    "I'm sorry, I didn't catch that.",
    "Could you please repeat that?",
    "Let me think about that for a moment.",
    "I'm processing your request.",
    "Is there anything else I can help you with?",
)


class PhrasePreloader:
    """Synthesizes ``COMMON_PHRASES`` into the preloaded phrase cache.

    Runs as a background task owned by the host application: ``start`` in the
    lifespan startup, ``stop`` on shutdown.
    """

    def __init__(
        self,
        tts: TextToSpeechAdapter,
        phrase_cache: PreloadedPhraseCache,
        phrases: tuple[str, ...] = COMMON_PHRASES,
        delay_seconds: float = 0.2,
    ) -> None:
        self.tts = tts
        self.phrase_cache = phrase_cache
        self.phrases = phrases
        self.delay_seconds = delay_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def preload(self, voice: str | None = None) -> int:
        """Synthesize phrases missing from the cache; returns how many were added."""
        if self.tts.provider is None:
            logger.info(
                "Skipping phrase preload, TTS not configured",
                extra={"service": "tts", "operation": "preload"},
            )
            return 0

        pending = [p for p in self.phrases if p not in self.phrase_cache]
        if not pending:
            return 0

        logger.info(
            f"Preloading {len(pending)} common audio phrases",
            extra={"service": "tts", "operation": "preload"},
        )

        loaded = 0
        for index, phrase in enumerate(pending):
            if index:
                await asyncio.sleep(self.delay_seconds)
            try:
                url = await self.tts.render(phrase, voice=voice, pinned=True)
            except Exception as e:
                logger.warning(
                    "Failed to preload phrase",
                    extra={
                        "service": "tts",
                        "operation": "preload",
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "metadata": {"phrase": phrase},
                    },
                )
                continue
            self.phrase_cache.set(phrase, url)
            loaded += 1

        logger.info(
            f"Preloaded {len(self.phrase_cache)} common audio phrases",
            extra={"service": "tts", "operation": "preload", "metadata": {"added": loaded}},
        )
        return loaded

    def start(self, voice: str | None = None) -> bool:
        """Schedule ``preload`` in the background; False if a run is already active."""
        if self.running:
            return False
        self._task = asyncio.create_task(self.preload(voice), name="phrase-preload")
        self._task.add_done_callback(self._log_task_failure)
        return True

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    @staticmethod
    def _log_task_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Phrase preload task failed",
                extra={"service": "tts", "error_type": type(exc).__name__, "error": str(exc)},
            )
