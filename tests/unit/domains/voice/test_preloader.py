"""Tests for the common phrase preloader."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from hrvoice.ai.providers.base import TTSResult
from hrvoice.domains.voice.services.preloader import COMMON_PHRASES, PhrasePreloader
from hrvoice.domains.voice.services.synthesis import PreloadedPhraseCache, TextToSpeechAdapter
from hrvoice.infrastructure.audio_store import AudioStore


def _build(provider, phrases=COMMON_PHRASES):
    store = AudioStore()
    cache = PreloadedPhraseCache()
    tts = TextToSpeechAdapter(provider, store, cache)
    return PhrasePreloader(tts, cache, phrases=phrases, delay_seconds=0), cache, store


def _tts_provider(**mock_kwargs) -> MagicMock:
    provider = MagicMock()
    provider.name = "stub"
    provider.synthesize = AsyncMock(**mock_kwargs)
    return provider


class TestPreload:
    @pytest.mark.asyncio
    async def test_preloads_every_phrase(self):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, cache, store = _build(provider)

        added = await preloader.preload()

        assert added == len(COMMON_PHRASES)
        assert len(cache) == len(COMMON_PHRASES)
        for phrase in COMMON_PHRASES:
            audio_id = cache.get(phrase).rsplit("/", 1)[-1]
            assert store.get(audio_id).data == b"clip"

    @pytest.mark.asyncio
    async def test_skips_cached_phrases(self):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, cache, _ = _build(provider)
        cache.set(COMMON_PHRASES[0], "/existing")

        added = await preloader.preload()

        assert added == len(COMMON_PHRASES) - 1
        assert cache.get(COMMON_PHRASES[0]) == "/existing"
        spoken = [c.args[0] for c in provider.synthesize.await_args_list]
        assert COMMON_PHRASES[0] not in spoken

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, _, _ = _build(provider)

        await preloader.preload()
        provider.synthesize.reset_mock()

        assert await preloader.preload() == 0
        provider.synthesize.assert_not_called()

    @pytest.mark.asyncio
    async def test_failures_are_skipped(self):
        provider = _tts_provider(
            side_effect=[
                RuntimeError("tts down"),
                TTSResult(audio_data=b"b", format="mp3"),
            ]
        )
        preloader, cache, _ = _build(provider, phrases=("first", "second"))

        added = await preloader.preload()

        assert added == 1
        assert "first" not in cache
        assert "second" in cache

    @pytest.mark.asyncio
    async def test_no_provider_does_nothing(self):
        preloader, cache, _ = _build(None)
        assert await preloader.preload() == 0
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_voice_is_forwarded(self):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, _, _ = _build(provider, phrases=("hello",))

        await preloader.preload(voice="nova")

        assert provider.synthesize.call_args.kwargs["voice"] == "nova"

    @pytest.mark.asyncio
    async def test_delay_between_phrases(self, monkeypatch):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, _, _ = _build(provider, phrases=("a", "b", "c"))
        preloader.delay_seconds = 0.2

        sleep = AsyncMock()
        monkeypatch.setattr(asyncio, "sleep", sleep)

        await preloader.preload()

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.2)


class TestBackgroundTask:
    @pytest.mark.asyncio
    async def test_start_runs_in_background(self):
        provider = _tts_provider(return_value=TTSResult(audio_data=b"clip", format="mp3"))
        preloader, cache, _ = _build(provider)

        assert preloader.start() is True
        assert preloader.running is True
        assert preloader.start() is False

        await preloader._task
        assert len(cache) == len(COMMON_PHRASES)
        assert preloader.running is False

    @pytest.mark.asyncio
    async def test_stop_cancels_running_task(self):
        started = asyncio.Event()

        async def slow(*_args, **_kwargs):
            started.set()
            await asyncio.sleep(10)

        provider = MagicMock()
        provider.name = "slow"
        provider.synthesize = slow
        preloader, cache, _ = _build(provider)

        preloader.start()
        await started.wait()
        await preloader.stop()

        assert preloader.running is False
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_stop_without_task(self):
        preloader, _, _ = _build(None)
        await preloader.stop()
        assert preloader.running is False
