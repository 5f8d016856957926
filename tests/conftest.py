"""Shared test configuration."""

import os

import pytest

# Tests never reach hosted services and never warm the phrase cache on startup.
os.environ["ENVIRONMENT"] = "development"
os.environ["MOCK_EXTERNAL_CALLS"] = "true"
os.environ["PRELOAD_ENABLED"] = "false"
os.environ["STUB_STT_DELAY_MS"] = "0"
os.environ["STUB_LLM_DELAY_MS"] = "0"
os.environ["STUB_TTS_DELAY_MS"] = "0"

from hrvoice.ai.providers import clear_provider_cache  # noqa: E402
from hrvoice.config import get_settings  # noqa: E402
from hrvoice.core.di import get_container  # noqa: E402
from hrvoice.domains.voice.models import VoiceSessionConfig  # noqa: E402


class FakeClock:
    """Manually advanced replacement for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> VoiceSessionConfig:
    return VoiceSessionConfig(conversation_id="conv-1", user_id="user-1")


@pytest.fixture(autouse=True)
def _reset_cached_singletons():
    """Drop cached settings, providers and container between tests."""
    get_settings.cache_clear()
    clear_provider_cache()
    get_container.cache_clear()
    yield
    get_settings.cache_clear()
    clear_provider_cache()
    get_container.cache_clear()
