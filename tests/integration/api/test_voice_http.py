"""End-to-end tests for the voice HTTP endpoints running on stub providers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from hrvoice.core.di import get_container
from hrvoice.domains.voice.models import VoiceResponse
from hrvoice.domains.voice.services.orchestrator import (
    EMPTY_TRANSCRIPTION_MESSAGE,
    MODERATION_FLAGGED_MESSAGE,
    RATE_LIMITED_MESSAGE,
)
from hrvoice.main import app

TRANSCRIPT = "How do I prepare for my performance review?"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STUB_STT_FORCE_TRANSCRIPT", TRANSCRIPT)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _process(client, conversation_id="conv-1", user_id="user-1", mode="general", **extra):
    data = {"conversation_id": conversation_id, "user_id": user_id, "mode": mode, **extra}
    return client.post(
        "/api/v1/voice/process",
        files={"audio": ("clip.webm", b"fake-audio", "audio/webm")},
        data=data,
    )


class TestProcessVoice:
    def test_full_turn(self, client):
        response = _process(client, mode="performance-advisor")

        assert response.status_code == 200
        body = response.json()
        assert body["error"] is None
        assert body["transcript"] == TRANSCRIPT
        assert body["tone"] == "questioning"
        assert body["moderation"]["flagged"] is False
        assert body["audio_url"].startswith("/api/v1/voice/audio/")
        assert body["text"]
        assert body["token_count"] > 0
        assert body["word_usage"] > 0

    def test_audio_url_serves_clip(self, client):
        body = _process(client).json()

        audio = client.get(body["audio_url"])

        assert audio.status_code == 200
        assert audio.headers["content-type"] == "audio/mpeg"
        assert audio.content == b"\x00" * 1024

    def test_repeat_turn_reuses_cached_reply(self, client):
        first = _process(client).json()
        second = _process(client).json()

        assert second == first

    def test_empty_upload_continues_by_text(self, client):
        response = client.post(
            "/api/v1/voice/process",
            files={"audio": ("clip.webm", b"", "audio/webm")},
            data={"conversation_id": "conv-1", "user_id": "user-empty"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["error"] == "empty_transcription"
        assert body["text"] == EMPTY_TRANSCRIPTION_MESSAGE
        assert body["audio_url"] == ""

    def test_empty_uploads_count_toward_rate_limit(self, client):
        def _empty():
            return client.post(
                "/api/v1/voice/process",
                files={"audio": ("clip.webm", b"", "audio/webm")},
                data={"conversation_id": "conv-1", "user_id": "user-empty"},
            ).json()

        for _ in range(10):
            assert _empty()["error"] == "empty_transcription"

        assert _empty()["error"] == "rate_limited"

    def test_missing_conversation_id(self, client):
        response = client.post(
            "/api/v1/voice/process",
            files={"audio": ("clip.webm", b"fake-audio", "audio/webm")},
        )

        assert response.status_code == 422

    def test_blank_transcript(self, client, monkeypatch):
        monkeypatch.setenv("STUB_STT_EMPTY_TRANSCRIPT", "true")

        body = _process(client).json()

        assert body["error"] == "empty_transcription"
        assert body["text"] == EMPTY_TRANSCRIPTION_MESSAGE
        assert body["audio_url"] == ""
        assert body["token_count"] == 20
        assert body["word_usage"] == 15

    def test_stt_failure(self, client, monkeypatch):
        monkeypatch.setenv("STUB_STT_MODE", "error")

        body = _process(client).json()

        assert body["error"] == "speech_to_text_failed"

    def test_flagged_transcript(self, client, monkeypatch):
        monkeypatch.setenv("STUB_MODERATION_FLAG_TERM", "performance")

        body = _process(client).json()

        assert body["error"] is None
        assert body["text"] == MODERATION_FLAGGED_MESSAGE
        assert body["moderation"]["flagged"] is True
        assert body["moderation"]["categories"] == ["harassment"]

    def test_tts_failure_keeps_text(self, client, monkeypatch):
        monkeypatch.setenv("STUB_TTS_FAIL", "true")

        body = _process(client).json()

        assert body["error"] == "text_to_speech_failed"
        assert body["audio_url"] == ""
        assert body["text"].endswith("(Note: Audio generation failed. Let's continue by text.)")

    def test_rate_limit(self, client):
        for index in range(10):
            assert _process(client, conversation_id=f"c{index}").json()["error"] is None

        body = _process(client, conversation_id="c-last").json()

        assert body["error"] == "rate_limited"
        assert body["text"] == RATE_LIMITED_MESSAGE

    def test_user_token_header_is_forwarded(self, client):
        orchestrator = MagicMock()
        orchestrator.process_voice_input = AsyncMock(
            return_value=VoiceResponse(audio_url="/a", text="ok", token_count=4)
        )
        container = MagicMock()
        container.orchestrator = orchestrator
        app.dependency_overrides[get_container] = lambda: container

        response = client.post(
            "/api/v1/voice/process",
            files={"audio": ("clip.wav", b"fake-audio", "audio/wav")},
            data={"conversation_id": "conv-9", "user_id": "u", "voice": "nova"},
            headers={"X-User-Token": "secret"},
        )

        assert response.status_code == 200
        assert response.json()["word_usage"] == 3
        args, kwargs = orchestrator.process_voice_input.call_args
        assert args[0] == b"fake-audio"
        assert args[1].voice == "nova"
        assert args[2] == "general"
        assert kwargs == {"user_token": "secret", "audio_format": "wav"}


class TestAudioAndControl:
    def test_unknown_audio(self, client):
        assert client.get("/api/v1/voice/audio/does-not-exist").status_code == 404

    def test_cancel_without_active_turn(self, client):
        response = client.post("/api/v1/voice/cancel/conv-1")

        assert response.status_code == 200
        assert response.json() == {"cancelled": False}

    def test_preload_is_scheduled(self, client):
        response = client.post("/api/v1/voice/preload")

        assert response.status_code == 200
        assert response.json() == {"scheduled": True}
