"""Tests for the in-memory audio store."""

from hrvoice.infrastructure.audio_store import AudioStore


class TestAudioStore:
    def test_put_returns_dereferenceable_url(self):
        store = AudioStore(url_prefix="/api/v1/voice/audio/")
        url = store.put(b"mp3-bytes", format="mp3")

        assert url.startswith("/api/v1/voice/audio/")
        audio_id = url.rsplit("/", 1)[-1]
        clip = store.get(audio_id)
        assert clip is not None
        assert clip.data == b"mp3-bytes"
        assert clip.media_type == "audio/mpeg"

    def test_unknown_id(self):
        assert AudioStore().get("missing") is None

    def test_drops_oldest_when_full(self):
        store = AudioStore(max_items=2)
        first = store.put(b"1").rsplit("/", 1)[-1]
        second = store.put(b"2").rsplit("/", 1)[-1]
        third = store.put(b"3").rsplit("/", 1)[-1]

        assert store.get(first) is None
        assert store.get(second) is not None
        assert store.get(third) is not None
        assert len(store) == 2

    def test_pinned_clips_survive_eviction(self):
        store = AudioStore(max_items=1)
        pinned = store.put(b"phrase", pinned=True).rsplit("/", 1)[-1]
        store.put(b"a")
        store.put(b"b")

        assert store.get(pinned).data == b"phrase"
        assert len(store) == 2
