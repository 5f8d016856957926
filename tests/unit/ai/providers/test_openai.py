"""Tests for the OpenAI REST providers using httpx.MockTransport."""

import json

import httpx
import pytest

from hrvoice.ai.providers.base import LLMMessage
from hrvoice.ai.providers.llm.openai import OpenAIProvider
from hrvoice.ai.providers.moderation.openai import OpenAIModerationProvider
from hrvoice.ai.providers.stt.openai_whisper import OpenAIWhisperSTTProvider
from hrvoice.ai.providers.tts.openai import OpenAITTSProvider


def _client(handler, requests: list[httpx.Request]) -> httpx.AsyncClient:
    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(record))


class TestOpenAIWhisperSTTProvider:
    @pytest.mark.asyncio
    async def test_transcribe_posts_multipart(self):
        requests: list[httpx.Request] = []
        client = _client(
            lambda r: httpx.Response(200, json={"text": "Hello there?", "duration": 1.5, "language": "en"}),
            requests,
        )
        provider = OpenAIWhisperSTTProvider(api_key="sk-test", client=client)

        result = await provider.transcribe(b"audio-bytes", format="webm", user_token="tok-1")

        assert result.transcript == "Hello there?"
        assert result.duration_ms == 1500
        assert result.language == "en"

        request = requests[0]
        assert request.url.path == "/v1/audio/transcriptions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["X-User-Token"] == "tok-1"
        body = request.read()
        assert b"whisper-1" in body
        assert b"verbose_json" in body
        assert b"audio-bytes" in body

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        client = _client(lambda r: httpx.Response(500, json={"error": "boom"}), [])
        provider = OpenAIWhisperSTTProvider(api_key="sk-test", client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await provider.transcribe(b"audio")


class TestOpenAIProvider:
    @pytest.mark.asyncio
    async def test_generate(self):
        requests: list[httpx.Request] = []
        client = _client(
            lambda r: httpx.Response(
                200,
                json={
                    "model": "gpt-3.5-turbo",
                    "choices": [{"message": {"content": "Start by listing your wins."}, "finish_reason": "stop"}],
                    "usage": {"prompt_tokens": 30, "completion_tokens": 12},
                },
            ),
            requests,
        )
        provider = OpenAIProvider(api_key="sk-test", client=client)

        response = await provider.generate(
            [LLMMessage(role="system", content="sys"), LLMMessage(role="user", content="hi")],
            model="gpt-3.5-turbo",
            temperature=0.7,
            max_tokens=500,
            response_format="json_object",
        )

        assert response.content == "Start by listing your wins."
        assert response.total_tokens == 42
        assert response.finish_reason == "stop"

        payload = json.loads(requests[0].read())
        assert requests[0].url.path == "/v1/chat/completions"
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["messages"][0] == {"role": "system", "content": "sys"}
        assert payload["temperature"] == 0.7
        assert payload["max_tokens"] == 500
        assert payload["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        client = _client(lambda r: httpx.Response(429), [])
        provider = OpenAIProvider(api_key="sk-test", client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await provider.generate([LLMMessage(role="user", content="hi")])


class TestOpenAITTSProvider:
    @pytest.mark.asyncio
    async def test_synthesize(self):
        requests: list[httpx.Request] = []
        client = _client(lambda r: httpx.Response(200, content=b"ID3audio"), requests)
        provider = OpenAITTSProvider(api_key="sk-test", client=client)

        result = await provider.synthesize("Hello", voice="nova")

        assert result.audio_data == b"ID3audio"
        assert result.format == "mp3"
        payload = json.loads(requests[0].read())
        assert requests[0].url.path == "/v1/audio/speech"
        assert payload == {"model": "tts-1", "voice": "nova", "input": "Hello", "response_format": "mp3"}

    @pytest.mark.asyncio
    async def test_unknown_voice_falls_back_to_alloy(self):
        requests: list[httpx.Request] = []
        client = _client(lambda r: httpx.Response(200, content=b"x"), requests)
        provider = OpenAITTSProvider(api_key="sk-test", client=client)

        await provider.synthesize("Hello", voice="robot")

        assert json.loads(requests[0].read())["voice"] == "alloy"


class TestOpenAIModerationProvider:
    @pytest.mark.asyncio
    async def test_moderate(self):
        requests: list[httpx.Request] = []
        client = _client(
            lambda r: httpx.Response(
                200,
                json={
                    "results": [
                        {
                            "flagged": True,
                            "categories": {"harassment": True, "violence": False},
                            "category_scores": {"harassment": 0.91, "violence": 0.02},
                        }
                    ]
                },
            ),
            requests,
        )
        provider = OpenAIModerationProvider(api_key="sk-test", client=client)

        result = await provider.moderate("some text")

        assert result.flagged is True
        assert result.categories == {"harassment": True, "violence": False}
        assert result.category_scores == {"harassment": 0.91, "violence": 0.02}
        assert json.loads(requests[0].read()) == {"input": "some text"}

    @pytest.mark.asyncio
    async def test_non_ok_status_raises(self):
        client = _client(lambda r: httpx.Response(503), [])
        provider = OpenAIModerationProvider(api_key="sk-test", client=client)

        with pytest.raises(httpx.HTTPStatusError):
            await provider.moderate("text")
