"""Shared httpx plumbing for the OpenAI REST providers."""

from typing import Any

import httpx

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"


class OpenAIRestClient:
    """Lazily created ``httpx.AsyncClient`` plus auth headers for api.openai.com."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get_headers(self, json_body: bool = True, user_token: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = {"Authorization": f"Bearer {self._api_key}"}
        if json_body:
            headers["Content-Type"] = "application/json"
        if user_token:
            headers["X-User-Token"] = user_token
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _post(self, path: str, payload: dict[str, Any]) -> httpx.Response:
        """POST a JSON body; non-2xx statuses raise ``httpx.HTTPStatusError``."""
        response = await self._get_client().post(
            self._url(path), headers=self._get_headers(), json=payload
        )
        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
