from __future__ import annotations

import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    pass


class TextGenerationClient:
    """Single-shot client for the prompt-completion endpoint.

    The endpoint is queried with ``GET <url>?text=<prompt>`` and answers with
    ``{"success": true, "result": {"prompt": "<generated text>"}}``.
    """

    def __init__(self, api_url: str, timeout_seconds: float = 30.0) -> None:
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def complete(self, prompt: str) -> str:
        session = await self._get_session()
        async with session.get(self.api_url, params={"text": prompt}) as response:
            if not 200 <= response.status < 300:
                raise GenerationError(f"API call failed with status {response.status}")
            try:
                payload: Any = await response.json(content_type=None)
            except ValueError as exc:
                raise GenerationError("API returned a non-JSON body") from exc

        return _extract_generated_text(payload)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


def _extract_generated_text(payload: Any) -> str:
    if not isinstance(payload, dict) or not payload.get("success"):
        raise GenerationError("Invalid API response")
    result = payload.get("result")
    text = result.get("prompt") if isinstance(result, dict) else None
    if not isinstance(text, str) or not text:
        raise GenerationError("Invalid API response")
    return text
