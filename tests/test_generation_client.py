import asyncio
import json
from typing import Any

import pytest

from persona.client import GenerationError, TextGenerationClient


class _FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def json(self, content_type: str | None = "application/json") -> Any:
        return json.loads(self._body)

    async def __aenter__(self) -> "_FakeResponse":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class _FakeSession:
    closed = False

    def __init__(self, response: _FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, dict[str, str]]] = []

    def get(self, url: str, params: dict[str, str]) -> _FakeResponse:
        self.calls.append((url, params))
        return self.response

    async def close(self) -> None:
        self.closed = True


def _client_with(status: int, body: str) -> tuple[TextGenerationClient, _FakeSession]:
    client = TextGenerationClient("https://api.example.test/api/chatgpt")
    session = _FakeSession(_FakeResponse(status, body))
    client._session = session  # type: ignore[assignment]
    return client, session


def test_successful_completion_returns_prompt_text() -> None:
    client, session = _client_with(200, json.dumps({"success": True, "result": {"prompt": "Tch."}}))

    assert asyncio.run(client.complete("who are you?")) == "Tch."
    assert session.calls == [("https://api.example.test/api/chatgpt", {"text": "who are you?"})]


@pytest.mark.parametrize(
    ("status", "body"),
    [
        (500, json.dumps({"success": True, "result": {"prompt": "Tch."}})),
        (200, "<html>bad gateway</html>"),
        (200, json.dumps({"success": False, "result": {"prompt": "Tch."}})),
        (200, json.dumps({"success": True, "result": {}})),
        (200, json.dumps(["not", "an", "object"])),
    ],
)
def test_bad_status_or_malformed_body_raises_generation_error(status: int, body: str) -> None:
    client, _ = _client_with(status, body)

    with pytest.raises(GenerationError):
        asyncio.run(client.complete("hello"))


def test_close_releases_the_session() -> None:
    client, session = _client_with(200, "{}")

    asyncio.run(client.close())

    assert session.closed is True
    assert client._session is None
