"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from recipe_nutrition.adapters.ollama_client import (
    OllamaNutritionClient,
    extract_json_object,
)
from recipe_nutrition.services.nutrition import LlmUnavailableError


class _FakeCompletions:
    def __init__(self, content: str | None) -> None:
        self.content = content
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        message = type("Message", (), {"content": self.content})()
        choice = type("Choice", (), {"message": message})()
        return type("Resp", (), {"choices": [choice]})()


class _FakeOpenAI:
    def __init__(self, content: str | None = None) -> None:
        self.chat = type("Chat", (), {})()
        self.chat.completions = _FakeCompletions(content)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _tags_client(models: list[dict[str, str]]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(200, json={"models": models})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_ollama_ensure_model_accepts_tagged_name() -> None:
    client = OllamaNutritionClient(
        client=_FakeOpenAI(),
        http_client=_tags_client([{"name": "mistral:latest"}]),
        base_url="http://ollama.test:11434",
    )

    asyncio.run(client.ensure_model("mistral"))


def test_ollama_ensure_model_rejects_missing_model() -> None:
    client = OllamaNutritionClient(
        client=_FakeOpenAI(),
        http_client=_tags_client([{"name": "llama3:8b"}]),
        base_url="http://ollama.test:11434",
    )

    with pytest.raises(LlmUnavailableError, match="ollama pull mistral"):
        asyncio.run(client.ensure_model("mistral"))


def test_ollama_ensure_model_raises_on_server_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    client = OllamaNutritionClient(
        client=_FakeOpenAI(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        base_url="http://ollama.test:11434",
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.ensure_model("mistral"))


def test_ollama_complete_json_parses_reply() -> None:
    payload = {"nutrition": {"calories": 300, "protein": 10, "carbs": 40, "fat": 11}}
    fake_openai = _FakeOpenAI(f"Here you go:\n{json.dumps(payload)}\nEnjoy!")
    client = OllamaNutritionClient(
        client=fake_openai,
        http_client=_tags_client([]),
        base_url="http://ollama.test:11434",
    )

    result = asyncio.run(
        client.complete_json(model="mistral", prompt="Estimate", temperature=0.1)
    )

    assert result == payload
    sent = fake_openai.chat.completions.last_payload
    assert sent is not None
    assert sent["model"] == "mistral"
    assert sent["temperature"] == 0.1
    assert sent["response_format"] == {"type": "json_object"}
    assert sent["messages"] == [{"role": "user", "content": "Estimate"}]


def test_ollama_complete_json_rejects_empty_reply() -> None:
    client = OllamaNutritionClient(
        client=_FakeOpenAI(""),
        http_client=_tags_client([]),
        base_url="http://ollama.test:11434",
    )

    with pytest.raises(LlmUnavailableError):
        asyncio.run(
            client.complete_json(model="mistral", prompt="Estimate", temperature=0.1)
        )


def test_ollama_close_releases_sessions() -> None:
    fake_openai = _FakeOpenAI()
    client = OllamaNutritionClient(
        client=fake_openai,
        http_client=_tags_client([]),
        base_url="http://ollama.test:11434",
    )

    asyncio.run(client.close())

    assert fake_openai.closed is True
    assert client.http_client.is_closed


def test_extract_json_object_requires_object() -> None:
    assert extract_json_object('noise {"a": 1} noise') == {"a": 1}
    with pytest.raises(ValueError):
        extract_json_object("no json here")
    with pytest.raises(ValueError):
        extract_json_object("{not json}")
