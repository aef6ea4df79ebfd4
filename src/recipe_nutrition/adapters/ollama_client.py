"""Ollama client for LLM nutrition estimates."""

import json
import re
from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from recipe_nutrition.services.nutrition import LlmUnavailableError, NutritionLlmClient

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class OllamaNutritionClient(NutritionLlmClient):
    """Client for a local Ollama server.

    Completions go through Ollama's OpenAI-compatible ``/v1`` API; the model
    check uses the native ``/api/tags`` endpoint.
    """

    client: AsyncOpenAI
    http_client: httpx.AsyncClient
    base_url: str

    @classmethod
    def create(cls, base_url: str, timeout_seconds: float) -> "OllamaNutritionClient":
        """Create a client with managed OpenAI and httpx sessions."""
        root = base_url.rstrip("/")
        return cls(
            client=AsyncOpenAI(
                base_url=f"{root}/v1",
                api_key="ollama",
                timeout=timeout_seconds,
                max_retries=0,
            ),
            http_client=httpx.AsyncClient(),
            base_url=root,
        )

    async def ensure_model(self, model: str) -> None:
        """Raise unless the server is reachable and has the model pulled."""
        response = await self.http_client.get(f"{self.base_url}/api/tags", timeout=5)
        response.raise_for_status()
        models = response.json().get("models") or []
        names = [str(entry.get("name", "")) for entry in models]
        if not any(model in name for name in names):
            raise LlmUnavailableError(
                f"Model {model!r} not found. Please run: ollama pull {model}"
            )

    async def complete_json(
        self, *, model: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        """Ask the model for a JSON object and parse it."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            top_p=0.9,
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LlmUnavailableError("Ollama returned an empty response")
        return extract_json_object(content)

    async def close(self) -> None:
        """Close the underlying HTTP sessions."""
        await self.http_client.aclose()
        await self.client.close()


def extract_json_object(text: str) -> dict[str, object]:
    """Parse the outermost ``{...}`` block of a model reply."""
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        raise ValueError("No JSON object found in model response")
    payload = json.loads(match.group(0))
    if not isinstance(payload, dict):
        raise ValueError("Model response JSON is not an object")
    return payload
