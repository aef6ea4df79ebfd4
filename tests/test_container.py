"""Tests for container wiring."""

import asyncio

import pytest

from recipe_nutrition.adapters.ollama_client import OllamaNutritionClient
from recipe_nutrition.config import Settings
from recipe_nutrition.containers import build_container
from recipe_nutrition.services.database import NutrientDatabaseError


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.nutrition_service.llm_client is None
    assert "flour" in container.database
    assert container.calculator.database is container.database
    asyncio.run(container.close_resources())


def test_build_container_wires_ollama_when_enabled() -> None:
    settings = Settings(
        ollama_enabled=True,
        ollama_base_url="http://ollama.test:11434/",
        ollama_model="llama3",
        estimate_cache_ttl_seconds=60,
    )

    container = build_container(settings)

    client = container.nutrition_service.llm_client
    assert isinstance(client, OllamaNutritionClient)
    assert client.base_url == "http://ollama.test:11434"
    assert container.nutrition_service.model == "llama3"
    assert container.nutrition_service.cache_ttl_seconds == 60
    asyncio.run(container.close_resources())


def test_build_container_rejects_missing_database(tmp_path) -> None:
    settings = Settings(nutrient_database_path=str(tmp_path / "missing.json"))

    with pytest.raises(NutrientDatabaseError):
        build_container(settings)
