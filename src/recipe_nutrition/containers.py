"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from recipe_nutrition.adapters.ollama_client import OllamaNutritionClient
from recipe_nutrition.config import Settings
from recipe_nutrition.services.cache import InMemoryCache
from recipe_nutrition.services.calculator import NutritionCalculator
from recipe_nutrition.services.database import NutrientDatabase, load_database
from recipe_nutrition.services.nutrition import NutritionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    database: NutrientDatabase
    calculator: NutritionCalculator
    nutrition_service: NutritionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    database = load_database(resolved_settings.nutrient_database_path)
    calculator = NutritionCalculator(database)
    llm_client: OllamaNutritionClient | None = None
    if resolved_settings.ollama_enabled:
        llm_client = OllamaNutritionClient.create(
            base_url=resolved_settings.ollama_base_url,
            timeout_seconds=resolved_settings.ollama_timeout_seconds,
        )
    nutrition_service = NutritionService(
        calculator=calculator,
        cache=InMemoryCache(),
        llm_client=llm_client,
        model=resolved_settings.ollama_model,
        temperature=resolved_settings.ollama_temperature,
        cache_ttl_seconds=resolved_settings.estimate_cache_ttl_seconds,
    )

    async def close_resources() -> None:
        if llm_client is not None:
            await llm_client.close()

    return AppContainer(
        settings=resolved_settings,
        database=database,
        calculator=calculator,
        nutrition_service=nutrition_service,
        close_resources=close_resources,
    )
