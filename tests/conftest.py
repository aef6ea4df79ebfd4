"""Shared test fixtures."""

from dataclasses import dataclass, field

import pytest

from recipe_nutrition.config import Settings
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.services.cache import InMemoryCache
from recipe_nutrition.services.calculator import NutritionCalculator
from recipe_nutrition.services.database import NutrientDatabase
from recipe_nutrition.services.nutrition import (
    LlmUnavailableError,
    NutritionLlmClient,
    NutritionService,
)

TEST_FOODS: dict[str, dict[str, float]] = {
    "chicken breast": {"calories": 165, "protein": 31, "carbs": 0, "fat": 3.6},
    "ground beef": {
        "calories": 250,
        "protein": 26,
        "carbs": 0,
        "fat": 15,
        "fiber": 0,
        "sugar": 0,
        "sodium": 72,
    },
    "flour": {
        "calories": 364,
        "protein": 10,
        "carbs": 76,
        "fat": 1,
        "fiber": 2.7,
        "sugar": 0.3,
        "sodium": 2,
    },
    "olive oil": {"calories": 884, "protein": 0, "carbs": 0, "fat": 100},
    "butter": {"calories": 717, "protein": 0.9, "carbs": 0.1, "fat": 81},
    "garlic": {"calories": 149, "protein": 6.4, "carbs": 33, "fat": 0.5},
    "salt": {"calories": 0, "protein": 0, "carbs": 0, "fat": 0, "sodium": 38758},
    "pepper": {"calories": 251, "protein": 10, "carbs": 64, "fat": 3.3},
    "lettuce": {"calories": 15, "protein": 1.4, "carbs": 2.9, "fat": 0.2},
    "egg": {"calories": 155, "protein": 13, "carbs": 1.1, "fat": 11},
    "eggplant": {"calories": 25, "protein": 1, "carbs": 6, "fat": 0.2},
    "almonds": {"calories": 579, "protein": 21, "carbs": 22, "fat": 50},
}


@dataclass
class FakeLlmClient(NutritionLlmClient):
    """Fake language model returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "nutrition": {"calories": 420, "protein": 20, "carbs": 45, "fat": 18},
            "matchedIngredients": ["2 cups flour"],
            "unmatchedIngredients": [],
            "reasoning": "Flour converted at 120 g per cup.",
        }
    )
    available: bool = True
    prompts: list[str] = field(default_factory=list)

    async def ensure_model(self, model: str) -> None:
        if not self.available:
            raise LlmUnavailableError(f"Model {model!r} not found")

    async def complete_json(
        self, *, model: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        return self.payload


@pytest.fixture
def database() -> NutrientDatabase:
    return NutrientDatabase.from_mapping(TEST_FOODS)


@pytest.fixture
def calculator(database: NutrientDatabase) -> NutritionCalculator:
    return NutritionCalculator(database)


@pytest.fixture
def settings() -> Settings:
    return Settings(ollama_enabled=False, ollama_model="mistral")


@pytest.fixture
def llm_client() -> FakeLlmClient:
    return FakeLlmClient()


@pytest.fixture
def container(
    settings: Settings,
    database: NutrientDatabase,
    calculator: NutritionCalculator,
    llm_client: FakeLlmClient,
) -> AppContainer:
    nutrition_service = NutritionService(
        calculator=calculator,
        cache=InMemoryCache(),
        llm_client=llm_client,
        model=settings.ollama_model,
        retry_delay_seconds=0,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        database=database,
        calculator=calculator,
        nutrition_service=nutrition_service,
        close_resources=close_resources,
    )
