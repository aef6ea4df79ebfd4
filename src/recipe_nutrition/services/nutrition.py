"""Nutrition estimates: language model first, deterministic engine as fallback."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from recipe_nutrition.domain.estimates import (
    EstimatedNutrition,
    EstimateResult,
    LlmNutritionResult,
)
from recipe_nutrition.domain.nutrition import RecipeNutrition
from recipe_nutrition.services.cache import Cache
from recipe_nutrition.services.calculator import NutritionCalculator
from recipe_nutrition.services.units import DENSITY_RULES, UNIT_RULES

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from recipe_nutrition.services.database import NutrientDatabase

_logger = logging.getLogger(__name__)


class LlmUnavailableError(RuntimeError):
    """Raised when the language model cannot produce an estimate."""


class NutritionLlmClient(Protocol):
    """Interface for a JSON-producing language model."""

    async def ensure_model(self, model: str) -> None:
        """Raise ``LlmUnavailableError`` unless the model can be used."""

    async def complete_json(
        self, *, model: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        """Return the model's reply parsed as a JSON object."""


@dataclass
class NutritionService:
    """Service for recipe nutrition estimates with caching."""

    calculator: NutritionCalculator
    cache: Cache
    llm_client: NutritionLlmClient | None = None
    model: str = "mistral"
    temperature: float = 0.1
    cache_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    def calculate(self, ingredients: list[str], servings: int = 1) -> RecipeNutrition:
        """Run the deterministic engine."""
        return self.calculator.aggregate(ingredients, servings)

    async def estimate(self, ingredients: list[str], servings: int = 1) -> EstimateResult:
        """Estimate per-serving macros, preferring the language model.

        Any model failure falls back to the local engine, so this never
        raises for a list of strings and an integer.
        """
        servings = min(max(servings, 1), self.calculator.limits.max_servings)
        cache_key = f"nutrition:estimate:{servings}:{chr(31).join(ingredients)}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, EstimateResult):
            return cached.model_copy(deep=True)

        if self.llm_client is not None:
            try:
                result = await self._estimate_with_llm(
                    self.llm_client, ingredients, servings
                )
            except Exception as exc:
                _logger.warning(
                    "LLM nutrition estimate failed, using local calculation: %s: %s",
                    type(exc).__name__,
                    exc,
                )
            else:
                self.cache.set(cache_key, result, ttl_seconds=self.cache_ttl_seconds)
                return result.model_copy(deep=True)

        return self._estimate_locally(ingredients, servings)

    async def _estimate_with_llm(
        self, client: NutritionLlmClient, ingredients: list[str], servings: int
    ) -> EstimateResult:
        await client.ensure_model(self.model)
        prompt = build_nutrition_prompt(ingredients, servings, self.calculator.database)
        payload = await self._call_with_retry(
            lambda: client.complete_json(
                model=self.model, prompt=prompt, temperature=self.temperature
            ),
            action="complete_json",
        )
        parsed = LlmNutritionResult.model_validate(payload)
        return EstimateResult(**parsed.model_dump(), source="llm")

    def _estimate_locally(self, ingredients: list[str], servings: int) -> EstimateResult:
        local = self.calculator.aggregate(ingredients, servings)
        matched = len(local.matched_ingredients)
        unmatched = len(local.unmatched_ingredients)
        return EstimateResult(
            nutrition=EstimatedNutrition(
                calories=local.nutrition.calories,
                protein=local.nutrition.protein,
                carbs=local.nutrition.carbs,
                fat=local.nutrition.fat,
            ),
            matched_ingredients=[item.ingredient for item in local.matched_ingredients],
            unmatched_ingredients=local.unmatched_ingredients,
            reasoning=(
                "Fallback calculation using local nutrition database. "
                f"{matched} ingredients matched, {unmatched} not found."
            ),
            source="local",
        )

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "LLM %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def build_nutrition_prompt(
    ingredients: list[str], servings: int, database: "NutrientDatabase"
) -> str:
    """Build the instruction prompt sent to the language model."""
    numbered = "\n".join(
        f"{index}. {ingredient}" for index, ingredient in enumerate(ingredients, 1)
    )
    reference = "\n".join(
        f"- {key.capitalize()}: {values.calories:g} cal, {values.protein:g}g protein, "
        f"{values.carbs:g}g carbs, {values.fat:g}g fat"
        for key, values in database.items()
    )
    return f"""You are a nutrition expert. Calculate the nutrition information for a recipe with the following ingredients and serving size.

INGREDIENTS:
{numbered}

SERVINGS: {servings}

INSTRUCTIONS:
1. Parse each ingredient to extract the amount, unit, and food item
2. Convert amounts to grams using the unit conversions below
3. Look up nutrition data per 100g for each ingredient
4. Calculate total nutrition for the entire recipe
5. Divide by number of servings to get per-serving values
6. Identify which ingredients you can calculate nutrition for and which you cannot

NUTRITION DATABASE (per 100g):
{reference}

UNIT CONVERSIONS:
{_conversion_lines()}

RESPONSE FORMAT:
Return a JSON object with this exact structure:
{{
  "nutrition": {{"calories": number, "protein": number, "carbs": number, "fat": number}},
  "matchedIngredients": ["ingredient1", ...],
  "unmatchedIngredients": ["ingredient1", ...],
  "reasoning": "Brief explanation of the calculation process"
}}

Calculate the nutrition per serving. Be precise with unit conversions and ingredient matching."""


def _conversion_lines() -> str:
    lines: list[str] = []
    for keywords, profile in DENSITY_RULES:
        label = "/".join(keywords[:2])
        lines.extend(
            [
                f"- 1 cup {label} = {profile.cup:g}g",
                f"- 1 tbsp {label} = {profile.tbsp:g}g",
                f"- 1 tsp {label} = {profile.tsp:g}g",
            ]
        )
    for unit, rule in UNIT_RULES.items():
        if rule.density_field is None and unit != "g":
            lines.append(f"- 1 {unit} = {rule.grams_per_unit:g}g")
    lines.append("- anything else: 1 cup = 240g, 1 tbsp = 15g, 1 tsp = 5g")
    return "\n".join(lines)
