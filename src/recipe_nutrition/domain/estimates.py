"""Models for LLM-backed and fallback nutrition estimates."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class EstimatedNutrition(BaseModel):
    """Per-serving macros returned by an estimate."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)


class LlmNutritionResult(BaseModel):
    """Structured output expected from the language model."""

    model_config = ConfigDict(populate_by_name=True)

    nutrition: EstimatedNutrition
    matched_ingredients: list[str] = Field(
        default_factory=list, alias="matchedIngredients"
    )
    unmatched_ingredients: list[str] = Field(
        default_factory=list, alias="unmatchedIngredients"
    )
    reasoning: str = ""


class EstimateResult(LlmNutritionResult):
    """Estimate returned to callers, tagged with the path that produced it."""

    source: Literal["llm", "local"]
