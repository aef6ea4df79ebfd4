"""Pydantic models for the nutrition HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from recipe_nutrition.domain.nutrition import (
    IngredientNutrition,
    IngredientTrace,
    NutrientValues,
    RecipeNutrition,
)


class NutritionRequest(BaseModel):
    """Ingredient lines and the number of servings they make."""

    ingredients: list[str]
    servings: int = 1


class NutrientsPayload(BaseModel):
    """Nutrient amounts; sodium in mg, everything else in g."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None

    @classmethod
    def from_values(cls, values: NutrientValues) -> "NutrientsPayload":
        return cls(
            calories=values.calories,
            protein=values.protein,
            carbs=values.carbs,
            fat=values.fat,
            fiber=values.fiber,
            sugar=values.sugar,
            sodium=values.sodium,
        )


class IngredientNutritionPayload(BaseModel):
    """One matched ingredient."""

    model_config = ConfigDict(populate_by_name=True)

    ingredient: str
    amount: float
    unit: str
    matched_key: str = Field(alias="matchedKey")
    nutrition: NutrientsPayload

    @classmethod
    def from_domain(cls, item: IngredientNutrition) -> "IngredientNutritionPayload":
        return cls(
            ingredient=item.ingredient,
            amount=item.amount,
            unit=item.unit,
            matched_key=item.matched_key,
            nutrition=NutrientsPayload.from_values(item.nutrition),
        )


class RecipeNutritionResponse(BaseModel):
    """Per-serving nutrition with the matched/unmatched partition."""

    model_config = ConfigDict(populate_by_name=True)

    nutrition: NutrientsPayload
    matched_ingredients: list[IngredientNutritionPayload] = Field(
        alias="matchedIngredients"
    )
    unmatched_ingredients: list[str] = Field(alias="unmatchedIngredients")
    dietary_info: list[str] = Field(default_factory=list, alias="dietaryInfo")

    @classmethod
    def from_domain(
        cls, result: RecipeNutrition, dietary_info: list[str]
    ) -> "RecipeNutritionResponse":
        return cls(
            nutrition=NutrientsPayload.from_values(result.nutrition),
            matched_ingredients=[
                IngredientNutritionPayload.from_domain(item)
                for item in result.matched_ingredients
            ],
            unmatched_ingredients=result.unmatched_ingredients,
            dietary_info=dietary_info,
        )


class IngredientTracePayload(BaseModel):
    """Diagnostic trace of one ingredient line."""

    model_config = ConfigDict(populate_by_name=True)

    ingredient: str
    clean_name: str = Field(alias="cleanName")
    quantity: float
    unit: str
    used_default: bool = Field(alias="usedDefault")
    grams: float
    density_profile: str = Field(alias="densityProfile")
    multiplier: float
    matched_key: str | None = Field(alias="matchedKey")
    nutrition: NutrientsPayload | None = None

    @classmethod
    def from_domain(cls, trace: IngredientTrace) -> "IngredientTracePayload":
        return cls(
            ingredient=trace.ingredient,
            clean_name=trace.clean_name,
            quantity=trace.quantity,
            unit=trace.unit,
            used_default=trace.used_default,
            grams=trace.grams,
            density_profile=trace.density_profile,
            multiplier=trace.multiplier,
            matched_key=trace.matched_key,
            nutrition=(
                NutrientsPayload.from_values(trace.nutrition)
                if trace.nutrition
                else None
            ),
        )


class AnalysisResponse(BaseModel):
    """Diagnostic report for a recipe."""

    model_config = ConfigDict(populate_by_name=True)

    ingredients: list[IngredientTracePayload]
    issues: list[str]
    result: RecipeNutritionResponse
    calorie_check_valid: bool = Field(alias="calorieCheckValid")
