"""Deterministic ingredient-to-nutrition estimation."""

import logging
from dataclasses import dataclass, field, replace

from recipe_nutrition.domain.nutrition import (
    CALORIES_PER_GRAM_CARBS,
    CALORIES_PER_GRAM_FAT,
    CALORIES_PER_GRAM_PROTEIN,
    ZERO_NUTRIENTS,
    CalorieCheck,
    IngredientNutrition,
    IngredientTrace,
    NutrientValues,
    NutritionLimits,
    RecipeNutrition,
)
from recipe_nutrition.services.database import NutrientDatabase
from recipe_nutrition.services.defaults import infer_default
from recipe_nutrition.services.matching import NutrientMatcher
from recipe_nutrition.services.parsing import parse_ingredient
from recipe_nutrition.services.units import resolve_density, to_grams

CALORIE_TOLERANCE = 50

_OPTIONAL_FIELDS = ("fiber", "sugar", "sodium")
_CAPPED_FIELDS = ("protein", "carbs", "fat", *_OPTIONAL_FIELDS)


@dataclass(frozen=True)
class OutlierRule:
    """Per-100 g ceilings for foods whose lab values overstate recipe usage."""

    keywords: tuple[str, ...]
    max_calories: float
    max_fat: float


# Ordered; "peanut butter" falls under the butter rule.
OUTLIER_RULES: tuple[OutlierRule, ...] = (
    OutlierRule(("butter",), max_calories=600, max_fat=70),
    OutlierRule(("mayo", "mayonnaise"), max_calories=500, max_fat=55),
    OutlierRule(
        ("nut", "almond", "walnut", "pecan", "cashew"), max_calories=600, max_fat=60
    ),
)

_logger = logging.getLogger(__name__)


@dataclass
class NutritionCalculator:
    """Estimate per-ingredient and per-serving nutrition from free text.

    Stateless apart from the injected read-only database, so one instance
    can serve concurrent callers.
    """

    database: NutrientDatabase
    limits: NutritionLimits = field(default_factory=NutritionLimits)
    matcher: NutrientMatcher = field(init=False)

    def __post_init__(self) -> None:
        self.matcher = NutrientMatcher(self.database)

    def trace_ingredient(self, line: str) -> IngredientTrace:
        """Evaluate one line and keep every intermediate value."""
        parsed = parse_ingredient(line)
        if parsed.has_amount:
            quantity, unit, used_default = parsed.quantity, parsed.unit, False
        else:
            default = infer_default(parsed.clean_name)
            quantity, unit, used_default = default.amount, default.unit, True

        # Density keywords are read from the whole line so that words the
        # parser strips still pick the profile.
        food_text = line.lower()
        grams = to_grams(quantity, unit, food_text)
        multiplier = min(grams / 100, self.limits.max_multiplier)
        matched_key = self.matcher.match(parsed.clean_name)

        uncapped: NutrientValues | None = None
        nutrition: NutrientValues | None = None
        if matched_key is not None:
            base = correct_outliers(food_text, self.database[matched_key])
            uncapped = _scale(base, multiplier)
            nutrition = _cap(_round(uncapped), self.limits.per_ingredient)

        return IngredientTrace(
            ingredient=line,
            clean_name=parsed.clean_name,
            quantity=quantity,
            unit=unit,
            used_default=used_default,
            grams=grams,
            density_profile=resolve_density(food_text).name,
            multiplier=multiplier,
            matched_key=matched_key,
            uncapped=uncapped,
            nutrition=nutrition,
        )

    def calculate_ingredient(self, line: str) -> IngredientNutrition | None:
        """Return the nutrient contribution of one line, or ``None`` if unmatched."""
        trace = self.trace_ingredient(line)
        if trace.matched_key is None or trace.nutrition is None:
            return None
        return IngredientNutrition(
            ingredient=line,
            amount=trace.grams,
            unit="g",
            matched_key=trace.matched_key,
            nutrition=trace.nutrition,
        )

    def aggregate(self, lines: list[str], servings: int = 1) -> RecipeNutrition:
        """Sum matched ingredients and scale the totals to one serving.

        Calories are always re-derived from the published per-serving macro
        grams so the two can be reconciled by the caller.
        """
        servings = min(max(servings, 1), self.limits.max_servings)
        matched: list[IngredientNutrition] = []
        unmatched: list[str] = []
        for line in lines:
            result = self.calculate_ingredient(line)
            if result is None:
                unmatched.append(line)
                _logger.debug("No nutrient match: ingredient=%s", line)
                continue
            matched.append(result)
            _logger.debug(
                "Matched ingredient: ingredient=%s key=%s grams=%.1f",
                line,
                result.matched_key,
                result.amount,
            )

        if not matched:
            return RecipeNutrition(
                nutrition=ZERO_NUTRIENTS,
                matched_ingredients=[],
                unmatched_ingredients=unmatched,
                servings=servings,
            )

        totals = _sum([item.nutrition for item in matched])
        per_serving = {
            name: (getattr(totals, name) or 0.0) / servings for name in _CAPPED_FIELDS
        }
        caps = self.limits.per_serving
        published: dict[str, float] = {}
        for name, value in per_serving.items():
            cap = getattr(caps, name)
            if value > cap:
                _logger.warning(
                    "Per-serving %s capped: value=%.1f cap=%s", name, value, cap
                )
            digits = 0 if name == "sodium" else 1
            published[name] = min(round(value, digits), cap)

        calories = round(
            NutrientValues(
                calories=0,
                protein=published["protein"],
                carbs=published["carbs"],
                fat=published["fat"],
            ).macro_calories()
        )
        if calories > caps.calories:
            _logger.warning(
                "Per-serving calories capped: value=%s cap=%s", calories, caps.calories
            )
            calories = int(caps.calories)

        return RecipeNutrition(
            nutrition=NutrientValues(calories=calories, **published),
            matched_ingredients=matched,
            unmatched_ingredients=unmatched,
            servings=servings,
        )

    def available_ingredients(self) -> list[str]:
        """Return every canonical key in the database, sorted."""
        return sorted(self.database)

    def has_ingredient(self, line: str) -> bool:
        """Return true when a line resolves to a database entry."""
        return self.matcher.match(parse_ingredient(line).clean_name) is not None


def validate_calories(values: NutrientValues) -> CalorieCheck:
    """Compare stated calories with the energy implied by the macros."""
    protein_calories = values.protein * CALORIES_PER_GRAM_PROTEIN
    carb_calories = values.carbs * CALORIES_PER_GRAM_CARBS
    fat_calories = values.fat * CALORIES_PER_GRAM_FAT
    calculated = values.macro_calories()
    difference = abs(values.calories - calculated)
    return CalorieCheck(
        is_valid=difference < CALORIE_TOLERANCE,
        calculated_calories=round(calculated),
        difference=round(difference),
        protein_calories=round(protein_calories),
        carb_calories=round(carb_calories),
        fat_calories=round(fat_calories),
    )


def correct_outliers(food_text: str, base: NutrientValues) -> NutrientValues:
    """Apply the first matching outlier ceiling to per-100 g values."""
    name = food_text.lower()
    for rule in OUTLIER_RULES:
        if any(keyword in name for keyword in rule.keywords):
            return replace(
                base,
                calories=min(base.calories, rule.max_calories),
                fat=min(base.fat, rule.max_fat),
            )
    return base


def _scale(base: NutrientValues, multiplier: float) -> NutrientValues:
    """Scale per-100 g values; calories come from the scaled macros."""
    protein = base.protein * multiplier
    carbs = base.carbs * multiplier
    fat = base.fat * multiplier
    optional = {
        name: None if getattr(base, name) is None else getattr(base, name) * multiplier
        for name in _OPTIONAL_FIELDS
    }
    scaled = NutrientValues(calories=0, protein=protein, carbs=carbs, fat=fat, **optional)
    return replace(scaled, calories=scaled.macro_calories())


def _round(values: NutrientValues) -> NutrientValues:
    return NutrientValues(
        calories=round(values.calories),
        protein=round(values.protein, 1),
        carbs=round(values.carbs, 1),
        fat=round(values.fat, 1),
        fiber=None if values.fiber is None else round(values.fiber, 1),
        sugar=None if values.sugar is None else round(values.sugar, 1),
        sodium=None if values.sodium is None else round(values.sodium),
    )


def _cap(values: NutrientValues, caps: NutrientValues) -> NutrientValues:
    capped: dict[str, float | None] = {}
    for name in ("calories", *_CAPPED_FIELDS):
        value = getattr(values, name)
        capped[name] = None if value is None else min(value, getattr(caps, name))
    return NutrientValues(**capped)


def _sum(items: list[NutrientValues]) -> NutrientValues:
    totals: dict[str, float] = {name: 0.0 for name in ("calories", *_CAPPED_FIELDS)}
    for item in items:
        for name in totals:
            totals[name] += getattr(item, name) or 0.0
    return NutrientValues(**totals)
