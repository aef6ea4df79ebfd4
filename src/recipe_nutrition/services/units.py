"""Density profiles and unit-to-gram conversion."""

import math
from dataclasses import dataclass

from recipe_nutrition.domain.nutrition import DensityProfile
from recipe_nutrition.services.parsing import normalize_unit

OIL_PROFILE = DensityProfile(
    name="oil", cup=216, tbsp=13.5, tsp=4.5, ml=0.9, liter=900
)
DRY_GOODS_PROFILE = DensityProfile(
    name="dry goods", cup=120, tbsp=8, tsp=3, ml=0.5, liter=500
)
NUT_PROFILE = DensityProfile(name="nuts", cup=150, tbsp=9, tsp=3, ml=0.6, liter=600)
DAIRY_PROFILE = DensityProfile(
    name="dairy", cup=240, tbsp=15, tsp=5, ml=1, liter=1000
)
CHEESE_PROFILE = DensityProfile(
    name="cheese", cup=100, tbsp=6, tsp=2, ml=0.4, liter=400
)
WATER_LIKE_PROFILE = DensityProfile(
    name="water-like", cup=240, tbsp=15, tsp=5, ml=1, liter=1000
)

# Ordered; the first profile with a keyword contained in the name wins.
DENSITY_RULES: tuple[tuple[tuple[str, ...], DensityProfile], ...] = (
    (("oil", "butter", "fat", "lard", "shortening", "margarine"), OIL_PROFILE),
    (
        ("flour", "sugar", "salt", "baking", "powder", "cornstarch", "cocoa"),
        DRY_GOODS_PROFILE,
    ),
    (
        (
            "nut",
            "seed",
            "almond",
            "walnut",
            "pecan",
            "cashew",
            "pistachio",
            "hazelnut",
            "macadamia",
        ),
        NUT_PROFILE,
    ),
    (("milk", "cream", "yogurt", "buttermilk", "sour cream"), DAIRY_PROFILE),
    (
        ("cheese", "cheddar", "mozzarella", "parmesan", "swiss", "feta"),
        CHEESE_PROFILE,
    ),
)


@dataclass(frozen=True)
class UnitRule:
    """How a canonical unit becomes grams, and the most it may produce.

    Volume units read their factor from the food's density profile; weight
    and count units use a fixed factor.
    """

    cap: float
    grams_per_unit: float = 1.0
    density_field: str | None = None


UNIT_RULES: dict[str, UnitRule] = {
    "cup": UnitRule(cap=2000, density_field="cup"),
    "tbsp": UnitRule(cap=200, density_field="tbsp"),
    "tsp": UnitRule(cap=100, density_field="tsp"),
    "ml": UnitRule(cap=1000, density_field="ml"),
    "l": UnitRule(cap=5000, density_field="liter"),
    "oz": UnitRule(cap=1000, grams_per_unit=28.35),
    "lb": UnitRule(cap=2000, grams_per_unit=453.59),
    "kg": UnitRule(cap=5000, grams_per_unit=1000),
    "g": UnitRule(cap=2000),
    "slice": UnitRule(cap=500, grams_per_unit=25),
    "piece": UnitRule(cap=1000, grams_per_unit=50),
    "clove": UnitRule(cap=50, grams_per_unit=3),
}

# Unknown or missing units are read as grams.
FALLBACK_UNIT_RULE = UnitRule(cap=1000)


def resolve_density(food_name: str) -> DensityProfile:
    """Return the density profile for a food name."""
    name = food_name.lower()
    for keywords, profile in DENSITY_RULES:
        if any(keyword in name for keyword in keywords):
            return profile
    return WATER_LIKE_PROFILE


def to_grams(
    amount: float,
    unit: str | None,
    food_name: str,
    rules: dict[str, UnitRule] = UNIT_RULES,
) -> float:
    """Convert an amount of a food to grams, bounded by the unit's cap."""
    canonical = normalize_unit(unit)
    rule = rules.get(canonical, FALLBACK_UNIT_RULE) if canonical else FALLBACK_UNIT_RULE
    if rule.density_field is not None:
        per_unit = getattr(resolve_density(food_name), rule.density_field)
    else:
        per_unit = rule.grams_per_unit
    if not math.isfinite(amount) or amount < 0:
        amount = 0.0
    return min(amount * per_unit, rule.cap)
