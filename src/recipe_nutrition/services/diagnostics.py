"""Diagnostic reports for nutrition calculations."""

import logging

from recipe_nutrition.domain.nutrition import IngredientTrace, NutritionAnalysis
from recipe_nutrition.services.calculator import NutritionCalculator

LARGE_QUANTITY = 10
LARGE_WEIGHT_G = 1000
HIGH_CALORIES = 1000
HIGH_PROTEIN_G = 50

_logger = logging.getLogger(__name__)


def analyze(
    calculator: NutritionCalculator, lines: list[str], servings: int = 1
) -> NutritionAnalysis:
    """Trace every ingredient line and flag values worth a second look."""
    traces = [calculator.trace_ingredient(line) for line in lines]
    issues: list[str] = []
    for trace in traces:
        issues.extend(_trace_issues(trace))
    if issues:
        _logger.info("Nutrition analysis found %s issue(s)", len(issues))
    return NutritionAnalysis(
        traces=traces,
        issues=issues,
        result=calculator.aggregate(lines, servings),
    )


def _trace_issues(trace: IngredientTrace) -> list[str]:
    issues: list[str] = []
    if trace.quantity > LARGE_QUANTITY:
        issues.append(
            f"Large amount: {trace.quantity:g} {trace.unit} of {trace.clean_name}"
        )
    if trace.grams > LARGE_WEIGHT_G:
        issues.append(f"Large weight: {trace.grams:g}g of {trace.clean_name}")
    if trace.matched_key is None:
        issues.append(f"No match found for: {trace.clean_name or trace.ingredient}")
        return issues
    if trace.uncapped is not None:
        if trace.uncapped.calories > HIGH_CALORIES:
            issues.append(
                f"High calories: {trace.uncapped.calories:.0f} cal from "
                f"{trace.ingredient}"
            )
        if trace.uncapped.protein > HIGH_PROTEIN_G:
            issues.append(
                f"High protein: {trace.uncapped.protein:.1f}g from {trace.ingredient}"
            )
    return issues
