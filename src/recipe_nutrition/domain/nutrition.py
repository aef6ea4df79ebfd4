"""Nutrition engine domain models."""

from dataclasses import dataclass, field

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9


@dataclass(frozen=True)
class NutrientValues:
    """Macro and micronutrient amounts.

    Protein, carbs, fat, fiber and sugar are grams; sodium is milligrams.
    The optional fields are ``None`` when the source has no value for them.
    """

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float | None = None
    sugar: float | None = None
    sodium: float | None = None

    def macro_calories(self) -> float:
        """Return the energy implied by protein, carbs and fat grams."""
        return (
            self.protein * CALORIES_PER_GRAM_PROTEIN
            + self.carbs * CALORIES_PER_GRAM_CARBS
            + self.fat * CALORIES_PER_GRAM_FAT
        )


ZERO_NUTRIENTS = NutrientValues(
    calories=0.0,
    protein=0.0,
    carbs=0.0,
    fat=0.0,
    fiber=0.0,
    sugar=0.0,
    sodium=0.0,
)


@dataclass(frozen=True)
class ParsedIngredient:
    """Quantity, unit and normalized food name read from an ingredient line."""

    quantity: float | None
    unit: str | None
    clean_name: str

    @property
    def has_amount(self) -> bool:
        return self.quantity is not None and self.unit is not None


@dataclass(frozen=True)
class QuantityDefault:
    """Conservative amount assumed for a line without an explicit quantity."""

    amount: float
    unit: str


@dataclass(frozen=True)
class DensityProfile:
    """Grams per volume unit for a family of foods."""

    name: str
    cup: float
    tbsp: float
    tsp: float
    ml: float
    liter: float


@dataclass(frozen=True)
class IngredientNutrition:
    """Absolute nutrient contribution of one matched ingredient line."""

    ingredient: str
    amount: float
    unit: str
    matched_key: str
    nutrition: NutrientValues


@dataclass(frozen=True)
class RecipeNutrition:
    """Per-serving totals plus the matched/unmatched partition of the input."""

    nutrition: NutrientValues
    matched_ingredients: list[IngredientNutrition]
    unmatched_ingredients: list[str]
    servings: int = 1


@dataclass(frozen=True)
class NutritionLimits:
    """Heuristic ceilings applied while estimating nutrition.

    None of these values are physical constants; they bound output magnitude
    when parsing or density guesses go wrong.
    """

    max_multiplier: float = 20.0
    max_servings: int = 10_000
    per_ingredient: NutrientValues = field(
        default_factory=lambda: NutrientValues(
            calories=1000,
            protein=100,
            carbs=250,
            fat=100,
            fiber=100,
            sugar=200,
            sodium=10000,
        )
    )
    per_serving: NutrientValues = field(
        default_factory=lambda: NutrientValues(
            calories=1500,
            protein=80,
            carbs=150,
            fat=80,
            fiber=50,
            sugar=100,
            sodium=5000,
        )
    )


@dataclass(frozen=True)
class CalorieCheck:
    """Comparison of stated calories against macro-derived calories."""

    is_valid: bool
    calculated_calories: int
    difference: int
    protein_calories: int
    carb_calories: int
    fat_calories: int


@dataclass(frozen=True)
class IngredientTrace:
    """Step-by-step record of how one ingredient line was evaluated."""

    ingredient: str
    clean_name: str
    quantity: float
    unit: str
    used_default: bool
    grams: float
    density_profile: str
    multiplier: float
    matched_key: str | None
    uncapped: NutrientValues | None
    nutrition: NutrientValues | None


@dataclass(frozen=True)
class NutritionAnalysis:
    """Diagnostic report for a recipe calculation."""

    traces: list[IngredientTrace]
    issues: list[str]
    result: RecipeNutrition
