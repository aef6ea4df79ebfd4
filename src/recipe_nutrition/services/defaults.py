"""Default quantities for ingredient lines without an explicit amount."""

from dataclasses import dataclass

from recipe_nutrition.domain.nutrition import QuantityDefault


@dataclass(frozen=True)
class QuantityRule:
    """Keyword family and the amount assumed for it."""

    category: str
    keywords: tuple[str, ...]
    default: QuantityDefault


# Ordered; the first rule with a keyword contained in the name wins.
# Amounts skew low so unquantified lines cannot inflate a recipe.
QUANTITY_RULES: tuple[QuantityRule, ...] = (
    QuantityRule(
        "seasoning",
        (
            "salt",
            "pepper",
            "spice",
            "herb",
            "seasoning",
            "garlic",
            "onion",
            "ginger",
            "cumin",
            "paprika",
            "oregano",
            "basil",
            "thyme",
            "rosemary",
            "parsley",
        ),
        QuantityDefault(amount=1, unit="tsp"),
    ),
    QuantityRule(
        "oil",
        ("oil", "butter", "fat", "lard", "shortening"),
        QuantityDefault(amount=0.5, unit="tbsp"),
    ),
    QuantityRule(
        "condiment",
        ("sauce", "ketchup", "mustard", "mayo", "vinegar", "soy", "worcestershire"),
        QuantityDefault(amount=0.5, unit="tbsp"),
    ),
    QuantityRule(
        "dairy",
        ("cheese", "milk", "cream", "yogurt"),
        QuantityDefault(amount=0.25, unit="cup"),
    ),
    QuantityRule(
        "vegetable",
        (
            "lettuce",
            "spinach",
            "tomato",
            "carrot",
            "celery",
            "cucumber",
            "mushroom",
        ),
        QuantityDefault(amount=0.5, unit="cup"),
    ),
    QuantityRule(
        "protein",
        ("chicken", "beef", "pork", "fish", "egg", "tofu", "bean", "lentil"),
        QuantityDefault(amount=100, unit="g"),
    ),
    QuantityRule(
        "grain",
        ("rice", "pasta", "bread", "flour", "potato", "quinoa"),
        QuantityDefault(amount=0.5, unit="cup"),
    ),
    QuantityRule(
        "nut",
        ("nut", "seed", "almond", "walnut", "pecan", "cashew"),
        QuantityDefault(amount=1, unit="tbsp"),
    ),
)

FALLBACK_DEFAULT = QuantityDefault(amount=1, unit="tbsp")


def infer_default(
    clean_name: str, rules: tuple[QuantityRule, ...] = QUANTITY_RULES
) -> QuantityDefault:
    """Return the conservative amount assumed for a food name."""
    rule = find_quantity_rule(clean_name, rules)
    return rule.default if rule else FALLBACK_DEFAULT


def find_quantity_rule(
    clean_name: str, rules: tuple[QuantityRule, ...] = QUANTITY_RULES
) -> QuantityRule | None:
    """Return the first rule whose keyword appears in the name."""
    name = clean_name.lower()
    for rule in rules:
        if any(keyword in name for keyword in rule.keywords):
            return rule
    return None
