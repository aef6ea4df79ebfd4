"""Ingredient line parsing."""

import math
import re

from recipe_nutrition.domain.nutrition import ParsedIngredient

# Unit token as written -> canonical unit.
UNIT_ALIASES: dict[str, str] = {
    "cup": "cup",
    "cups": "cup",
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tsp": "tsp",
    "ts": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "kg": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "l": "l",
    "liter": "l",
    "liters": "l",
    "slice": "slice",
    "slices": "slice",
    "piece": "piece",
    "pieces": "piece",
    "clove": "clove",
    "cloves": "clove",
}

# Size words count as pieces scaled by the factor.
SIZE_SCALES: dict[str, float] = {"large": 1.5, "medium": 1.0, "small": 0.5}

DESCRIPTOR_WORDS: tuple[str, ...] = (
    "chopped",
    "diced",
    "sliced",
    "minced",
    "grated",
    "shredded",
    "fresh",
    "dried",
    "frozen",
    "canned",
    "raw",
    "cooked",
    "boiled",
    "fried",
    "grilled",
    "baked",
    "thick",
    "thin",
    "large",
    "medium",
    "small",
)

UNICODE_FRACTIONS: dict[str, float] = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅕": 1 / 5,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

_UNIT_TOKENS = sorted([*UNIT_ALIASES, *SIZE_SCALES], key=len, reverse=True)
_NUMBER_PATTERN = r"\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?|\.\d+"
_AMOUNT_RE = re.compile(
    rf"(?P<number>{_NUMBER_PATTERN})\s*(?P<unit>{'|'.join(_UNIT_TOKENS)})\b"
)
_DESCRIPTOR_RE = re.compile(rf"\b(?:{'|'.join(DESCRIPTOR_WORDS)})\b")
_NON_WORD_RE = re.compile(r"[^\w\s]|_")
_BARE_NUMBER_RE = re.compile(r"\b\d+(?:\.\d+)?\b")
_ALPHA_TOKEN_RE = re.compile(r"[^\W\d_]+")


def parse_ingredient(line: str) -> ParsedIngredient:
    """Split an ingredient line into quantity, unit and clean food name.

    Quantity and unit stay ``None`` when the line has no ``<number> <unit>``
    pair. Never raises.
    """
    text = normalize_fractions(line.lower().strip())
    quantity: float | None = None
    unit: str | None = None

    match = _AMOUNT_RE.search(text)
    if match:
        quantity = parse_number(match.group("number"))
        token = match.group("unit")
        if token in SIZE_SCALES:
            quantity *= SIZE_SCALES[token]
            unit = "piece"
        else:
            unit = UNIT_ALIASES[token]

    return ParsedIngredient(
        quantity=quantity,
        unit=unit,
        clean_name=clean_ingredient_name(text),
    )


def clean_ingredient_name(text: str) -> str:
    """Strip amounts, units, descriptors and punctuation from a lowered line."""
    cleaned = _AMOUNT_RE.sub(" ", text)
    cleaned = _DESCRIPTOR_RE.sub(" ", cleaned)
    cleaned = _NON_WORD_RE.sub(" ", cleaned)
    cleaned = _BARE_NUMBER_RE.sub(" ", cleaned)
    cleaned = " ".join(cleaned.split())
    if cleaned:
        return cleaned
    # Everything was stripped; keep the alphabetic tokens so the name is
    # still reported rather than silently empty.
    return " ".join(_ALPHA_TOKEN_RE.findall(text))


def normalize_unit(unit: str | None) -> str | None:
    """Map a unit token or alias to its canonical form."""
    if unit is None:
        return None
    lowered = unit.strip().lower()
    return UNIT_ALIASES.get(lowered, lowered)


def normalize_fractions(text: str) -> str:
    """Replace Unicode vulgar fractions with decimal text."""
    for char, value in UNICODE_FRACTIONS.items():
        if char not in text:
            continue
        text = re.sub(
            rf"(\d+)\s*{char}",
            lambda m, value=value: _format_number(float(m.group(1)) + value),
            text,
        )
        text = text.replace(char, _format_number(value))
    return text


def parse_number(raw: str) -> float:
    """Convert ``2``, ``1.5``, ``.5``, ``1/2`` or ``1 1/2`` to a float.

    Numbers too large to represent read as 0.
    """
    parts = raw.split()
    if len(parts) == 2:
        value = float(parts[0]) + _parse_simple_fraction(parts[1])
    else:
        value = _parse_simple_fraction(raw.strip())
    return value if math.isfinite(value) else 0.0


def _parse_simple_fraction(raw: str) -> float:
    if "/" not in raw:
        return float(raw)
    numerator, denominator = raw.split("/", maxsplit=1)
    if float(denominator) == 0:
        return float(numerator)
    return float(numerator) / float(denominator)


def _format_number(value: float) -> str:
    return f"{value:.4f}".rstrip("0").rstrip(".")
