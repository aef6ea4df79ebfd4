"""Keyword-based dietary labels for ingredient lists."""

import re

MEAT_KEYWORDS: tuple[str, ...] = (
    "meat",
    "chicken",
    "beef",
    "pork",
    "bacon",
    "ham",
    "sausage",
    "turkey",
    "lamb",
    "fish",
    "salmon",
    "tuna",
    "cod",
    "shrimp",
)
DAIRY_KEYWORDS: tuple[str, ...] = (
    "dairy",
    "cheese",
    "milk",
    "butter",
    "cream",
    "yogurt",
)


def dietary_tags(lines: list[str]) -> list[str]:
    """Return labels such as ``vegetarian`` that the ingredients allow.

    Whole-word keyword checks only; plant milks still count as milk.
    """
    words = set(re.findall(r"[a-z]+", " ".join(lines).lower()))
    words |= {word[:-1] for word in words if word.endswith("s")}
    tags: list[str] = []
    if not words.intersection(MEAT_KEYWORDS):
        tags.append("vegetarian")
    if not words.intersection(DAIRY_KEYWORDS):
        tags.append("dairy-free")
    return tags
