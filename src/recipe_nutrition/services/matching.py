"""Resolve clean ingredient names to nutrient database keys."""

from collections.abc import Mapping
from dataclasses import dataclass

MIN_WORD_LENGTH = 3
MIN_FUZZY_LENGTH = 4


@dataclass(frozen=True)
class NutrientMatcher:
    """Tiered name resolver against the keys of a nutrient table.

    Tiers run in order and the first hit wins: exact name, exact word,
    substring containment, then word-level substring containment. The
    length floors keep short tokens such as "egg" from matching inside
    longer keys such as "eggplant".
    """

    database: Mapping[str, object]

    def match(self, clean_name: str) -> str | None:
        """Return the canonical key for a clean name, or ``None``."""
        name = clean_name.strip().lower()
        if not name:
            return None
        if name in self.database:
            return name

        words = [word for word in name.split() if len(word) >= MIN_WORD_LENGTH]
        for word in words:
            if word in self.database:
                return word

        for key in self.database:
            if len(key) >= MIN_FUZZY_LENGTH and key in name:
                return key
            if len(name) >= MIN_FUZZY_LENGTH and name in key:
                return key

        for word in words:
            if len(word) < MIN_FUZZY_LENGTH:
                continue
            for key in self.database:
                if len(key) >= MIN_FUZZY_LENGTH and (key in word or word in key):
                    return key

        return None
