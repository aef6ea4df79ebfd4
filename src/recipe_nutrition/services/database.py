"""Static per-100 g nutrient table."""

import json
import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from pydantic import BaseModel, Field, ValidationError

from recipe_nutrition.domain.nutrition import NutrientValues

DEFAULT_DATABASE_PATH = Path(__file__).resolve().parents[1] / "data" / (
    "nutrient_database.json"
)

_logger = logging.getLogger(__name__)


class NutrientDatabaseError(ValueError):
    """Raised when a nutrient table cannot be loaded."""


class _NutrientRecord(BaseModel):
    """Validated database row."""

    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fat: float = Field(ge=0.0)
    fiber: float | None = Field(default=None, ge=0.0)
    sugar: float | None = Field(default=None, ge=0.0)
    sodium: float | None = Field(default=None, ge=0.0)


class NutrientDatabase(Mapping[str, NutrientValues]):
    """Read-only mapping of canonical food key to per-100 g nutrients.

    Keys keep their insertion order, which the fuzzy matcher relies on.
    """

    def __init__(self, entries: Mapping[str, NutrientValues]) -> None:
        self._entries = MappingProxyType(
            {key.strip().lower(): value for key, value in entries.items()}
        )

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, Mapping[str, object]]
    ) -> "NutrientDatabase":
        """Build a database from plain dictionaries, validating every row."""
        entries: dict[str, NutrientValues] = {}
        for key, values in raw.items():
            try:
                record = _NutrientRecord.model_validate(values)
            except ValidationError as exc:
                raise NutrientDatabaseError(
                    f"Invalid nutrient entry {key!r}: {exc}"
                ) from exc
            entries[key] = NutrientValues(**record.model_dump())
        return cls(entries)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "NutrientDatabase":
        """Load a database from a JSON file with an ``ingredients`` object."""
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise NutrientDatabaseError(
                f"Cannot read nutrient database {path}: {exc}"
            ) from exc
        ingredients = payload.get("ingredients") if isinstance(payload, dict) else None
        if not isinstance(ingredients, dict):
            raise NutrientDatabaseError(
                f"Nutrient database {path} has no 'ingredients' object"
            )
        database = cls.from_mapping(ingredients)
        _logger.info("Loaded nutrient database: path=%s entries=%s", path, len(database))
        return database

    def __getitem__(self, key: str) -> NutrientValues:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache(maxsize=1)
def load_default_database() -> NutrientDatabase:
    """Load the packaged nutrient table once per process."""
    return NutrientDatabase.from_json_file(DEFAULT_DATABASE_PATH)


def load_database(path: str | None = None) -> NutrientDatabase:
    """Load a nutrient table from ``path`` or fall back to the packaged one."""
    if path:
        return NutrientDatabase.from_json_file(path)
    return load_default_database()
