"""Tests for ingredient line parsing."""

import pytest

from recipe_nutrition.domain.nutrition import ParsedIngredient
from recipe_nutrition.services.parsing import (
    clean_ingredient_name,
    normalize_fractions,
    normalize_unit,
    parse_ingredient,
    parse_number,
)


@pytest.mark.parametrize(
    ("line", "quantity", "unit", "name"),
    [
        ("2 cups flour", 2.0, "cup", "flour"),
        ("1 1/2 cups sugar", 1.5, "cup", "sugar"),
        ("1/2 tsp salt", 0.5, "tsp", "salt"),
        ("½ cup milk", 0.5, "cup", "milk"),
        ("1½ cups milk", 1.5, "cup", "milk"),
        ("120g flour", 120.0, "g", "flour"),
        ("1 Tbsp Olive Oil", 1.0, "tbsp", "olive oil"),
        ("3 cloves garlic, minced", 3.0, "clove", "garlic"),
        ("2 lbs ground beef", 2.0, "lb", "ground beef"),
        ("2 large eggs", 3.0, "piece", "eggs"),
        ("1 small onion, diced", 0.5, "piece", "onion"),
    ],
)
def test_parse_ingredient_reads_amount_and_name(
    line: str, quantity: float, unit: str, name: str
) -> None:
    parsed = parse_ingredient(line)

    assert parsed.quantity == pytest.approx(quantity)
    assert parsed.unit == unit
    assert parsed.clean_name == name
    assert parsed.has_amount


def test_parse_ingredient_without_amount() -> None:
    parsed = parse_ingredient("salt and pepper")

    assert parsed.quantity is None
    assert parsed.unit is None
    assert parsed.clean_name == "salt and pepper"
    assert not parsed.has_amount


def test_unit_requires_word_boundary() -> None:
    parsed = parse_ingredient("2 cupcakes")

    assert parsed.unit is None
    assert parsed.clean_name == "cupcakes"


def test_clean_name_falls_back_to_alphabetic_tokens() -> None:
    assert parse_ingredient("1 cup chopped").clean_name == "cup chopped"
    assert clean_ingredient_name("") == ""


def test_parse_number_forms() -> None:
    assert parse_number("2") == 2.0
    assert parse_number(".5") == 0.5
    assert parse_number("3/4") == 0.75
    assert parse_number("2 1/4") == 2.25
    assert parse_number("1/0") == 1.0


def test_normalize_fractions_and_units() -> None:
    assert normalize_fractions("¾ cup") == "0.75 cup"
    assert normalize_fractions("2 ¼ cups") == "2.25 cups"
    assert normalize_unit("Tablespoons") == "tbsp"
    assert normalize_unit("pinch") == "pinch"
    assert normalize_unit(None) is None


def test_parse_number_unrepresentable_values_read_as_zero() -> None:
    huge = "9" * 400

    assert parse_number(huge) == 0.0
    assert parse_number(f"{huge}/{huge}") == 0.0
    assert parse_number(f"1 {huge}/1") == 0.0


def test_has_amount_requires_quantity_and_unit() -> None:
    assert not ParsedIngredient(quantity=2, unit=None, clean_name="eggs").has_amount
    assert ParsedIngredient(quantity=2, unit="piece", clean_name="eggs").has_amount
