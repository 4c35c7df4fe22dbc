"""Tests for ingredient list checks."""

from product_health.domain.health import ReasonType
from product_health.domain.products import Ingredient
from product_health.services.ingredients import IngredientEvaluator


def test_artificial_ingredients_are_penalised() -> None:
    evaluation = IngredientEvaluator().evaluate(
        [
            Ingredient(name="Sugar"),
            Ingredient(name="Artificial flavouring"),
            Ingredient(name="Partially HYDROGENATED soybean oil"),
        ]
    )

    (reason,) = evaluation.reasons
    assert reason.type == ReasonType.NEGATIVE
    assert reason.impact == -6
    assert reason.message == "Contains 2 artificial or processed ingredient(s)"
    assert evaluation.score_delta == -6


def test_long_ingredient_list_warning() -> None:
    ingredients = [Ingredient(name=f"Ingredient {index}") for index in range(16)]

    evaluation = IngredientEvaluator().evaluate(ingredients)

    (reason,) = evaluation.reasons
    assert reason.type == ReasonType.WARNING
    assert reason.impact == -5
    assert reason.message == (
        "Long ingredient list (16 ingredients) - may indicate high processing"
    )


def test_threshold_list_is_not_long() -> None:
    ingredients = [Ingredient(name=f"Ingredient {index}") for index in range(15)]

    assert IngredientEvaluator().evaluate(ingredients).reasons == ()


def test_allergens_are_listed_once() -> None:
    evaluation = IngredientEvaluator().evaluate(
        [Ingredient(name="peanuts", allergen=True)], allergens=["peanuts", "soy", ""]
    )

    assert evaluation.reasons == ()
    assert evaluation.warnings == ("This product contains allergens: peanuts, soy",)


def test_custom_keywords() -> None:
    evaluator = IngredientEvaluator(keywords=("modified",), long_list_threshold=1)

    evaluation = evaluator.evaluate(
        [Ingredient(name="Modified starch"), Ingredient(name="Artificial color")]
    )

    assert [reason.impact for reason in evaluation.reasons] == [-3, -5]
