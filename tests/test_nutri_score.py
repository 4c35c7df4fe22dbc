"""Tests for the nutrition letter grade."""

import pytest

from product_health.domain.health import NutriScoreGrade
from product_health.domain.products import NutritionProfile
from product_health.services.nutri_score import NutriScoreCalculator


def test_points_for_balanced_profile() -> None:
    calculator = NutriScoreCalculator()
    profile = NutritionProfile(
        sugars=2, salt=0.1, saturated_fat=0.5, fiber=5, proteins=12
    )

    assert calculator.points(profile) == -10
    assert calculator.grade_profile(profile) == NutriScoreGrade.A


def test_points_for_heavy_profile() -> None:
    calculator = NutriScoreCalculator()
    profile = NutritionProfile(sugars=30, salt=3, saturated_fat=15, fiber=1)

    assert calculator.points(profile) == 24
    assert calculator.grade_profile(profile) == NutriScoreGrade.E


def test_empty_profile_scores_zero() -> None:
    calculator = NutriScoreCalculator()

    assert calculator.points(NutritionProfile()) == 0
    assert calculator.grade_profile(NutritionProfile()) == NutriScoreGrade.B


@pytest.mark.parametrize(
    ("points", "expected"),
    [
        (-15, NutriScoreGrade.A),
        (-1, NutriScoreGrade.A),
        (0, NutriScoreGrade.B),
        (2, NutriScoreGrade.B),
        (3, NutriScoreGrade.C),
        (10, NutriScoreGrade.C),
        (11, NutriScoreGrade.D),
        (18, NutriScoreGrade.D),
        (19, NutriScoreGrade.E),
        (40, NutriScoreGrade.E),
        (-20, NutriScoreGrade.E),
    ],
)
def test_grade_ranges(points: int, expected: NutriScoreGrade) -> None:
    assert NutriScoreCalculator().grade(points) == expected


@pytest.mark.parametrize("field", ["energy", "saturated_fat", "sugars", "salt"])
def test_more_negative_nutrient_never_lowers_points(field: str) -> None:
    calculator = NutriScoreCalculator()
    values = [0, 0.5, 1, 2.5, 4.6, 10, 30, 400, 1500, 3000, 5000]

    points = [calculator.points(NutritionProfile(**{field: value})) for value in values]

    assert points == sorted(points)
    assert points[-1] == 10


@pytest.mark.parametrize("field", ["fiber", "proteins"])
def test_more_positive_nutrient_never_raises_points(field: str) -> None:
    calculator = NutriScoreCalculator()
    values = [0, 0.5, 1, 2, 3, 4, 5, 7, 9, 20]

    points = [calculator.points(NutritionProfile(**{field: value})) for value in values]

    assert points == sorted(points, reverse=True)
    assert points[-1] == -5
