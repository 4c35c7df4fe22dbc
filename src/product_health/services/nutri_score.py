"""Nutrition letter grade calculation."""

from dataclasses import dataclass

from product_health.domain.health import NutriScoreGrade
from product_health.domain.products import NutritionProfile
from product_health.domain.rules import (
    DEFAULT_NUTRI_SCORE_TABLES,
    NutriScoreTables,
    PointsBand,
)


@dataclass(frozen=True)
class NutriScoreCalculator:
    """Point-based A-E grade computed from raw nutrient values.

    Energy, saturated fat, sugars and salt add 0-10 points each; fiber and
    protein subtract up to 5 points each. Lower totals are better.
    """

    tables: NutriScoreTables = DEFAULT_NUTRI_SCORE_TABLES

    def points(self, profile: NutritionProfile) -> int:
        """Return the point total for a nutrition profile."""
        total = 0
        for value, bands in (
            (profile.energy, self.tables.energy),
            (profile.saturated_fat, self.tables.saturated_fat),
            (profile.sugars, self.tables.sugars),
            (profile.salt, self.tables.salt),
        ):
            if value is not None:
                total += _negative_points(value, bands)
        for value, bands in (
            (profile.fiber, self.tables.fiber),
            (profile.proteins, self.tables.protein),
        ):
            if value is not None:
                total += _positive_points(value, bands)
        return total

    def grade(self, points: int) -> NutriScoreGrade:
        """Map a point total to its letter."""
        for letter, low, high in self.tables.grades:
            if low <= points <= high:
                return letter
        return self.tables.fallback_grade

    def grade_profile(self, profile: NutritionProfile) -> NutriScoreGrade:
        """Return the letter grade for a nutrition profile."""
        return self.grade(self.points(profile))


def _negative_points(value: float, bands: tuple[PointsBand, ...]) -> int:
    for band in bands:
        if value <= band.limit:
            return band.points
    return max(band.points for band in bands)


def _positive_points(value: float, bands: tuple[PointsBand, ...]) -> int:
    for band in bands:
        if value >= band.limit:
            return band.points
    return 0
