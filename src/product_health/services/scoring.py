"""Composite health score aggregation."""

import logging
from dataclasses import dataclass, field

from product_health.domain.health import HealthGrade, HealthScoreResult, Reason
from product_health.domain.products import ProductRecord
from product_health.services.additives import AdditiveRiskAssessor, unique_codes
from product_health.services.ingredients import IngredientEvaluator
from product_health.services.nutri_score import NutriScoreCalculator
from product_health.services.nutrients import NutrientEvaluator
from product_health.services.processing import (
    ULTRA_PROCESSED_LEVEL,
    ProcessingClassifier,
)

BASELINE_SCORE = 100
MIN_SCORE = 0
MAX_SCORE = 100

GRADE_BREAKPOINTS: tuple[tuple[int, HealthGrade], ...] = (
    (80, HealthGrade.EXCELLENT),
    (65, HealthGrade.GOOD),
    (50, HealthGrade.MODERATE),
    (35, HealthGrade.POOR),
)

SUGAR_FOLLOW_UP_GRAMS = 15
SALT_FOLLOW_UP_GRAMS = 1.5
MANY_ADDITIVES = 5

_logger = logging.getLogger(__name__)


def grade_for_score(score: int) -> HealthGrade:
    """Map a clamped score to its grade."""
    for minimum, grade in GRADE_BREAKPOINTS:
        if score >= minimum:
            return grade
    return HealthGrade.AVOID


def clamp_score(score: int) -> int:
    """Clamp a raw score into the 0-100 range."""
    return max(MIN_SCORE, min(MAX_SCORE, score))


@dataclass(frozen=True)
class ScoreAggregator:
    """Runs every evaluator over a product record and merges the results."""

    additive_assessor: AdditiveRiskAssessor
    nutrient_evaluator: NutrientEvaluator = field(default_factory=NutrientEvaluator)
    ingredient_evaluator: IngredientEvaluator = field(
        default_factory=IngredientEvaluator
    )
    processing_classifier: ProcessingClassifier = field(
        default_factory=ProcessingClassifier
    )
    nutri_score_calculator: NutriScoreCalculator = field(
        default_factory=NutriScoreCalculator
    )

    def score(self, product: ProductRecord) -> HealthScoreResult:
        """Compute the health score result for a product record."""
        score = BASELINE_SCORE
        reasons: list[Reason] = []
        warnings: list[str] = []

        if product.nutrition is not None:
            nutrients = self.nutrient_evaluator.evaluate_all(product.nutrition)
            score += nutrients.score_delta
            reasons.extend(nutrients.reasons)
            warnings.extend(nutrients.warnings)

        if product.ingredients or product.allergens:
            ingredients = self.ingredient_evaluator.evaluate(
                product.ingredients, product.allergens
            )
            score += ingredients.score_delta
            reasons.extend(ingredients.reasons)
            warnings.extend(ingredients.warnings)

        if product.additives:
            additives = self.additive_assessor.evaluate_all(product.additives)
            score += additives.score_delta
            reasons.extend(additives.reasons)
            warnings.extend(additives.warnings)

        processing = self.processing_classifier.evaluate(product.processing_level)
        if processing.reason is not None:
            score += processing.score_delta
            reasons.append(processing.reason)
            warnings.extend(processing.warnings)

        final_score = clamp_score(score)
        grade = grade_for_score(final_score)

        nutri_score = product.nutri_score
        if nutri_score is None and product.nutrition is not None:
            nutri_score = self.nutri_score_calculator.grade_profile(product.nutrition)

        _logger.debug(
            "Scored product: raw=%s score=%s grade=%s reasons=%s",
            score,
            final_score,
            grade,
            len(reasons),
        )
        return HealthScoreResult(
            score=final_score,
            grade=grade,
            nutri_score=nutri_score,
            processing_level=product.processing_level,
            reasons=tuple(reasons),
            recommendations=tuple(build_recommendations(product, grade)),
            warnings=tuple(warnings),
        )


def build_recommendations(product: ProductRecord, grade: HealthGrade) -> list[str]:
    """Return the tiered recommendation plus targeted follow-ups."""
    if grade in {HealthGrade.EXCELLENT, HealthGrade.GOOD}:
        recommendations = [
            "This product is generally healthy and can be part of a balanced diet."
        ]
    elif grade == HealthGrade.MODERATE:
        recommendations = [
            "This product can be consumed in moderation. Consider it as an "
            "occasional treat rather than a daily staple."
        ]
    else:
        recommendations = [
            "Consider limiting consumption of this product. Look for healthier "
            "alternatives with fewer additives and lower sugar/salt content."
        ]

    nutrition = product.nutrition
    if nutrition is not None:
        if nutrition.sugars is not None and nutrition.sugars > SUGAR_FOLLOW_UP_GRAMS:
            recommendations.append(
                "Look for products with lower sugar content or natural sweeteners."
            )
        if nutrition.salt is not None and nutrition.salt > SALT_FOLLOW_UP_GRAMS:
            recommendations.append(
                "This product is high in salt. Consider low-sodium alternatives."
            )
    if product.processing_level == ULTRA_PROCESSED_LEVEL:
        recommendations.append(
            "Try to choose less processed alternatives when possible."
        )
    if len(unique_codes(product.additive_codes)) > MANY_ADDITIVES:
        recommendations.append(
            "This product contains many additives. Consider products with simpler "
            "ingredient lists."
        )
    return recommendations
