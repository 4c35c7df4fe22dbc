"""Nutrient concern classification."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from product_health.domain.health import ConcernLevel, Reason, ReasonType
from product_health.domain.products import NutritionProfile
from product_health.domain.rules import (
    DEFAULT_CONCERN_THRESHOLDS,
    ConcernThresholds,
    Nutrient,
)

PROTEIN_BONUS_THRESHOLD = 10


@dataclass(frozen=True)
class NutrientEvaluation:
    """Score contribution from a nutrition profile."""

    score_delta: int
    reasons: tuple[Reason, ...]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class NutrientEvaluator:
    """Scores sugars, salt, saturated fat, fiber and protein."""

    thresholds: Mapping[Nutrient, ConcernThresholds] = field(
        default_factory=lambda: DEFAULT_CONCERN_THRESHOLDS
    )

    def classify(self, nutrient: Nutrient, value: float) -> ConcernLevel:
        """Return the concern tier for a nutrient value."""
        bounds = self.thresholds[nutrient]
        if bounds.higher_is_better:
            if value >= bounds.high:
                return ConcernLevel.LOW
            if value >= bounds.moderate:
                return ConcernLevel.MODERATE
            if value >= bounds.low:
                return ConcernLevel.HIGH
            return ConcernLevel.VERY_HIGH
        if value <= bounds.low:
            return ConcernLevel.LOW
        if value <= bounds.moderate:
            return ConcernLevel.MODERATE
        if value <= bounds.high:
            return ConcernLevel.HIGH
        return ConcernLevel.VERY_HIGH

    def evaluate_all(self, profile: NutritionProfile) -> NutrientEvaluation:
        """Evaluate every measured nutrient in the profile."""
        reasons: list[Reason] = []
        warnings: list[str] = []

        if profile.sugars is not None:
            self._evaluate_limited(
                Nutrient.SUGARS,
                profile.sugars,
                reasons,
                warnings,
                label="sugar",
                warning=(
                    "This product contains {value}g of sugar per 100g, "
                    "which is considered high."
                ),
            )
        if profile.salt is not None:
            self._evaluate_limited(
                Nutrient.SALT,
                profile.salt,
                reasons,
                warnings,
                label="salt",
                warning=(
                    "This product contains {value}g of salt per 100g, "
                    "which exceeds recommended daily intake."
                ),
            )
        if profile.saturated_fat is not None:
            concern = self.classify(Nutrient.SATURATED_FAT, profile.saturated_fat)
            if concern in {ConcernLevel.HIGH, ConcernLevel.VERY_HIGH}:
                reasons.append(
                    Reason(
                        type=ReasonType.NEGATIVE,
                        category="saturatedFat",
                        message=(
                            "High saturated fat: "
                            f"{format_grams(profile.saturated_fat)}g per 100g"
                        ),
                        impact=-12 if concern == ConcernLevel.VERY_HIGH else -8,
                    )
                )
        if profile.fiber is not None:
            concern = self.classify(Nutrient.FIBER, profile.fiber)
            fiber = format_grams(profile.fiber)
            if concern == ConcernLevel.LOW:
                reasons.append(
                    Reason(
                        type=ReasonType.POSITIVE,
                        category="fiber",
                        message=f"Good fiber content: {fiber}g per 100g",
                        impact=8,
                    )
                )
            elif concern == ConcernLevel.VERY_HIGH:
                reasons.append(
                    Reason(
                        type=ReasonType.NEGATIVE,
                        category="fiber",
                        message=f"Low fiber content: {fiber}g per 100g",
                        impact=-5,
                    )
                )
        if profile.proteins is not None and profile.proteins > PROTEIN_BONUS_THRESHOLD:
            reasons.append(
                Reason(
                    type=ReasonType.POSITIVE,
                    category="protein",
                    message=(
                        f"Good protein content: {format_grams(profile.proteins)}g "
                        "per 100g"
                    ),
                    impact=5,
                )
            )

        return NutrientEvaluation(
            score_delta=sum(reason.impact for reason in reasons),
            reasons=tuple(reasons),
            warnings=tuple(warnings),
        )

    def _evaluate_limited(  # noqa: PLR0913
        self,
        nutrient: Nutrient,
        value: float,
        reasons: list[Reason],
        warnings: list[str],
        *,
        label: str,
        warning: str,
    ) -> None:
        """Apply the shared sugar/salt rule."""
        concern = self.classify(nutrient, value)
        grams = format_grams(value)
        if concern in {ConcernLevel.HIGH, ConcernLevel.VERY_HIGH}:
            reasons.append(
                Reason(
                    type=ReasonType.NEGATIVE,
                    category=label,
                    message=f"High {label} content: {grams}g per 100g",
                    impact=-15 if concern == ConcernLevel.VERY_HIGH else -10,
                )
            )
            warnings.append(warning.format(value=grams))
        elif concern == ConcernLevel.LOW:
            reasons.append(
                Reason(
                    type=ReasonType.POSITIVE,
                    category=label,
                    message=f"Low {label} content: {grams}g per 100g",
                    impact=5,
                )
            )


def format_grams(value: float) -> str:
    """Render a gram amount without a trailing ``.0``."""
    return f"{value:g}"
