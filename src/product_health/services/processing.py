"""Processing level (NOVA group) classification."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from product_health.domain.health import Reason, ReasonType
from product_health.domain.rules import PROCESSING_DESCRIPTIONS

ULTRA_PROCESSED_LEVEL = 4
ULTRA_PROCESSED_WARNING = (
    "This is an ultra-processed food, which is generally less healthy than "
    "minimally processed alternatives."
)

_LEVEL_RULES: dict[int, tuple[ReasonType, int]] = {
    1: (ReasonType.POSITIVE, 10),
    2: (ReasonType.POSITIVE, 5),
    3: (ReasonType.WARNING, -10),
    4: (ReasonType.NEGATIVE, -20),
}


@dataclass(frozen=True)
class ProcessingEvaluation:
    """Score contribution from the processing level."""

    score_delta: int
    reason: Reason | None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessingClassifier:
    """Maps a 1-4 processing level to a score delta and description."""

    descriptions: Mapping[int, str] = field(
        default_factory=lambda: PROCESSING_DESCRIPTIONS
    )

    def evaluate(self, level: int | None) -> ProcessingEvaluation:
        """Return the contribution for a processing level, if recognised."""
        if level is None or level not in _LEVEL_RULES:
            return ProcessingEvaluation(score_delta=0, reason=None)
        reason_type, impact = _LEVEL_RULES[level]
        reason = Reason(
            type=reason_type,
            category="processing",
            message=self.describe(level),
            impact=impact,
        )
        warnings = (
            (ULTRA_PROCESSED_WARNING,) if level == ULTRA_PROCESSED_LEVEL else ()
        )
        return ProcessingEvaluation(score_delta=impact, reason=reason, warnings=warnings)

    def describe(self, level: int) -> str:
        """Return the descriptive sentence for a processing level."""
        return self.descriptions.get(level, f"Processing level {level}")
