"""Health score domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class ConcernLevel(StrEnum):
    """Ordinal concern tier for a nutrient value or an additive."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class ReasonType(StrEnum):
    """Direction of a scoring reason."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    WARNING = "warning"


class HealthGrade(StrEnum):
    """Coarse grade derived from the clamped score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    AVOID = "avoid"


class NutriScoreGrade(StrEnum):
    """Nutrition letter grade."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


@dataclass(frozen=True)
class Reason:
    """A single scoring rule's contribution."""

    type: ReasonType
    category: str
    message: str
    impact: int

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation."""
        return {
            "type": self.type.value,
            "category": self.category,
            "message": self.message,
            "impact": self.impact,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "Reason":
        """Rebuild a reason from its JSON representation."""
        return cls(
            type=ReasonType(str(payload["type"])),
            category=str(payload["category"]),
            message=str(payload["message"]),
            impact=int(payload["impact"]),  # type: ignore[call-overload]
        )


@dataclass(frozen=True)
class HealthScoreResult:
    """Outcome of scoring one product record."""

    score: int
    grade: HealthGrade
    nutri_score: NutriScoreGrade | None
    processing_level: int | None
    reasons: tuple[Reason, ...]
    recommendations: tuple[str, ...]
    warnings: tuple[str, ...]

    def to_dict(self) -> dict[str, object]:
        """Return the JSON shape consumed by clients and persistence."""
        return {
            "score": self.score,
            "grade": self.grade.value,
            "nutriScore": self.nutri_score.value if self.nutri_score else None,
            "processingLevel": self.processing_level,
            "reasons": [reason.to_dict() for reason in self.reasons],
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> "HealthScoreResult":
        """Rebuild a result previously produced by ``to_dict``."""
        nutri_score = payload.get("nutriScore")
        processing_level = payload.get("processingLevel")
        reasons = payload.get("reasons") or []
        return cls(
            score=int(payload["score"]),  # type: ignore[call-overload]
            grade=HealthGrade(str(payload["grade"])),
            nutri_score=NutriScoreGrade(str(nutri_score)) if nutri_score else None,
            processing_level=(
                int(processing_level)  # type: ignore[call-overload]
                if processing_level is not None
                else None
            ),
            reasons=tuple(
                Reason.from_dict(reason)
                for reason in reasons  # type: ignore[union-attr]
            ),
            recommendations=tuple(payload.get("recommendations") or []),  # type: ignore[arg-type]
            warnings=tuple(payload.get("warnings") or []),  # type: ignore[arg-type]
        )


@dataclass(frozen=True)
class StoredHealthScore:
    """A persisted result with the time it was computed."""

    barcode: str
    result: HealthScoreResult
    updated_at: datetime
