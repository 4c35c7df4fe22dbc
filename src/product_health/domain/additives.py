"""Additive knowledge base and risk domain models."""

from dataclasses import dataclass, field
from enum import StrEnum

from product_health.domain.health import ConcernLevel


@dataclass(frozen=True)
class AdditiveInfo:
    """Knowledge base entry for a single additive."""

    code: str
    name: str
    category: str
    concern_level: ConcernLevel
    description: str
    health_effects: tuple[str, ...]
    why_avoid: tuple[str, ...] = ()
    benefits: tuple[str, ...] | None = None
    alternatives: str | None = None

    @property
    def is_high_risk(self) -> bool:
        """Return True for high and very high concern additives."""
        return self.concern_level in {ConcernLevel.HIGH, ConcernLevel.VERY_HIGH}

    @property
    def is_beneficial(self) -> bool:
        """Return True when the entry lists any benefits."""
        return bool(self.benefits)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation."""
        return {
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "concernLevel": self.concern_level.value,
            "description": self.description,
            "healthEffects": list(self.health_effects),
            "whyAvoid": list(self.why_avoid),
            "benefits": list(self.benefits) if self.benefits is not None else None,
            "alternatives": self.alternatives,
        }


@dataclass(frozen=True)
class AdditiveRange:
    """A numeric E-number range sharing one category and concern level."""

    start: int
    end: int
    category: str
    concern_level: ConcernLevel

    @property
    def label(self) -> str:
        """Return the range in E-number notation."""
        return f"E{self.start}-E{self.end}"

    def contains(self, number: int) -> bool:
        """Return True if the E-number falls inside the range."""
        return self.start <= number <= self.end


@dataclass(frozen=True)
class AdditiveCombination:
    """A set of additives known to be problematic together."""

    codes: tuple[str, ...]
    concern: str
    description: str


@dataclass(frozen=True)
class CombinationFinding:
    """A known combination detected on a product."""

    combination: str
    concern: str
    description: str
    penalty: int


@dataclass(frozen=True)
class AdditiveRiskSummary:
    """Weighted aggregate risk over a product's additives."""

    overall: int
    max_possible: int
    breakdown: dict[ConcernLevel, int]
    risk_level: ConcernLevel
    combinations: tuple[CombinationFinding, ...] = ()

    @property
    def combination_penalty(self) -> int:
        """Return the extra risk contributed by known combinations."""
        return sum(finding.penalty for finding in self.combinations)

    @property
    def total(self) -> int:
        """Return the weighted risk plus combination penalties."""
        return self.overall + self.combination_penalty

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation."""
        return {
            "overall": self.overall,
            "maxPossible": self.max_possible,
            "breakdown": {level.value: value for level, value in self.breakdown.items()},
            "riskLevel": self.risk_level.value,
            "combinations": [
                {
                    "combination": finding.combination,
                    "concern": finding.concern,
                    "description": finding.description,
                    "penalty": finding.penalty,
                }
                for finding in self.combinations
            ],
            "combinationPenalty": self.combination_penalty,
            "total": self.total,
        }


@dataclass(frozen=True)
class DetailedAdditiveAnalysis:
    """Knowledge-base driven breakdown of a product's additives."""

    total_impact: int
    concerns: tuple[str, ...]
    recommendations: tuple[str, ...]
    warnings: tuple[str, ...]
    high_risk: tuple[AdditiveInfo, ...]
    beneficial: tuple[AdditiveInfo, ...]


@dataclass(frozen=True)
class CategoryInsight:
    """Average concern for one additive category on a product."""

    category: str
    count: int
    concern_level: ConcernLevel
    insight: str


@dataclass(frozen=True)
class AdditiveLoad:
    """Category distribution of a product's additives."""

    dominant_category: str
    distribution: dict[str, int]
    insights: tuple[CategoryInsight, ...]
    processing_estimate: str


@dataclass(frozen=True)
class SensitivityProfile:
    """Consumer sensitivities used for personalised advice."""

    asthma: bool = False
    hyperactivity: bool = False
    pregnancy: bool = False
    children: bool = False


@dataclass(frozen=True)
class PersonalizedAdvice:
    """Advice for a product given a sensitivity profile."""

    avoid: tuple[str, ...]
    warnings: tuple[str, ...]
    alternatives: tuple[str, ...]
    safe: tuple[str, ...]


@dataclass(frozen=True)
class DatabaseStats:
    """Summary of the additive knowledge base."""

    total_additives: int
    categories: tuple[str, ...]
    concern_levels: dict[ConcernLevel, int]
    invalid_additives: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-ready representation."""
        return {
            "totalAdditives": self.total_additives,
            "categories": list(self.categories),
            "concernLevels": {
                level.value: count for level, count in self.concern_levels.items()
            },
            "invalidAdditives": {
                code: list(errors) for code, errors in self.invalid_additives.items()
            },
        }


@dataclass(frozen=True)
class ComprehensiveAdditiveScore:
    """Penalty-based 0-100 score over a product's additives."""

    total_score: int
    category_breakdown: dict[str, float]
    concern_breakdown: dict[ConcernLevel, float]
    risk_factors: tuple[str, ...]
    recommendations: tuple[str, ...]


@dataclass(frozen=True)
class RiskFactor:
    """A single contributor to cumulative additive risk."""

    factor: str
    severity: ConcernLevel
    description: str


@dataclass(frozen=True)
class CumulativeRisk:
    """Average-based risk over all additives plus mitigation advice."""

    overall_risk: ConcernLevel
    risk_factors: tuple[RiskFactor, ...]
    mitigation_strategies: tuple[str, ...]
    safe_threshold: int


@dataclass(frozen=True)
class ProductAdditives:
    """A named product and the additive codes on its label."""

    name: str
    codes: tuple[str, ...]


@dataclass(frozen=True)
class ComparisonSide:
    """Risk figures for one side of a product comparison."""

    score: int
    risk_level: ConcernLevel
    high_risk_count: int


@dataclass(frozen=True)
class ProductComparison:
    """Side-by-side additive comparison of two products."""

    better_choice: str
    difference: int
    first: ComparisonSide
    second: ComparisonSide
    first_only: tuple[str, ...]
    second_only: tuple[str, ...]
    shared: tuple[str, ...]
    recommendations: tuple[str, ...]


@dataclass(frozen=True)
class AdditiveAlternative:
    """Substitutes suggested for a concerning additive."""

    original: str
    concern: ConcernLevel
    alternatives: tuple[str, ...]
    reasoning: str


class SuggestionType(StrEnum):
    """How a formulation change treats an additive."""

    REMOVE = "remove"
    REPLACE = "replace"
    REDUCE = "reduce"


class SuggestionPriority(StrEnum):
    """Urgency of an improvement suggestion."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ImprovementSuggestion:
    """A formulation change that lowers a product's additive concern."""

    type: SuggestionType
    additive: str
    description: str
    expected_benefit: str
    priority: SuggestionPriority
