"""Additive scoring and risk assessment."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from product_health.domain.additives import (
    AdditiveInfo,
    AdditiveLoad,
    AdditiveAlternative,
    AdditiveRiskSummary,
    CategoryInsight,
    CombinationFinding,
    ComparisonSide,
    ComprehensiveAdditiveScore,
    CumulativeRisk,
    DetailedAdditiveAnalysis,
    ImprovementSuggestion,
    PersonalizedAdvice,
    ProductAdditives,
    ProductComparison,
    RiskFactor,
    SensitivityProfile,
    SuggestionPriority,
    SuggestionType,
)
from product_health.domain.health import ConcernLevel, Reason, ReasonType
from product_health.domain.products import AdditiveRef
from product_health.domain.rules import AdditiveRules
from product_health.services.knowledge_base import AdditiveKnowledgeBase, normalize_code

SULFITE_CODES = frozenset({"E220", "E221", "E222", "E223", "E224"})
AZO_COLOR_CODES = frozenset({"E102", "E104", "E110", "E122", "E124", "E129"})

_RISK_CUTS: tuple[tuple[float, ConcernLevel], ...] = (
    (0.75, ConcernLevel.VERY_HIGH),
    (0.5, ConcernLevel.HIGH),
    (0.25, ConcernLevel.MODERATE),
)
_AVERAGE_CUTS: tuple[tuple[float, ConcernLevel], ...] = (
    (3.5, ConcernLevel.VERY_HIGH),
    (2.5, ConcernLevel.HIGH),
    (1.5, ConcernLevel.MODERATE),
)
_LOAD_LEVELS: tuple[tuple[int, str], ...] = (
    (0, "minimal"),
    (2, "light"),
    (5, "moderate"),
    (10, "heavy"),
)
ADDITIVE_SCORE_CEILING = 100
SAFE_THRESHOLD_RATIO = 0.3
SIGNIFICANT_RISK_DIFFERENCE = 5

MITIGATION_STRATEGIES: Mapping[ConcernLevel, tuple[str, ...]] = {
    ConcernLevel.VERY_HIGH: (
        "Avoid this product entirely",
        "Look for products with no or minimal additives",
        "Consult healthcare professional for personalized advice",
    ),
    ConcernLevel.HIGH: (
        "Limit consumption of this type of product",
        "Choose products with natural alternatives when available",
        "Check labels carefully for concerning additives",
    ),
    ConcernLevel.MODERATE: (
        "Consume occasionally rather than regularly",
        "Balance with nutrient-rich foods",
    ),
    ConcernLevel.LOW: ("Generally safe for regular consumption",),
}

# Flavor enhancer substitutes only apply to MSG (E621).
CATEGORY_ALTERNATIVES: Mapping[str, tuple[tuple[str, ...], str]] = {
    "Artificial Color": (
        (
            "Natural colors from fruits and vegetables",
            "Beet juice (E162)",
            "Carrot extract (E160a)",
            "Turmeric (E100)",
        ),
        "Natural colors are generally safer and provide additional nutrients",
    ),
    "Artificial Sweetener": (
        (
            "Stevia (natural sweetener)",
            "Honey or maple syrup (in moderation)",
            "Fruit-based sweeteners",
            "Reduced sugar products",
        ),
        "Natural sweeteners avoid artificial chemical concerns",
    ),
    "Flavor Enhancer": (
        (
            "Natural herbs and spices",
            "Garlic, onion, ginger",
            "Citrus zest",
            "Fresh herbs (basil, oregano, thyme)",
        ),
        "Fresh ingredients provide authentic flavor without chemical enhancement",
    ),
    "Preservative": (
        (
            "Natural preservatives (vitamin C, E)",
            "Proper refrigeration",
            "Smaller package sizes",
            "Natural acids (citric, lactic)",
        ),
        "Natural preservation methods avoid chemical preservatives",
    ),
}
_GENERIC_ALTERNATIVES: tuple[tuple[str, ...], str] = (
    ("Products without this additive", "Natural alternatives when available"),
    "Reducing processed food additives generally improves health profile",
)

_CONCERN_RANK: Mapping[ConcernLevel, int] = {
    ConcernLevel.LOW: 0,
    ConcernLevel.MODERATE: 1,
    ConcernLevel.HIGH: 2,
    ConcernLevel.VERY_HIGH: 3,
}
_PRIORITY_ORDER: Mapping[SuggestionPriority, int] = {
    SuggestionPriority.LOW: 0,
    SuggestionPriority.MEDIUM: 1,
    SuggestionPriority.HIGH: 2,
}



@dataclass(frozen=True)
class AdditiveEvaluation:
    """Score contribution from a product's additives."""

    score_delta: int
    reasons: tuple[Reason, ...]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class AdditiveRiskAssessor:
    """Resolves additive codes and scores their health concern."""

    knowledge_base: AdditiveKnowledgeBase
    rules: AdditiveRules = field(default_factory=AdditiveRules)

    def resolve(self, code: str) -> AdditiveInfo | None:
        """Return the knowledge base entry for a code, if any."""
        return self.knowledge_base.resolve(code)

    def evaluate_all(self, additives: Iterable[AdditiveRef]) -> AdditiveEvaluation:
        """Score each distinct additive in label order."""
        reasons: list[Reason] = []
        warnings: list[str] = []
        for code in unique_codes(additive.code for additive in additives):
            info = self.resolve(code)
            if info is None:
                reasons.append(
                    Reason(
                        type=ReasonType.WARNING,
                        category="additives",
                        message=f"Contains additive {code}",
                        impact=self.rules.unknown_impact,
                    )
                )
                continue
            reasons.append(
                Reason(
                    type=ReasonType.NEGATIVE,
                    category="additives",
                    message=f"Contains {code} ({info.category})",
                    impact=self.rules.impacts[info.concern_level],
                )
            )
            if info.is_high_risk:
                warnings.append(
                    f"Warning: This product contains {code}, "
                    "which may have health concerns."
                )
        return AdditiveEvaluation(
            score_delta=sum(reason.impact for reason in reasons),
            reasons=tuple(reasons),
            warnings=tuple(warnings),
        )

    def assess_risk(
        self,
        codes: Iterable[str],
        weights: Mapping[ConcernLevel, int] | None = None,
    ) -> AdditiveRiskSummary:
        """Return the weighted risk summary, including known combinations."""
        resolved_weights = {**self.rules.risk_weights, **(weights or {})}
        breakdown = dict.fromkeys(ConcernLevel, 0)
        overall = 0
        max_possible = 0
        distinct = unique_codes(codes)
        for code in distinct:
            info = self.resolve(code)
            if info is None:
                continue
            weight = resolved_weights[info.concern_level]
            breakdown[info.concern_level] += weight
            overall += weight
            max_possible += resolved_weights[ConcernLevel.VERY_HIGH]
        ratio = overall / max(max_possible, 1)
        return AdditiveRiskSummary(
            overall=overall,
            max_possible=max_possible,
            breakdown=breakdown,
            risk_level=_bucket(ratio, _RISK_CUTS),
            combinations=self.find_combinations(distinct),
        )

    def find_combinations(self, codes: Iterable[str]) -> tuple[CombinationFinding, ...]:
        """Return known problematic combinations present together."""
        present = set(unique_codes(codes))
        findings = []
        for combination in self.rules.combinations:
            found = [code for code in combination.codes if code in present]
            if len(found) >= 2:  # noqa: PLR2004
                findings.append(
                    CombinationFinding(
                        combination=" + ".join(found),
                        concern=combination.concern,
                        description=combination.description,
                        penalty=self.rules.combination_penalty,
                    )
                )
        return tuple(findings)

    def analyze_detailed(
        self, additives: Iterable[AdditiveRef]
    ) -> DetailedAdditiveAnalysis:
        """Return a knowledge-base breakdown of resolved additives."""
        total_impact = 0
        concerns: list[str] = []
        recommendations: list[str] = []
        warnings: list[str] = []
        high_risk: list[AdditiveInfo] = []
        beneficial: list[AdditiveInfo] = []
        for code in unique_codes(additive.code for additive in additives):
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            total_impact += self.rules.impacts[info.concern_level]
            concerns.extend(info.why_avoid)
            if info.alternatives:
                recommendations.append(f"{info.name}: {info.alternatives}")
            if info.is_high_risk:
                high_risk.append(info)
                warnings.append(
                    f"{info.name} ({info.code}): {', '.join(info.health_effects)}"
                )
            if info.is_beneficial:
                beneficial.append(info)
        return DetailedAdditiveAnalysis(
            total_impact=total_impact,
            concerns=tuple(dict.fromkeys(concerns)),
            recommendations=tuple(dict.fromkeys(recommendations)),
            warnings=tuple(warnings),
            high_risk=tuple(high_risk),
            beneficial=tuple(beneficial),
        )

    def analyze_load(self, codes: Iterable[str]) -> AdditiveLoad:
        """Return the category distribution of a product's additives."""
        distinct = unique_codes(codes)
        distribution: dict[str, int] = {}
        weight_totals: dict[str, int] = {}
        for code in distinct:
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            distribution[info.category] = distribution.get(info.category, 0) + 1
            weight_totals[info.category] = (
                weight_totals.get(info.category, 0)
                + self.rules.risk_weights[info.concern_level]
            )
        insights = tuple(
            _category_insight(category, count, weight_totals[category] / count)
            for category, count in distribution.items()
        )
        dominant = (
            max(distribution, key=distribution.__getitem__) if distribution else "Unknown"
        )
        return AdditiveLoad(
            dominant_category=dominant,
            distribution=distribution,
            insights=insights,
            processing_estimate=_processing_estimate(len(distinct)),
        )

    def personalized_advice(
        self, codes: Iterable[str], sensitivities: SensitivityProfile
    ) -> PersonalizedAdvice:
        """Return avoid/warn/safe lists for a consumer's sensitivities."""
        avoid: list[str] = []
        warnings: list[str] = []
        alternatives: list[str] = []
        safe: list[str] = []
        for code in unique_codes(codes):
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            if sensitivities.asthma and code in SULFITE_CODES:
                avoid.append(info.name)
                if info.alternatives:
                    alternatives.append(info.alternatives)
                continue
            warning = _sensitivity_warning(code, info, sensitivities)
            if warning:
                warnings.append(warning)
            elif info.concern_level == ConcernLevel.LOW or info.is_beneficial:
                safe.append(info.name)
        return PersonalizedAdvice(
            avoid=tuple(avoid),
            warnings=tuple(warnings),
            alternatives=tuple(alternatives),
            safe=tuple(safe),
        )

    def comprehensive_score(
        self,
        codes: Iterable[str],
        *,
        weight_by_category: bool = False,
        consider_combinations: bool = False,
        sensitivities: SensitivityProfile | None = None,
    ) -> ComprehensiveAdditiveScore:
        """Return a 0-100 additive score with optional weighting."""
        distinct = unique_codes(codes)
        category_breakdown: dict[str, float] = {}
        concern_breakdown = dict.fromkeys(ConcernLevel, 0.0)
        risk_factors: list[str] = []
        recommendations: list[str] = []
        total_penalty = 0.0
        for code in distinct:
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            multiplier = 1.0
            if weight_by_category:
                multiplier = self.rules.category_multipliers.get(info.category, 1.0)
            if sensitivities is not None:
                if sensitivities.asthma and info.category == "Preservative":
                    multiplier *= self.rules.asthma_multiplier
                    risk_factors.append(f"{info.name}: Asthma trigger")
                if sensitivities.hyperactivity and info.category == "Artificial Color":
                    multiplier *= self.rules.hyperactivity_multiplier
                    risk_factors.append(f"{info.name}: May affect behavior")
            penalty = self.rules.penalties[info.concern_level] * multiplier
            total_penalty += penalty
            concern_breakdown[info.concern_level] += penalty
            category_breakdown[info.category] = (
                category_breakdown.get(info.category, 0.0) + penalty
            )
            if info.alternatives:
                recommendations.append(info.alternatives)
        if consider_combinations:
            for finding in self.find_combinations(distinct):
                total_penalty += self.rules.comprehensive_combination_penalty
                risk_factors.append(finding.concern)
        remaining = max(0.0, ADDITIVE_SCORE_CEILING - total_penalty)
        return ComprehensiveAdditiveScore(
            total_score=math.floor(remaining + 0.5),
            category_breakdown=category_breakdown,
            concern_breakdown=concern_breakdown,
            risk_factors=tuple(dict.fromkeys(risk_factors)),
            recommendations=tuple(dict.fromkeys(recommendations)),
        )

    def cumulative_risk(self, codes: Iterable[str]) -> CumulativeRisk:
        """Return the average per-additive risk and how to mitigate it."""
        distinct = unique_codes(codes)
        risk_factors: list[RiskFactor] = []
        total = 0
        for code in distinct:
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            total += self.rules.risk_weights[info.concern_level]
            if info.is_high_risk:
                risk_factors.append(
                    RiskFactor(
                        factor=info.name,
                        severity=info.concern_level,
                        description=", ".join(info.health_effects),
                    )
                )
        for finding in self.find_combinations(distinct):
            total += finding.penalty
            risk_factors.append(
                RiskFactor(
                    factor=finding.concern,
                    severity=ConcernLevel.HIGH,
                    description=finding.description,
                )
            )
        overall = _bucket(total / max(len(distinct), 1), _AVERAGE_CUTS)
        return CumulativeRisk(
            overall_risk=overall,
            risk_factors=tuple(risk_factors),
            mitigation_strategies=MITIGATION_STRATEGIES[overall],
            safe_threshold=max(1, math.floor(len(distinct) * SAFE_THRESHOLD_RATIO)),
        )

    def compare_products(
        self, first: ProductAdditives, second: ProductAdditives
    ) -> ProductComparison:
        """Compare the additive risk of two products; lower risk wins."""
        first_side = self._comparison_side(first.codes)
        second_side = self._comparison_side(second.codes)
        better_choice = (
            first.name if first_side.score < second_side.score else second.name
        )
        difference = abs(first_side.score - second_side.score)

        first_codes = unique_codes(first.codes)
        second_codes = unique_codes(second.codes)
        recommendations: list[str] = []
        if difference > SIGNIFICANT_RISK_DIFFERENCE:
            recommendations.append(
                f"Choose {better_choice} for significantly better additive profile"
            )
        if first_side.high_risk_count > second_side.high_risk_count:
            recommendations.append(f"{first.name} has more high-risk additives")
        elif second_side.high_risk_count > first_side.high_risk_count:
            recommendations.append(f"{second.name} has more high-risk additives")
        return ProductComparison(
            better_choice=better_choice,
            difference=difference,
            first=first_side,
            second=second_side,
            first_only=tuple(code for code in first_codes if code not in second_codes),
            second_only=tuple(code for code in second_codes if code not in first_codes),
            shared=tuple(code for code in first_codes if code in second_codes),
            recommendations=tuple(recommendations),
        )

    def healthier_alternatives(
        self, codes: Iterable[str]
    ) -> tuple[AdditiveAlternative, ...]:
        """Suggest substitutes for every additive above low concern."""
        suggestions = []
        for code in unique_codes(codes):
            info = self.knowledge_base.get(code)
            if info is None or info.concern_level == ConcernLevel.LOW:
                continue
            if info.category == "Flavor Enhancer" and code != "E621":
                alternatives, reasoning = _GENERIC_ALTERNATIVES
            else:
                alternatives, reasoning = CATEGORY_ALTERNATIVES.get(
                    info.category, _GENERIC_ALTERNATIVES
                )
            suggestions.append(
                AdditiveAlternative(
                    original=info.name,
                    concern=info.concern_level,
                    alternatives=alternatives,
                    reasoning=reasoning,
                )
            )
        return tuple(suggestions)

    def suggest_improvements(
        self,
        codes: Iterable[str],
        target: ConcernLevel = ConcernLevel.MODERATE,
    ) -> tuple[ImprovementSuggestion, ...]:
        """Return formulation changes for additives above the target concern."""
        suggestions = []
        for code in unique_codes(codes):
            info = self.knowledge_base.get(code)
            if info is None:
                continue
            rank = _CONCERN_RANK[info.concern_level]
            if rank <= _CONCERN_RANK[target]:
                continue
            if info.alternatives:
                suggestion_type = SuggestionType.REPLACE
                description = f"Replace {info.name} with natural alternatives"
                benefit = "Reduced chemical exposure and potential health concerns"
            else:
                suggestion_type = SuggestionType.REMOVE
                description = f"Remove {info.name} from the formulation"
                benefit = f"Eliminate {info.concern_level} concern level additive"
            suggestions.append(
                ImprovementSuggestion(
                    type=suggestion_type,
                    additive=info.name,
                    description=description,
                    expected_benefit=benefit,
                    priority=_suggestion_priority(rank),
                )
            )
        return tuple(
            sorted(suggestions, key=lambda s: _PRIORITY_ORDER[s.priority], reverse=True)
        )

    def _comparison_side(self, codes: Iterable[str]) -> ComparisonSide:
        distinct = unique_codes(codes)
        summary = self.assess_risk(distinct)
        high_risk = 0
        for code in distinct:
            info = self.resolve(code)
            if info is not None and info.is_high_risk:
                high_risk += 1
        return ComparisonSide(
            score=summary.overall,
            risk_level=summary.risk_level,
            high_risk_count=high_risk,
        )


def unique_codes(codes: Iterable[str]) -> list[str]:
    """Normalise codes and drop blanks and repeats, keeping first-seen order."""
    normalized = (normalize_code(code) for code in codes)
    return list(dict.fromkeys(code for code in normalized if code))


def _bucket(value: float, cuts: tuple[tuple[float, ConcernLevel], ...]) -> ConcernLevel:
    for threshold, level in cuts:
        if value >= threshold:
            return level
    return ConcernLevel.LOW


def _category_insight(category: str, count: int, average: float) -> CategoryInsight:
    level = _bucket(average, _AVERAGE_CUTS)
    lowered = category.lower()
    insight = {
        ConcernLevel.VERY_HIGH: (
            f"{category} additives are generally concerning - consider avoiding "
            f"products with multiple {lowered}s"
        ),
        ConcernLevel.HIGH: (
            f"Multiple {lowered} additives present - be cautious with regular "
            "consumption"
        ),
        ConcernLevel.MODERATE: (
            f"{category} additives are moderately concerning - balance with "
            "natural alternatives"
        ),
        ConcernLevel.LOW: (
            f"{category} additives are generally safe - focus on other aspects "
            "of the product"
        ),
    }[level]
    return CategoryInsight(
        category=category, count=count, concern_level=level, insight=insight
    )


def _suggestion_priority(rank: int) -> SuggestionPriority:
    if rank >= _CONCERN_RANK[ConcernLevel.VERY_HIGH]:
        return SuggestionPriority.HIGH
    if rank >= _CONCERN_RANK[ConcernLevel.HIGH]:
        return SuggestionPriority.MEDIUM
    return SuggestionPriority.LOW


def _processing_estimate(count: int) -> str:
    for limit, label in _LOAD_LEVELS:
        if count <= limit:
            return label
    return "ultra_processed"


def _sensitivity_warning(
    code: str, info: AdditiveInfo, sensitivities: SensitivityProfile
) -> str | None:
    if sensitivities.children and code in AZO_COLOR_CODES:
        return f"{info.name} may affect children's behavior and health"
    if sensitivities.pregnancy and info.is_high_risk:
        return f"{info.name} has high concern level - consult healthcare provider"
    if sensitivities.hyperactivity and code in AZO_COLOR_CODES:
        return f"{info.name} may increase hyperactivity in sensitive individuals"
    return None
