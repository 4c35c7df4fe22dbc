"""Static rule tables used by the scoring engine."""

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType

from product_health.domain.additives import AdditiveCombination, AdditiveRange
from product_health.domain.health import ConcernLevel, NutriScoreGrade


class Nutrient(StrEnum):
    """Nutrients with a concern threshold table."""

    SUGARS = "sugars"
    SALT = "salt"
    SATURATED_FAT = "saturated_fat"
    FIBER = "fiber"


@dataclass(frozen=True)
class ConcernThresholds:
    """Tier bounds for one nutrient, in grams per 100 g."""

    low: float
    moderate: float
    high: float
    higher_is_better: bool = False


@dataclass(frozen=True)
class PointsBand:
    """One row of a Nutri-Score points table.

    For negative nutrients ``limit`` is an inclusive upper bound; for
    positive nutrients it is an inclusive lower bound.
    """

    limit: float
    points: int


@dataclass(frozen=True)
class NutriScoreTables:
    """Points tables and grade ranges for the nutrition letter grade."""

    energy: tuple[PointsBand, ...]
    saturated_fat: tuple[PointsBand, ...]
    sugars: tuple[PointsBand, ...]
    salt: tuple[PointsBand, ...]
    fiber: tuple[PointsBand, ...]
    protein: tuple[PointsBand, ...]
    grades: tuple[tuple[NutriScoreGrade, int, int], ...]
    fallback_grade: NutriScoreGrade = NutriScoreGrade.E


def _ascending(limits: list[float]) -> tuple[PointsBand, ...]:
    bands = [PointsBand(limit=limit, points=index) for index, limit in enumerate(limits)]
    bands.append(PointsBand(limit=float("inf"), points=len(limits)))
    return tuple(bands)


def _descending(limits: list[float]) -> tuple[PointsBand, ...]:
    bands = [
        PointsBand(limit=limit, points=-(len(limits) - index))
        for index, limit in enumerate(limits)
    ]
    bands.append(PointsBand(limit=0, points=0))
    return tuple(bands)


DEFAULT_CONCERN_THRESHOLDS: MappingProxyType[Nutrient, ConcernThresholds] = (
    MappingProxyType(
        {
            Nutrient.SUGARS: ConcernThresholds(low=5, moderate=15, high=22.5),
            Nutrient.SALT: ConcernThresholds(low=0.3, moderate=1.2, high=2.4),
            Nutrient.SATURATED_FAT: ConcernThresholds(low=1.5, moderate=5, high=10),
            Nutrient.FIBER: ConcernThresholds(
                low=10, moderate=6, high=3, higher_is_better=True
            ),
        }
    )
)

DEFAULT_NUTRI_SCORE_TABLES = NutriScoreTables(
    energy=_ascending([335, 670, 1005, 1340, 1675, 2010, 2345, 2680, 3015, 3350]),
    saturated_fat=_ascending([1, 2, 3, 4, 5, 6, 7, 8, 9, 10]),
    sugars=_ascending([4.5, 9, 13.5, 18, 22.5, 27, 31, 36, 40, 45]),
    salt=_ascending([0.3, 0.6, 0.9, 1.2, 1.5, 1.8, 2.1, 2.4, 2.7, 3]),
    fiber=_descending([4.7, 3.7, 2.8, 1.9, 0.9]),
    protein=_descending([8, 6.4, 4.8, 3.2, 1.6]),
    grades=(
        (NutriScoreGrade.A, -15, -1),
        (NutriScoreGrade.B, 0, 2),
        (NutriScoreGrade.C, 3, 10),
        (NutriScoreGrade.D, 11, 18),
        (NutriScoreGrade.E, 19, 40),
    ),
)

PROCESSING_DESCRIPTIONS: MappingProxyType[int, str] = MappingProxyType(
    {
        1: "Unprocessed or minimally processed foods",
        2: "Processed culinary ingredients",
        3: "Processed foods",
        4: "Ultra-processed foods",
    }
)

# Checked in order, so narrower ranges must precede the ranges that cover them.
DEFAULT_ADDITIVE_RANGES: tuple[AdditiveRange, ...] = (
    AdditiveRange(200, 203, "Preservatives", ConcernLevel.LOW),
    AdditiveRange(210, 213, "Preservatives", ConcernLevel.MODERATE),
    AdditiveRange(220, 228, "Preservatives", ConcernLevel.MODERATE),
    AdditiveRange(249, 252, "Preservatives", ConcernLevel.HIGH),
    AdditiveRange(100, 199, "Artificial Colors", ConcernLevel.MODERATE),
    AdditiveRange(620, 635, "Flavor Enhancers", ConcernLevel.MODERATE),
    AdditiveRange(950, 969, "Artificial Sweeteners", ConcernLevel.MODERATE),
)

DEFAULT_COMBINATIONS: tuple[AdditiveCombination, ...] = (
    AdditiveCombination(
        codes=("E621", "E635"),
        concern="MSG and Ribonucleotides combination",
        description=(
            "Both are flavor enhancers that may have synergistic effects on "
            "appetite and reactions"
        ),
    ),
    AdditiveCombination(
        codes=("E211", "E300"),
        concern="Sodium Benzoate and Vitamin C",
        description="Can form benzene, a known carcinogen, when combined",
    ),
    AdditiveCombination(
        codes=("E102", "E104", "E110"),
        concern="Multiple artificial colors",
        description=(
            "Combined artificial colors may increase hyperactivity risk in children"
        ),
    ),
    AdditiveCombination(
        codes=("E951", "E952", "E954"),
        concern="Multiple artificial sweeteners",
        description="Combining different artificial sweeteners may affect gut health",
    ),
)


DEFAULT_CATEGORY_MULTIPLIERS: MappingProxyType[str, float] = MappingProxyType(
    {
        "Artificial Color": 1.5,
        "Artificial Sweetener": 1.3,
        "Preservative": 1.2,
        "Flavor Enhancer": 1.4,
        "Emulsifier": 1.1,
        "Antioxidant": 0.8,
        "Thickener / Stabilizer": 0.9,
        "Acidity Regulator": 0.7,
        "Natural Color": 0.6,
        "Vitamin": 0.5,
    }
)

@dataclass(frozen=True)
class AdditiveRules:
    """Score deltas and risk weights applied per additive."""

    impacts: MappingProxyType[ConcernLevel, int] = field(
        default_factory=lambda: MappingProxyType(
            {
                ConcernLevel.VERY_HIGH: -8,
                ConcernLevel.HIGH: -5,
                ConcernLevel.MODERATE: -3,
                ConcernLevel.LOW: -1,
            }
        )
    )
    unknown_impact: int = -2
    risk_weights: MappingProxyType[ConcernLevel, int] = field(
        default_factory=lambda: MappingProxyType(
            {
                ConcernLevel.VERY_HIGH: 4,
                ConcernLevel.HIGH: 3,
                ConcernLevel.MODERATE: 2,
                ConcernLevel.LOW: 1,
            }
        )
    )
    combination_penalty: int = 2
    combinations: tuple[AdditiveCombination, ...] = DEFAULT_COMBINATIONS
    penalties: MappingProxyType[ConcernLevel, int] = field(
        default_factory=lambda: MappingProxyType(
            {
                ConcernLevel.VERY_HIGH: 15,
                ConcernLevel.HIGH: 10,
                ConcernLevel.MODERATE: 5,
                ConcernLevel.LOW: 2,
            }
        )
    )
    category_multipliers: MappingProxyType[str, float] = field(
        default_factory=lambda: DEFAULT_CATEGORY_MULTIPLIERS
    )
    asthma_multiplier: float = 2
    hyperactivity_multiplier: float = 1.8
    comprehensive_combination_penalty: int = 5
