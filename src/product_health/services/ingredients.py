"""Ingredient list checks."""

from collections.abc import Sequence
from dataclasses import dataclass

from product_health.domain.health import Reason, ReasonType
from product_health.domain.products import Ingredient

ARTIFICIAL_KEYWORDS = (
    "artificial",
    "synthetic",
    "processed",
    "hydrogenated",
)
ARTIFICIAL_IMPACT = -3
LONG_LIST_THRESHOLD = 15
LONG_LIST_IMPACT = -5


@dataclass(frozen=True)
class IngredientEvaluation:
    """Score contribution from the ingredient list."""

    score_delta: int
    reasons: tuple[Reason, ...]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class IngredientEvaluator:
    """Flags artificial ingredients, long lists and allergens."""

    keywords: tuple[str, ...] = ARTIFICIAL_KEYWORDS
    long_list_threshold: int = LONG_LIST_THRESHOLD

    def evaluate(
        self, ingredients: Sequence[Ingredient], allergens: Sequence[str] = ()
    ) -> IngredientEvaluation:
        """Evaluate an ingredient list and declared allergens."""
        reasons: list[Reason] = []
        warnings: list[str] = []

        artificial = sum(1 for ingredient in ingredients if self._is_artificial(ingredient))
        if artificial:
            reasons.append(
                Reason(
                    type=ReasonType.NEGATIVE,
                    category="ingredients",
                    message=(
                        f"Contains {artificial} artificial or processed ingredient(s)"
                    ),
                    impact=artificial * ARTIFICIAL_IMPACT,
                )
            )
        if len(ingredients) > self.long_list_threshold:
            reasons.append(
                Reason(
                    type=ReasonType.WARNING,
                    category="ingredients",
                    message=(
                        f"Long ingredient list ({len(ingredients)} ingredients) - "
                        "may indicate high processing"
                    ),
                    impact=LONG_LIST_IMPACT,
                )
            )

        allergen_names = list(
            dict.fromkeys(
                [ingredient.name for ingredient in ingredients if ingredient.allergen]
                + [name for name in allergens if name]
            )
        )
        if allergen_names:
            warnings.append(
                f"This product contains allergens: {', '.join(allergen_names)}"
            )

        return IngredientEvaluation(
            score_delta=sum(reason.impact for reason in reasons),
            reasons=tuple(reasons),
            warnings=tuple(warnings),
        )

    def _is_artificial(self, ingredient: Ingredient) -> bool:
        name = ingredient.name.lower()
        return any(keyword in name for keyword in self.keywords)
