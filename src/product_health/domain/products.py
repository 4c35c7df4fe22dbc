"""Product record domain models."""

from dataclasses import dataclass

from product_health.domain.health import NutriScoreGrade


@dataclass(frozen=True)
class NutritionProfile:
    """Nutrient values per 100 g / 100 ml. ``None`` means not measured."""

    energy: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    proteins: float | None = None
    salt: float | None = None
    sodium: float | None = None


@dataclass(frozen=True)
class AdditiveRef:
    """An additive code as printed on a product."""

    code: str


@dataclass(frozen=True)
class Ingredient:
    """A single ingredient from the product label."""

    name: str
    allergen: bool = False


@dataclass(frozen=True)
class ProductRecord:
    """Immutable input to the scoring engine."""

    nutrition: NutritionProfile | None = None
    additives: tuple[AdditiveRef, ...] = ()
    processing_level: int | None = None
    nutri_score: NutriScoreGrade | None = None
    ingredients: tuple[Ingredient, ...] = ()
    allergens: tuple[str, ...] = ()

    @property
    def additive_codes(self) -> list[str]:
        """Return the raw additive codes in label order."""
        return [additive.code for additive in self.additives]


@dataclass(frozen=True)
class CatalogProduct:
    """A product fetched from the upstream catalog."""

    barcode: str
    name: str
    brand: str
    record: ProductRecord
