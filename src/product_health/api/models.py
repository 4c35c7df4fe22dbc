"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

from product_health.domain.health import NutriScoreGrade
from product_health.domain.products import (
    AdditiveRef,
    Ingredient,
    NutritionProfile,
    ProductRecord,
)

_STRICT_NUMBERS = ConfigDict(populate_by_name=True, allow_inf_nan=False)


class NutritionPayload(BaseModel):
    """Nutrient values per 100 g."""

    model_config = _STRICT_NUMBERS

    energy: float | None = None
    fat: float | None = None
    saturated_fat: float | None = Field(default=None, alias="saturatedFat")
    carbohydrates: float | None = None
    sugars: float | None = None
    fiber: float | None = None
    proteins: float | None = None
    salt: float | None = None
    sodium: float | None = None

    def to_profile(self) -> NutritionProfile:
        return NutritionProfile(**self.model_dump())


class AdditivePayload(BaseModel):
    """Additive code as printed on the label."""

    code: str


class IngredientPayload(BaseModel):
    """Ingredient entry."""

    name: str
    allergen: bool = False


class AnalyzeRequest(BaseModel):
    """Product data submitted for scoring."""

    model_config = _STRICT_NUMBERS

    nutrition: NutritionPayload | None = None
    additives: list[AdditivePayload] | None = None
    processing_level: StrictInt | None = Field(
        default=None, alias="processingLevel", ge=1, le=4
    )
    nutri_score: NutriScoreGrade | None = Field(default=None, alias="nutriScore")
    ingredients: list[IngredientPayload] | None = None
    allergens: list[str] | None = None

    @field_validator("nutri_score", mode="before")
    @classmethod
    def _upper_grade(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper() or None
        return value

    def to_record(self) -> ProductRecord:
        """Convert the payload into an engine input record."""
        return ProductRecord(
            nutrition=self.nutrition.to_profile() if self.nutrition else None,
            additives=tuple(
                AdditiveRef(code=item.code) for item in self.additives or ()
            ),
            processing_level=self.processing_level,
            nutri_score=self.nutri_score,
            ingredients=tuple(
                Ingredient(name=item.name, allergen=item.allergen)
                for item in self.ingredients or ()
            ),
            allergens=tuple(self.allergens or ()),
        )


class RiskRequest(BaseModel):
    """Additive codes to assess together."""

    codes: list[str] = Field(default_factory=list)
