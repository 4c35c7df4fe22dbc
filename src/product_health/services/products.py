"""Product lookups and catalog payload mapping."""

import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass

from product_health.adapters.openfoodfacts_client import ProductCatalogClient
from product_health.domain.health import NutriScoreGrade
from product_health.domain.products import (
    AdditiveRef,
    CatalogProduct,
    Ingredient,
    NutritionProfile,
    ProductRecord,
)
from product_health.services.cache import Cache

_NUTRIMENT_KEYS = {
    "energy": "energy-kcal_100g",
    "fat": "fat_100g",
    "saturated_fat": "saturated-fat_100g",
    "carbohydrates": "carbohydrates_100g",
    "sugars": "sugars_100g",
    "fiber": "fiber_100g",
    "proteins": "proteins_100g",
    "salt": "salt_100g",
    "sodium": "sodium_100g",
}
_TAG_PREFIX = re.compile(r"^[a-z]{2}:\s*", re.IGNORECASE)
_PROCESSING_LEVELS = range(1, 5)

_logger = logging.getLogger(__name__)


class ProductNotFoundError(LookupError):
    """Raised when the catalog has no product for a barcode."""

    def __init__(self, barcode: str) -> None:
        super().__init__(f"Product with barcode {barcode} not found")
        self.barcode = barcode


@dataclass
class ProductService:
    """Resolves barcodes to product records with caching."""

    catalog_client: ProductCatalogClient
    cache: Cache
    product_ttl_seconds: int = 7 * 24 * 3600
    debug: bool = False

    async def get_product(self, barcode: str) -> CatalogProduct:
        """Return the catalog product for a barcode."""
        cache_key = f"off:product:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, CatalogProduct):
            if self.debug:
                _logger.info("Returning cached product for barcode: %s", barcode)
            return cached

        _logger.info("Fetching product from Open Food Facts for barcode: %s", barcode)
        payload = await self.catalog_client.get_product(barcode)
        if payload is None:
            raise ProductNotFoundError(barcode)
        product = parse_catalog_product(payload, barcode)
        self.cache.set(cache_key, product, ttl_seconds=self.product_ttl_seconds)
        return product


def parse_catalog_product(payload: Mapping[str, object], barcode: str) -> CatalogProduct:
    """Map an Open Food Facts payload to a catalog product."""
    product = payload.get("product")
    if not isinstance(product, Mapping):
        raise ValueError("Invalid product data")

    name = (
        product.get("product_name") or product.get("product_name_en") or "Unknown Product"
    )
    record = ProductRecord(
        nutrition=_parse_nutrition(product.get("nutriments")),
        additives=tuple(
            AdditiveRef(code=code)
            for code in (
                normalize_additive_tag(str(tag))
                for tag in _as_list(product.get("additives_tags"))
            )
            if code
        ),
        processing_level=_parse_processing_level(product.get("nova_group")),
        nutri_score=_parse_nutri_score(product.get("nutriscore_grade")),
        ingredients=tuple(
            Ingredient(name=str(item.get("text") or f"Ingredient {index}"))
            for index, item in enumerate(_as_list(product.get("ingredients")), start=1)
            if isinstance(item, Mapping)
        ),
        allergens=tuple(
            _strip_tag_prefix(str(tag)) for tag in _as_list(product.get("allergens_tags"))
        ),
    )
    return CatalogProduct(
        barcode=barcode,
        name=str(name),
        brand=str(product.get("brands") or ""),
        record=record,
    )


def normalize_additive_tag(tag: str) -> str | None:
    """Turn a catalog tag such as ``en:e330`` into ``E330``."""
    code = _strip_tag_prefix(tag).upper().replace(" ", "")
    if not code:
        return None
    if code[0].isdigit():
        code = f"E{code}"
    return code


def sanitize_number(value: object) -> float | None:
    """Return a finite float, or None for missing and malformed values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _parse_nutrition(nutriments: object) -> NutritionProfile | None:
    if not isinstance(nutriments, Mapping):
        return None
    values = {
        field_name: sanitize_number(nutriments.get(key))
        for field_name, key in _NUTRIMENT_KEYS.items()
    }
    if all(value is None for value in values.values()):
        return None
    return NutritionProfile(**values)


def _parse_processing_level(value: object) -> int | None:
    number = sanitize_number(value)
    if number is None or not number.is_integer():
        return None
    level = int(number)
    return level if level in _PROCESSING_LEVELS else None


def _parse_nutri_score(value: object) -> NutriScoreGrade | None:
    if not isinstance(value, str):
        return None
    try:
        return NutriScoreGrade(value.strip().upper())
    except ValueError:
        return None


def _strip_tag_prefix(tag: str) -> str:
    return _TAG_PREFIX.sub("", tag.strip())


def _as_list(value: object) -> list[object]:
    return list(value) if isinstance(value, list) else []
