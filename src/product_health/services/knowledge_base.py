"""Additive knowledge base with memoised derived views."""

import json
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from product_health.domain.additives import AdditiveInfo, AdditiveRange, DatabaseStats
from product_health.domain.health import ConcernLevel
from product_health.domain.rules import DEFAULT_ADDITIVE_RANGES
from product_health.services.cache import InMemoryMemoCache, MemoCache

DEFAULT_ADDITIVES_PATH = Path(__file__).resolve().parents[1] / "data" / "additives.json"

_CODE_FORMAT = re.compile(r"^E\d{2,4}[A-Z]?$")
_CODE_NUMBER = re.compile(r"^E(\d{3,4})")

_logger = logging.getLogger(__name__)


def normalize_code(code: str) -> str:
    """Trim and upper-case an additive code."""
    return code.strip().upper()


def is_valid_additive_code(code: str) -> bool:
    """Return True for E-numbers: E, two to four digits, optional letter."""
    return bool(_CODE_FORMAT.match(normalize_code(code)))


def sanitize_additive_code(code: str | None) -> str | None:
    """Return the normalised code, or None when it is not an E-number."""
    if not code:
        return None
    normalized = normalize_code(code)
    return normalized if is_valid_additive_code(normalized) else None


def validate_additive_info(additive: AdditiveInfo) -> list[str]:
    """Return the list of problems with a knowledge base entry."""
    errors: list[str] = []
    if not additive.code:
        errors.append("Code is required")
    elif not is_valid_additive_code(additive.code):
        errors.append("Code must be in E-number format (E followed by 2-4 digits)")
    if not additive.name.strip():
        errors.append("Name is required and must be a non-empty string")
    if not additive.category.strip():
        errors.append("Category is required and must be a non-empty string")
    if not additive.description.strip():
        errors.append("Description is required and must be a non-empty string")
    if not additive.health_effects:
        errors.append("At least one health effect must be provided")
    return errors


def additive_from_dict(payload: Mapping[str, object]) -> AdditiveInfo:
    """Build an entry from its JSON representation."""
    benefits = payload.get("benefits")
    alternatives = payload.get("alternatives")
    return AdditiveInfo(
        code=normalize_code(str(payload["code"])),
        name=str(payload["name"]),
        category=str(payload["category"]),
        concern_level=ConcernLevel(str(payload["concern_level"])),
        description=str(payload.get("description") or ""),
        health_effects=tuple(payload.get("health_effects") or ()),  # type: ignore[arg-type]
        why_avoid=tuple(payload.get("why_avoid") or ()),  # type: ignore[arg-type]
        benefits=tuple(benefits) if benefits else None,  # type: ignore[arg-type]
        alternatives=str(alternatives) if alternatives else None,
    )


def load_additives(path: Path | None = None) -> tuple[AdditiveInfo, ...]:
    """Load knowledge base entries from a JSON file."""
    source = path or DEFAULT_ADDITIVES_PATH
    with source.open(encoding="utf-8") as handle:
        raw = json.load(handle)
    entries = tuple(additive_from_dict(item) for item in raw)
    _logger.info("Loaded %s additives from %s", len(entries), source.name)
    return entries


@dataclass
class AdditiveKnowledgeBase:
    """Read-only additive table plus range fallback.

    Derived views (grouping, categories, statistics) go through ``cache``,
    which never holds anything keyed by product.
    """

    additives: Mapping[str, AdditiveInfo]
    ranges: tuple[AdditiveRange, ...] = DEFAULT_ADDITIVE_RANGES
    cache: MemoCache = field(default_factory=InMemoryMemoCache)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[AdditiveInfo],
        ranges: tuple[AdditiveRange, ...] = DEFAULT_ADDITIVE_RANGES,
        cache: MemoCache | None = None,
    ) -> "AdditiveKnowledgeBase":
        """Create a knowledge base indexed by normalised code."""
        table = {normalize_code(entry.code): entry for entry in entries}
        return cls(
            additives=MappingProxyType(table),
            ranges=ranges,
            cache=cache if cache is not None else InMemoryMemoCache(),
        )

    @classmethod
    def load(
        cls, path: Path | None = None, cache: MemoCache | None = None
    ) -> "AdditiveKnowledgeBase":
        """Create a knowledge base from the bundled or a custom JSON file."""
        return cls.from_entries(load_additives(path), cache=cache)

    def __len__(self) -> int:
        return len(self.additives)

    def get(self, code: str) -> AdditiveInfo | None:
        """Return the exact table entry for a code."""
        return self.additives.get(normalize_code(code))

    def batch_get(self, codes: Iterable[str]) -> list[AdditiveInfo | None]:
        """Return the exact entry for each code, keeping input order."""
        return [self.get(code) for code in codes]

    def exists(self, code: str) -> bool:
        """Return True if the code has its own table entry."""
        return normalize_code(code) in self.additives

    def resolve(self, code: str) -> AdditiveInfo | None:
        """Resolve a code to its entry, falling back to numeric ranges."""
        normalized = normalize_code(code)
        exact = self.additives.get(normalized)
        if exact is not None:
            return exact
        match = _CODE_NUMBER.match(normalized)
        if match is None:
            return None
        number = int(match.group(1))
        for additive_range in self.ranges:
            if additive_range.contains(number):
                return _from_range(normalized, additive_range)
        return None

    def search(self, query: str) -> list[AdditiveInfo]:
        """Return entries whose name, code or category contains the query."""
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            additive
            for additive in self.additives.values()
            if needle in additive.name.lower()
            or needle in additive.code.lower()
            or needle in additive.category.lower()
        ]

    def by_concern(self, concern_level: ConcernLevel) -> list[AdditiveInfo]:
        """Return entries with the given concern level."""
        return [
            additive
            for additive in self.additives.values()
            if additive.concern_level == concern_level
        ]

    def by_category(self) -> Mapping[str, tuple[AdditiveInfo, ...]]:
        """Return entries grouped by category."""
        return self.cache.get_or_compute("additives_by_category", self._group_by_category)

    def categories(self) -> tuple[str, ...]:
        """Return the sorted unique categories."""
        return self.cache.get_or_compute(
            "all_categories",
            lambda: tuple(sorted({a.category for a in self.additives.values()})),
        )

    def beneficial(self) -> tuple[AdditiveInfo, ...]:
        """Return entries that list health benefits."""
        return self.cache.get_or_compute(
            "beneficial_additives",
            lambda: tuple(a for a in self.additives.values() if a.is_beneficial),
        )

    def stats(self) -> DatabaseStats:
        """Return counts per concern level and entries failing validation."""
        return self.cache.get_or_compute("database_stats", self._compute_stats)

    def warm_up(self) -> None:
        """Populate the memoised views."""
        self.by_category()
        self.categories()
        self.beneficial()
        self.stats()

    def clear_cache(self) -> None:
        """Drop memoised views."""
        self.cache.clear()

    def _group_by_category(self) -> Mapping[str, tuple[AdditiveInfo, ...]]:
        groups: dict[str, list[AdditiveInfo]] = {}
        for additive in self.additives.values():
            groups.setdefault(additive.category, []).append(additive)
        return MappingProxyType(
            {category: tuple(items) for category, items in groups.items()}
        )

    def _compute_stats(self) -> DatabaseStats:
        concern_levels = dict.fromkeys(ConcernLevel, 0)
        invalid: dict[str, tuple[str, ...]] = {}
        for additive in self.additives.values():
            concern_levels[additive.concern_level] += 1
            errors = validate_additive_info(additive)
            if errors:
                invalid[additive.code] = tuple(errors)
        return DatabaseStats(
            total_additives=len(self.additives),
            categories=self.categories(),
            concern_levels=concern_levels,
            invalid_additives=invalid,
        )


def _from_range(code: str, additive_range: AdditiveRange) -> AdditiveInfo:
    return AdditiveInfo(
        code=code,
        name=f"{additive_range.category} ({additive_range.label})",
        category=additive_range.category,
        concern_level=additive_range.concern_level,
        description=(
            f"{code} is not listed individually; rated by the "
            f"{additive_range.label} group."
        ),
        health_effects=(),
    )
