"""Tests for the additive knowledge base."""

import json
from pathlib import Path

from product_health.domain.additives import AdditiveInfo
from product_health.domain.health import ConcernLevel
from product_health.services.cache import InMemoryMemoCache
from product_health.services.knowledge_base import (
    AdditiveKnowledgeBase,
    is_valid_additive_code,
    load_additives,
    sanitize_additive_code,
    validate_additive_info,
)


def _entry(code: str, **overrides: object) -> AdditiveInfo:
    values: dict[str, object] = {
        "code": code,
        "name": "Test additive",
        "category": "Preservative",
        "concern_level": ConcernLevel.MODERATE,
        "description": "Used in tests.",
        "health_effects": ("None known",),
    }
    values.update(overrides)
    return AdditiveInfo(**values)  # type: ignore[arg-type]


def test_bundled_table_loads(knowledge_base: AdditiveKnowledgeBase) -> None:
    assert len(knowledge_base) == 203
    msg = knowledge_base.get("E621")
    assert msg is not None
    assert msg.category == "Flavor Enhancer"
    assert msg.concern_level == ConcernLevel.MODERATE
    assert knowledge_base.get("E951").concern_level == ConcernLevel.VERY_HIGH


def test_lookup_normalises_code(knowledge_base: AdditiveKnowledgeBase) -> None:
    assert knowledge_base.get(" e300 ") is knowledge_base.get("E300")
    assert knowledge_base.exists("e150d")
    assert not knowledge_base.exists("E999")


def test_resolve_prefers_exact_entry(knowledge_base: AdditiveKnowledgeBase) -> None:
    assert knowledge_base.resolve("E202") is knowledge_base.get("E202")


def test_resolve_falls_back_to_numeric_range(
    knowledge_base: AdditiveKnowledgeBase,
) -> None:
    enhancer = knowledge_base.resolve("E625")
    color = knowledge_base.resolve("e105")
    sweetener = knowledge_base.resolve("E959")

    assert enhancer is not None
    assert enhancer.code == "E625"
    assert enhancer.category == "Flavor Enhancers"
    assert enhancer.concern_level == ConcernLevel.MODERATE
    assert color.category == "Artificial Colors"
    assert sweetener.category == "Artificial Sweeteners"


def test_narrow_range_wins_over_wide_one() -> None:
    kb = AdditiveKnowledgeBase.from_entries([])

    assert kb.resolve("E201").concern_level == ConcernLevel.LOW
    assert kb.resolve("E212").concern_level == ConcernLevel.MODERATE
    assert kb.resolve("E251").concern_level == ConcernLevel.HIGH


def test_resolve_unknown_codes(knowledge_base: AdditiveKnowledgeBase) -> None:
    assert knowledge_base.resolve("E999") is None
    assert knowledge_base.resolve("E400A") is None
    assert knowledge_base.resolve("not-a-code") is None


def test_search(knowledge_base: AdditiveKnowledgeBase) -> None:
    by_name = knowledge_base.search("aspartame")
    by_code = knowledge_base.search("E95")

    assert [additive.code for additive in by_name] == ["E951"]
    assert "E951" in {additive.code for additive in by_code}
    assert knowledge_base.search("   ") == []


def test_by_concern(knowledge_base: AdditiveKnowledgeBase) -> None:
    very_high = knowledge_base.by_concern(ConcernLevel.VERY_HIGH)

    assert very_high
    assert all(a.concern_level == ConcernLevel.VERY_HIGH for a in very_high)
    assert "E250" in {a.code for a in very_high}


def test_derived_views_are_memoised() -> None:
    cache = InMemoryMemoCache()
    kb = AdditiveKnowledgeBase.from_entries(
        [
            _entry("E200", category="Preservative"),
            _entry("E300", category="Antioxidant", benefits=("Vitamin C",)),
            _entry("E330", category="Antioxidant"),
        ],
        cache=cache,
    )

    first = kb.by_category()
    second = kb.by_category()

    assert first is second
    assert {category: len(items) for category, items in first.items()} == {
        "Preservative": 1,
        "Antioxidant": 2,
    }
    assert kb.categories() == ("Antioxidant", "Preservative")
    assert [a.code for a in kb.beneficial()] == ["E300"]
    assert len(cache) == 3

    kb.clear_cache()
    assert len(cache) == 0
    kb.warm_up()
    assert len(cache) == 4


def test_stats_counts_levels_and_invalid_entries() -> None:
    kb = AdditiveKnowledgeBase.from_entries(
        [
            _entry("E200", concern_level=ConcernLevel.LOW),
            _entry("E211"),
            _entry("X1", name=" ", health_effects=()),
        ]
    )

    stats = kb.stats()

    assert stats.total_additives == 3
    assert stats.concern_levels[ConcernLevel.LOW] == 1
    assert stats.concern_levels[ConcernLevel.MODERATE] == 2
    assert stats.concern_levels[ConcernLevel.VERY_HIGH] == 0
    assert list(stats.invalid_additives) == ["X1"]
    assert len(stats.invalid_additives["X1"]) == 3
    assert stats.to_dict()["totalAdditives"] == 3


def test_code_validation_helpers() -> None:
    assert is_valid_additive_code("E330")
    assert is_valid_additive_code("e150d")
    assert is_valid_additive_code("E1422")
    assert not is_valid_additive_code("330")
    assert not is_valid_additive_code("E1")
    assert sanitize_additive_code(" e471 ") == "E471"
    assert sanitize_additive_code("INS 330") is None
    assert sanitize_additive_code(None) is None


def test_validate_additive_info_accepts_bundled_entries(
    knowledge_base: AdditiveKnowledgeBase,
) -> None:
    assert validate_additive_info(knowledge_base.get("E621")) == []


def test_load_additives_from_custom_file(tmp_path: Path) -> None:
    path = tmp_path / "additives.json"
    path.write_text(
        json.dumps(
            [
                {
                    "code": "e999x",
                    "name": "Lab additive",
                    "category": "Test",
                    "concern_level": "high",
                    "description": "Only exists here.",
                    "health_effects": ["Unknown"],
                    "why_avoid": [],
                    "benefits": None,
                    "alternatives": None,
                }
            ]
        ),
        encoding="utf-8",
    )

    entries = load_additives(path)
    kb = AdditiveKnowledgeBase.load(path)

    assert entries[0].code == "E999X"
    assert entries[0].benefits is None
    assert kb.get("E999X").is_high_risk


def test_loaded_knowledge_base_keeps_injected_cache() -> None:
    cache = InMemoryMemoCache()

    kb = AdditiveKnowledgeBase.load(cache=cache)
    kb.warm_up()

    assert kb.cache is cache
    assert len(cache) == 4
    cache.clear()
    assert kb.by_category() is not None
    assert len(cache) == 1


def test_batch_get_keeps_order_and_misses(
    knowledge_base: AdditiveKnowledgeBase,
) -> None:
    entries = knowledge_base.batch_get(["e951", "E999", "E625", "E300"])

    assert [entry.code if entry else None for entry in entries] == [
        "E951",
        None,
        None,
        "E300",
    ]
