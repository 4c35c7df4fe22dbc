"""Tests for the persisted health score service."""

import asyncio
import logging
from datetime import timedelta

import pytest

from product_health.domain.health import (
    HealthGrade,
    HealthScoreResult,
    StoredHealthScore,
)
from product_health.domain.products import NutritionProfile, ProductRecord
from product_health.services.health import HealthScoreService
from product_health.services.products import ProductNotFoundError

BARCODE = "5449000131805"


def _stale_result() -> HealthScoreResult:
    return HealthScoreResult(
        score=12,
        grade=HealthGrade.AVOID,
        nutri_score=None,
        processing_level=None,
        reasons=(),
        recommendations=(),
        warnings=(),
    )


def test_computes_and_stores_new_result(
    health_score_service: HealthScoreService, health_score_repository
) -> None:
    result = asyncio.run(health_score_service.get_health_score(BARCODE))

    assert result.score == 76
    assert result.grade == HealthGrade.GOOD
    stored = health_score_repository.rows[BARCODE]
    assert stored.result == result
    assert stored.updated_at == health_score_service.clock()


def test_returns_fresh_stored_result(
    health_score_service: HealthScoreService, health_score_repository, catalog_client
) -> None:
    now = health_score_service.clock()
    health_score_repository.rows[BARCODE] = StoredHealthScore(
        barcode=BARCODE, result=_stale_result(), updated_at=now - timedelta(hours=23)
    )

    result = asyncio.run(health_score_service.get_health_score(BARCODE))

    assert result.score == 12
    assert catalog_client.requested == []


def test_recomputes_expired_result(
    health_score_service: HealthScoreService, health_score_repository
) -> None:
    now = health_score_service.clock()
    health_score_repository.rows[BARCODE] = StoredHealthScore(
        barcode=BARCODE, result=_stale_result(), updated_at=now - timedelta(hours=24)
    )

    result = asyncio.run(health_score_service.get_health_score(BARCODE))

    assert result.score == 76
    assert health_score_repository.rows[BARCODE].updated_at == now


def test_write_failure_still_returns_result(
    health_score_service: HealthScoreService,
    health_score_repository,
    caplog,
    monkeypatch,
) -> None:
    monkeypatch.setattr(logging.getLogger("product_health"), "propagate", True)
    health_score_repository.fail_writes = True

    result = asyncio.run(health_score_service.get_health_score(BARCODE))

    assert result.score == 76
    assert "Failed to store health score" in caplog.text


def test_read_failure_falls_back_to_computation(
    health_score_service: HealthScoreService, health_score_repository
) -> None:
    health_score_repository.fail_reads = True

    result = asyncio.run(health_score_service.get_health_score(BARCODE))

    assert result.grade == HealthGrade.GOOD
    assert BARCODE in health_score_repository.rows


def test_unknown_barcode_raises(health_score_service: HealthScoreService) -> None:
    with pytest.raises(ProductNotFoundError):
        asyncio.run(health_score_service.get_health_score("0000"))


def test_analyze_scores_in_memory_record(
    health_score_service: HealthScoreService, health_score_repository
) -> None:
    result = health_score_service.analyze(
        ProductRecord(nutrition=NutritionProfile(sugars=2), processing_level=2)
    )

    assert result.score == 100
    assert health_score_repository.rows == {}
