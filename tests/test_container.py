"""Tests for container wiring."""

import asyncio

from product_health.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.health_score_service is not None
    assert container.health_score_service.ttl_seconds == 86400
    assert container.product_service.product_ttl_seconds == 7 * 24 * 3600
    assert len(container.knowledge_base) == 203
    assert container.scorer.additive_assessor is container.additive_assessor
    asyncio.run(container.close_resources())


def test_build_container_respects_settings(settings) -> None:
    settings.health_score_ttl_seconds = 60
    settings.health_score_table = "scores"

    container = build_container(settings)

    assert container.health_score_service.ttl_seconds == 60
    assert container.health_score_service.repository.table_name == "scores"
    asyncio.run(container.close_resources())
