"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from product_health.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from product_health.adapters.supabase_health_score_repository import (
    SupabaseHealthScoreRepository,
)
from product_health.config import Settings
from product_health.services.additives import AdditiveRiskAssessor
from product_health.services.cache import InMemoryCache, InMemoryMemoCache
from product_health.services.health import HealthScoreService
from product_health.services.knowledge_base import AdditiveKnowledgeBase
from product_health.services.products import ProductService
from product_health.services.scoring import ScoreAggregator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    knowledge_base: AdditiveKnowledgeBase
    additive_assessor: AdditiveRiskAssessor
    scorer: ScoreAggregator
    product_service: ProductService
    health_score_service: HealthScoreService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    health_score_repository = SupabaseHealthScoreRepository(
        supabase_client, table_name=resolved_settings.health_score_table
    )
    knowledge_base = AdditiveKnowledgeBase.load(
        resolved_settings.additives_path, cache=InMemoryMemoCache()
    )
    additive_assessor = AdditiveRiskAssessor(knowledge_base)
    scorer = ScoreAggregator(additive_assessor=additive_assessor)
    catalog_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        timeout_seconds=resolved_settings.openfoodfacts_timeout_seconds,
    )
    product_service = ProductService(
        catalog_client=catalog_client,
        cache=InMemoryCache(),
        product_ttl_seconds=resolved_settings.product_ttl_seconds,
        debug=resolved_settings.debug,
    )
    health_score_service = HealthScoreService(
        product_service=product_service,
        scorer=scorer,
        repository=health_score_repository,
        ttl_seconds=resolved_settings.health_score_ttl_seconds,
    )

    async def close_resources() -> None:
        await catalog_client.close()

    return AppContainer(
        settings=resolved_settings,
        knowledge_base=knowledge_base,
        additive_assessor=additive_assessor,
        scorer=scorer,
        product_service=product_service,
        health_score_service=health_score_service,
        close_resources=close_resources,
    )
