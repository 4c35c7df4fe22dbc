"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from product_health.adapters.openfoodfacts_client import ProductCatalogClient
from product_health.config import Settings
from product_health.containers import AppContainer
from product_health.domain.health import HealthScoreResult, StoredHealthScore
from product_health.services.additives import AdditiveRiskAssessor
from product_health.services.cache import InMemoryCache, InMemoryMemoCache
from product_health.services.health import HealthScoreRepository, HealthScoreService
from product_health.services.knowledge_base import AdditiveKnowledgeBase
from product_health.services.products import ProductService
from product_health.services.scoring import ScoreAggregator

TEST_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZV9yb2xlIn0.signature"
)
NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def catalog_payload(**overrides: object) -> dict[str, object]:
    """Return an Open Food Facts payload for a sweetened soft drink."""
    product: dict[str, object] = {
        "product_name": "Cola Zero",
        "brands": "Fizz Co",
        "nutriments": {
            "energy-kcal_100g": 1,
            "sugars_100g": 0,
            "salt_100g": 0.02,
            "saturated-fat_100g": 0,
            "proteins_100g": 0,
        },
        "additives_tags": ["en:e150d", "en:e338", "en:e951"],
        "nova_group": 4,
        "nutriscore_grade": "b",
        "ingredients": [{"text": "Carbonated water"}, {"text": "Colour"}],
        "allergens_tags": [],
    }
    product.update(overrides)
    return {"status": 1, "product": product}


@dataclass
class FakeCatalogClient(ProductCatalogClient):
    """Fake catalog client keyed by barcode."""

    products: dict[str, dict[str, object]] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        self.requested.append(barcode)
        return self.products.get(barcode)


@dataclass
class InMemoryHealthScoreRepository(HealthScoreRepository):
    """In-memory health score repository for tests."""

    rows: dict[str, StoredHealthScore] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False

    def get_health_score(self, barcode: str) -> StoredHealthScore | None:
        if self.fail_reads:
            raise ConnectionError("database unavailable")
        return self.rows.get(barcode)

    def save_health_score(
        self, barcode: str, result: HealthScoreResult, updated_at: datetime
    ) -> None:
        if self.fail_writes:
            raise ConnectionError("database unavailable")
        self.rows[barcode] = StoredHealthScore(
            barcode=barcode, result=result, updated_at=updated_at
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SERVICE_KEY,
    )


@pytest.fixture(scope="session")
def knowledge_base() -> AdditiveKnowledgeBase:
    return AdditiveKnowledgeBase.load()


@pytest.fixture
def assessor(knowledge_base: AdditiveKnowledgeBase) -> AdditiveRiskAssessor:
    return AdditiveRiskAssessor(knowledge_base)


@pytest.fixture
def scorer(assessor: AdditiveRiskAssessor) -> ScoreAggregator:
    return ScoreAggregator(additive_assessor=assessor)


@pytest.fixture
def catalog_client() -> FakeCatalogClient:
    return FakeCatalogClient(products={"5449000131805": catalog_payload()})


@pytest.fixture
def health_score_repository() -> InMemoryHealthScoreRepository:
    return InMemoryHealthScoreRepository()


@pytest.fixture
def product_service(catalog_client: FakeCatalogClient) -> ProductService:
    return ProductService(catalog_client=catalog_client, cache=InMemoryCache())


@pytest.fixture
def health_score_service(
    product_service: ProductService,
    scorer: ScoreAggregator,
    health_score_repository: InMemoryHealthScoreRepository,
) -> HealthScoreService:
    return HealthScoreService(
        product_service=product_service,
        scorer=scorer,
        repository=health_score_repository,
        clock=lambda: NOW,
    )


@pytest.fixture
def container(
    settings: Settings,
    assessor: AdditiveRiskAssessor,
    scorer: ScoreAggregator,
    product_service: ProductService,
    health_score_service: HealthScoreService,
) -> AppContainer:
    knowledge_base = AdditiveKnowledgeBase(
        additives=assessor.knowledge_base.additives, cache=InMemoryMemoCache()
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        knowledge_base=knowledge_base,
        additive_assessor=assessor,
        scorer=scorer,
        product_service=product_service,
        health_score_service=health_score_service,
        close_resources=close_resources,
    )
