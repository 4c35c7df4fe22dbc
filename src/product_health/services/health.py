"""Health score service with persisted results."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from product_health.domain.health import HealthScoreResult, StoredHealthScore
from product_health.domain.products import ProductRecord
from product_health.services.products import ProductService
from product_health.services.scoring import ScoreAggregator

_logger = logging.getLogger(__name__)


class HealthScoreRepository(Protocol):
    """Persistence interface for computed health scores."""

    def get_health_score(self, barcode: str) -> StoredHealthScore | None:
        """Return the stored result for a barcode, if present."""

    def save_health_score(
        self, barcode: str, result: HealthScoreResult, updated_at: datetime
    ) -> None:
        """Store the result for a barcode."""


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class HealthScoreService:
    """Scores products by barcode, reusing results within a freshness window."""

    product_service: ProductService
    scorer: ScoreAggregator
    repository: HealthScoreRepository
    ttl_seconds: int = 86400
    clock: Callable[[], datetime] = field(default=_utc_now)

    def analyze(self, product: ProductRecord) -> HealthScoreResult:
        """Score an in-memory product record."""
        return self.scorer.score(product)

    async def get_health_score(self, barcode: str) -> HealthScoreResult:
        """Return a fresh stored result or compute and store a new one."""
        now = self.clock()
        stored = self._load(barcode)
        if stored is not None and now - stored.updated_at < timedelta(
            seconds=self.ttl_seconds
        ):
            _logger.info("Returning cached health score for barcode: %s", barcode)
            return stored.result

        product = await self.product_service.get_product(barcode)
        _logger.info("Analyzing health for barcode: %s", barcode)
        result = self.scorer.score(product.record)
        try:
            self.repository.save_health_score(barcode, result, updated_at=now)
        except Exception:
            _logger.warning(
                "Failed to store health score for barcode: %s", barcode, exc_info=True
            )
        return result

    def _load(self, barcode: str) -> StoredHealthScore | None:
        try:
            return self.repository.get_health_score(barcode)
        except Exception:
            _logger.warning(
                "Failed to read stored health score for barcode: %s",
                barcode,
                exc_info=True,
            )
            return None
