"""Supabase-backed health score repository."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from product_health.domain.health import HealthScoreResult, StoredHealthScore
from product_health.services.health import HealthScoreRepository


@dataclass
class SupabaseHealthScoreRepository(HealthScoreRepository):
    """Supabase implementation for health score persistence."""

    client: Client
    table_name: str = "product_health_scores"

    def get_health_score(self, barcode: str) -> StoredHealthScore | None:
        """Return the stored result for a barcode, if present."""
        response = (
            self.client.table(self.table_name)
            .select("barcode, result, updated_at")
            .eq("barcode", barcode)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        updated_at = datetime.fromisoformat(row["updated_at"])
        if updated_at.tzinfo is None:
            updated_at = updated_at.replace(tzinfo=UTC)
        return StoredHealthScore(
            barcode=row["barcode"],
            result=HealthScoreResult.from_dict(row["result"]),
            updated_at=updated_at,
        )

    def save_health_score(
        self, barcode: str, result: HealthScoreResult, updated_at: datetime
    ) -> None:
        """Insert or replace the result for a barcode."""
        self.client.table(self.table_name).upsert(
            {
                "barcode": barcode,
                "result": result.to_dict(),
                "updated_at": updated_at.isoformat(),
            },
            on_conflict="barcode",
        ).execute()
