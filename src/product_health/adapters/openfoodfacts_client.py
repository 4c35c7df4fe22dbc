"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

NOT_FOUND = 404
FOUND_STATUS = 1


class ProductCatalogClient(Protocol):
    """Interface for upstream product catalog lookups."""

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Return the raw product payload, or None if the barcode is unknown."""


@dataclass
class HttpxOpenFoodFactsClient(ProductCatalogClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 10
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def get_product(self, barcode: str) -> dict[str, object] | None:
        """Fetch a product by barcode."""
        url = f"{self.base_url}/product/{barcode}.json"
        response = await self.http_client.get(url, timeout=self.timeout_seconds)
        if response.status_code == NOT_FOUND:
            return None
        response.raise_for_status()
        payload = response.json()
        if payload.get("status") == FOUND_STATUS and payload.get("product"):
            return payload
        return None

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
