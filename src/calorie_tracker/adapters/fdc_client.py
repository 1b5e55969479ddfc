"""USDA FoodData Central client used by the external lookup fallback."""

from dataclasses import dataclass
from typing import Protocol

import httpx

# Generic food types only; branded records are never searched.
SEARCH_DATA_TYPES = ["Foundation", "Survey (FNDDS)", "SR Legacy"]


class FdcClient(Protocol):
    """Remote food-composition lookups returning raw FDC JSON."""

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        """Return the raw search page for ``query``."""

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        """Return the raw detail record for ``fdc_id``."""


@dataclass
class HttpxFdcClient(FdcClient):
    """FDC client over a shared ``httpx.AsyncClient``."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxFdcClient":
        return cls(
            api_key=api_key,
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
        )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        body = {"query": query, "dataType": SEARCH_DATA_TYPES, "pageSize": page_size}
        return await self._request("POST", "/foods/search", json=body)

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        return await self._request("GET", f"/food/{fdc_id}")

    async def close(self) -> None:
        await self.http_client.aclose()

    async def _request(
        self, method: str, path: str, json: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Send an authenticated request; non-2xx raises ``httpx.HTTPStatusError``."""
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            params={"api_key": self.api_key},
            json=json,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
