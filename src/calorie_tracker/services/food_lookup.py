"""Fallback lookup of unknown foods in USDA FoodData Central."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.data.food_name_map import translate_query
from calorie_tracker.domain.catalog import Food
from calorie_tracker.domain.nutrition import ExternalFood, MacroProfile
from calorie_tracker.services.cache import Cache
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.nutrition import round1

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_NUTRIENT_IDS = {
    "calories": 1008,
    "protein": 1003,
    "fat": 1004,
    "carbs": 1005,
}

_logger = logging.getLogger(__name__)


@dataclass
class FoodLookupService:
    """Translates a query, fetches the top FDC match and caches it locally."""

    fdc_client: FdcClient | None
    cache: Cache
    catalog: CatalogService
    search_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup(self, query: str) -> Food | None:
        """Return a catalog food for ``query``, or ``None`` when unavailable."""
        query_en = translate_query(query)
        if query_en is None:
            _logger.debug("External lookup skipped, no mapping: query=%s", query)
            return None
        if self.fdc_client is None:
            _logger.debug("External lookup skipped, no FDC key: query=%s", query)
            return None
        try:
            external = await self.fetch_top_food(query_en)
        except httpx.HTTPError as exc:
            _logger.debug("External lookup failed: query=%s error=%s", query, exc)
            return None
        if external is None:
            _logger.debug("External lookup found nothing: query=%s", query_en)
            return None
        return self.catalog.upsert_external_food(query, external)

    async def fetch_top_food(self, query_en: str) -> ExternalFood | None:
        """Fetch the top search hit and extract per-100g macros."""
        if self.fdc_client is None:
            return None
        client = self.fdc_client
        cache_key = f"fdc:top:{query_en.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, ExternalFood):
            return cached

        payload = await self._call_with_retry(
            lambda: client.search_foods(query_en, page_size=10), action="search"
        )
        foods = payload.get("foods") or []
        if not foods:
            return None
        fdc_id = int(foods[0]["fdcId"])
        detail = await self._call_with_retry(
            lambda: client.get_food(fdc_id), action=f"get_food:{fdc_id}"
        )
        per_100g = extract_per_100g(detail)
        if per_100g is None:
            return None
        external = ExternalFood(
            fdc_id=int(detail.get("fdcId", fdc_id)),
            name_en=str(detail.get("description") or query_en),
            per_100g=per_100g,
        )
        self.cache.set(cache_key, external, ttl_seconds=self.search_ttl_seconds)
        return external

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except httpx.HTTPError as exc:
                attempt += 1
                _logger.warning(
                    "FDC %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def extract_per_100g(detail: dict[str, object]) -> MacroProfile | None:
    """Extract per-100g macros, rescaling gram-based serving data.

    Returns ``None`` when every macro is missing or zero.
    """
    values = _nutrient_values(detail.get("foodNutrients") or [])
    serving_size = detail.get("servingSize")
    serving_unit = str(detail.get("servingSizeUnit") or "").lower()
    if isinstance(serving_size, int | float) and serving_size > 0 and serving_unit == "g":
        factor = 100 / serving_size
        values = {key: round1(value * factor) for key, value in values.items()}
    if all(value <= 0 for value in values.values()):
        return None
    return MacroProfile(
        calories=max(values["calories"], 0.0),
        protein_g=max(values["protein"], 0.0),
        carbs_g=max(values["carbs"], 0.0),
        fat_g=max(values["fat"], 0.0),
    )


def _nutrient_values(food_nutrients: list[dict[str, object]]) -> dict[str, float]:
    values = dict.fromkeys(_NUTRIENT_IDS, 0.0)
    for nutrient in food_nutrients:
        nutrient_info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient_info.get("id") or nutrient.get("nutrientId")
        amount = nutrient.get("value", nutrient.get("amount"))
        if amount is None:
            continue
        for key, wanted_id in _NUTRIENT_IDS.items():
            if nutrient_id == wanted_id:
                values[key] = float(amount)
    return values
