"""Tests for catalog search and ranking."""

import asyncio
from dataclasses import dataclass

import httpx
import pytest

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.domain.catalog import CustomFoodPayload
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.food_lookup import FoodLookupService
from calorie_tracker.services.search import (
    SearchService,
    score_food,
    split_results,
    trigram_similarity,
)
from tests.conftest import FakeFdcClient


@dataclass
class FailingFdcClient(FdcClient):
    calls: int = 0

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.calls += 1
        raise httpx.ConnectError("offline")

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        raise AssertionError("get_food should not be reached")


def test_blank_query_returns_nothing(search_service: SearchService) -> None:
    assert search_service.search("") == []
    assert search_service.search("   ") == []


def test_exact_name_ranks_above_partial_match(
    catalog_service: CatalogService, search_service: SearchService
) -> None:
    white_buuz = catalog_service.create_custom_food(
        CustomFoodPayload(name="Цагаан бууз", calories=210, protein_g=9, carbs_g=25, fat_g=8)
    )

    results = search_service.search("бууз")

    assert results[0].name == "Бууз"
    assert white_buuz.id in [food.id for food in results[1:]]


def test_search_is_case_insensitive(search_service: SearchService) -> None:
    upper = search_service.search("БУУЗ")
    lower = search_service.search("бууз")

    assert upper
    assert [food.id for food in upper] == [food.id for food in lower]


def test_search_matches_latin_alias(search_service: SearchService) -> None:
    results = search_service.search("Buuz")

    assert results[0].name == "Бууз"


def test_search_matches_secondary_name(search_service: SearchService) -> None:
    results = search_service.search("cheddar")

    assert [food.name for food in results] == ["Бяслаг"]


def test_search_without_match_is_empty(search_service: SearchService) -> None:
    assert search_service.search("пицца") == []


def test_search_matches_custom_food_by_secondary_name(
    catalog_service: CatalogService, search_service: SearchService
) -> None:
    pizza = catalog_service.create_custom_food(
        CustomFoodPayload(
            name="Пицца",
            name_secondary="Pizza",
            calories=266,
            protein_g=11,
            carbs_g=33,
            fat_g=10,
        )
    )

    assert [food.id for food in search_service.search("pizza")] == [pizza.id]


def test_equal_scores_keep_catalog_insertion_order(
    catalog_service: CatalogService, search_service: SearchService
) -> None:
    created = [
        catalog_service.create_custom_food(
            CustomFoodPayload(
                name="Тестийн хоол", calories=100 + index, protein_g=1, carbs_g=1, fat_g=1
            )
        )
        for index in range(4)
    ]

    results = search_service.search("тестийн хоол")

    assert [food.id for food in results] == [food.id for food in created]


def test_search_respects_limit(catalog_service: CatalogService) -> None:
    service = SearchService(catalog=catalog_service, limit=2)

    assert len(service.search("а")) == 2


def test_score_food_weights_substring_and_prefix() -> None:
    exact = score_food("бууз", "Бууз", ["buuz", "бууз"])
    inner = score_food("бууз", "Цагаан бууз", ["цагаан бууз"])

    assert exact > inner
    assert inner > 0.5


def test_trigram_similarity() -> None:
    assert trigram_similarity("бууз", "бууз") == 1.0
    assert trigram_similarity("ab", "abc") == 0.0
    assert trigram_similarity("xyz", "abc") == 0.0
    assert trigram_similarity("aaaa", "aaa") == pytest.approx(2 / 3)


def test_split_results_caps_more(search_service: SearchService) -> None:
    foods = search_service.search("а")
    assert len(foods) > 9

    results = split_results(foods)

    assert results.top == foods[0]
    assert results.more == foods[1:9]


def test_split_results_empty() -> None:
    results = split_results([])

    assert results.top is None
    assert results.more == []


def test_fallback_caches_external_food_once(
    catalog_service: CatalogService,
    food_lookup_service: FoodLookupService,
    fdc_client: FakeFdcClient,
) -> None:
    service = SearchService(catalog=catalog_service, fallback=food_lookup_service)

    first = asyncio.run(service.search_with_fallback("улаан лооль"))
    second = asyncio.run(service.search_with_fallback("Улаан лооль"))

    assert len(first) == 1
    assert first[0].source == "external"
    assert first[0].source_id == "748967"
    assert [food.id for food in second] == [first[0].id]
    assert fdc_client.search_calls == 1


def test_fallback_skipped_when_local_results_exist(
    catalog_service: CatalogService,
    food_lookup_service: FoodLookupService,
    fdc_client: FakeFdcClient,
) -> None:
    service = SearchService(catalog=catalog_service, fallback=food_lookup_service)

    results = asyncio.run(service.search_with_fallback("бууз"))

    assert results[0].name == "Бууз"
    assert fdc_client.search_calls == 0


def test_fallback_without_mapping_returns_empty(
    catalog_service: CatalogService,
    food_lookup_service: FoodLookupService,
    fdc_client: FakeFdcClient,
) -> None:
    service = SearchService(catalog=catalog_service, fallback=food_lookup_service)

    assert asyncio.run(service.search_with_fallback("пицца")) == []
    assert fdc_client.search_calls == 0


def test_fallback_without_key_returns_empty(catalog_service: CatalogService) -> None:
    lookup = FoodLookupService(fdc_client=None, cache=InMemoryCache(), catalog=catalog_service)
    service = SearchService(catalog=catalog_service, fallback=lookup)

    assert asyncio.run(service.search_with_fallback("улаан лооль")) == []


def test_fallback_failure_returns_empty(catalog_service: CatalogService) -> None:
    client = FailingFdcClient()
    lookup = FoodLookupService(
        fdc_client=client,
        cache=InMemoryCache(),
        catalog=catalog_service,
        retry_delay_seconds=0,
    )
    service = SearchService(catalog=catalog_service, fallback=lookup)

    assert asyncio.run(service.search_with_fallback("улаан лооль")) == []
    assert client.calls == 2
