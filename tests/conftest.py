"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from calorie_tracker.adapters.fdc_client import FdcClient
from calorie_tracker.adapters.sqlite_catalog_repository import SqliteCatalogRepository
from calorie_tracker.adapters.sqlite_log_repository import SqliteLogRepository
from calorie_tracker.adapters.sqlite_store import SqliteStore
from calorie_tracker.config import Settings
from calorie_tracker.containers import AppContainer, build_container
from calorie_tracker.domain.catalog import Food
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.food_lookup import FoodLookupService
from calorie_tracker.services.ledger import LogLedgerService
from calorie_tracker.services.search import SearchService
from calorie_tracker.services.stats import StatsService


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client returning a fixed egg record."""

    search_calls: int = 0
    food_calls: int = 0
    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [{"fdcId": 748967, "description": "Eggs, Grade A, Large"}]
        }
    )
    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 748967,
            "description": "Eggs, Grade A, Large, egg whole",
            "foodNutrients": [
                {"nutrient": {"id": 1008}, "amount": 148},
                {"nutrient": {"id": 1003}, "amount": 12.4},
                {"nutrient": {"id": 1004}, "amount": 9.96},
                {"nutrient": {"id": 1005}, "amount": 0.96},
            ],
        }
    )

    async def search_foods(self, query: str, page_size: int = 10) -> dict[str, object]:
        self.search_calls += 1
        return self.search_payload

    async def get_food(self, fdc_id: int) -> dict[str, object]:
        self.food_calls += 1
        return self.food_payload


@dataclass
class StepClock:
    """Deterministic clock advancing one second per call."""

    current: datetime = field(
        default_factory=lambda: datetime(2025, 3, 1, 8, 0, tzinfo=UTC)
    )

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def settings() -> Settings:
    return Settings(db_path=":memory:", fdc_api_key=None)


@pytest.fixture
def store() -> Iterator[SqliteStore]:
    sqlite_store = SqliteStore.open(":memory:")
    yield sqlite_store
    sqlite_store.close()


@pytest.fixture
def catalog_service(store: SqliteStore) -> CatalogService:
    service = CatalogService(SqliteCatalogRepository(store))
    service.initialize()
    service.seed()
    return service


@pytest.fixture
def search_service(catalog_service: CatalogService) -> SearchService:
    return SearchService(catalog=catalog_service)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def ledger_service(
    store: SqliteStore, catalog_service: CatalogService, clock: StepClock
) -> LogLedgerService:
    return LogLedgerService(
        repository=SqliteLogRepository(store),
        catalog=catalog_service,
        clock=clock,
    )


@pytest.fixture
def stats_service(ledger_service: LogLedgerService) -> StatsService:
    return StatsService(ledger_service)


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def food_lookup_service(
    fdc_client: FakeFdcClient, catalog_service: CatalogService
) -> FoodLookupService:
    return FoodLookupService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        catalog=catalog_service,
        retry_delay_seconds=0,
    )


@pytest.fixture
def buuz(catalog_service: CatalogService, search_service: SearchService) -> Food:
    return search_service.search("бууз")[0]


@pytest.fixture
def container(settings: Settings) -> AppContainer:
    return build_container(settings)
