"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from calorie_tracker.adapters.fdc_client import HttpxFdcClient
from calorie_tracker.adapters.sqlite_catalog_repository import SqliteCatalogRepository
from calorie_tracker.adapters.sqlite_log_repository import SqliteLogRepository
from calorie_tracker.adapters.sqlite_store import SqliteStore
from calorie_tracker.config import Settings, parse_fdc_api_key
from calorie_tracker.domain.errors import CatalogInitializationError, StorageError
from calorie_tracker.services.cache import InMemoryCache
from calorie_tracker.services.catalog import CatalogService
from calorie_tracker.services.food_lookup import FoodLookupService
from calorie_tracker.services.goals import GoalTimelineService
from calorie_tracker.services.ledger import LogLedgerService
from calorie_tracker.services.search import SearchService
from calorie_tracker.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: SqliteStore
    catalog_service: CatalogService
    search_service: SearchService
    food_lookup_service: FoodLookupService
    ledger_service: LogLedgerService
    stats_service: StatsService
    goal_timeline_service: GoalTimelineService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Opens the database, migrates the schema and seeds reference foods;
    raises ``CatalogInitializationError`` when that fails.
    """
    resolved_settings = settings or Settings()
    try:
        store = SqliteStore.open(resolved_settings.db_path)
    except StorageError as exc:
        raise CatalogInitializationError(str(exc)) from exc
    catalog_service = CatalogService(SqliteCatalogRepository(store))
    try:
        catalog_service.initialize()
        catalog_service.seed()
    except CatalogInitializationError:
        store.close()
        raise

    fdc_api_key = parse_fdc_api_key(resolved_settings.fdc_api_key)
    fdc_client = (
        HttpxFdcClient.create(api_key=fdc_api_key, base_url=resolved_settings.fdc_base_url)
        if fdc_api_key
        else None
    )
    food_lookup_service = FoodLookupService(
        fdc_client=fdc_client,
        cache=InMemoryCache(),
        catalog=catalog_service,
    )
    search_service = SearchService(
        catalog=catalog_service,
        limit=resolved_settings.search_limit,
        fallback=food_lookup_service,
    )
    ledger_service = LogLedgerService(
        repository=SqliteLogRepository(store),
        catalog=catalog_service,
        user_id=resolved_settings.user_id,
    )
    stats_service = StatsService(ledger_service)
    goal_timeline_service = GoalTimelineService(
        loss_pace=resolved_settings.loss_pace_kg_per_week,
        gain_pace=resolved_settings.gain_pace_kg_per_week,
        tolerance_weeks=resolved_settings.on_track_tolerance_weeks,
        trend_window=resolved_settings.trend_window,
    )

    async def close_resources() -> None:
        if fdc_client is not None:
            await fdc_client.close()
        store.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        catalog_service=catalog_service,
        search_service=search_service,
        food_lookup_service=food_lookup_service,
        ledger_service=ledger_service,
        stats_service=stats_service,
        goal_timeline_service=goal_timeline_service,
        close_resources=close_resources,
    )
