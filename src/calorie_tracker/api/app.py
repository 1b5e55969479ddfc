"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

from fastapi import FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.models import (
    AmountPayload,
    CopyDayRequest,
    GoalStatusRequest,
    LogCreateRequest,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.catalog import CustomFoodPayload, Food, Portion
from calorie_tracker.domain.errors import (
    FoodNotFoundError,
    LogValidationError,
    StorageError,
)
from calorie_tracker.domain.goals import ProfileSnapshot, TimelineSnapshot, WeightEntry
from calorie_tracker.domain.logs import LogEntry, RecentFood
from calorie_tracker.domain.nutrition import (
    GramsSelection,
    MacroProfile,
    PortionSelection,
    UnitSelection,
)
from calorie_tracker.domain.stats import DailyTotals
from calorie_tracker.services.goals import age_on, daily_calorie_target
from calorie_tracker.services.search import split_results


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(debug=container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(LogValidationError)
    async def handle_validation_error(
        request: Request, exc: LogValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Invalid log entry", "field_errors": exc.field_errors},
        )

    @app.exception_handler(FoodNotFoundError)
    async def handle_not_found(request: Request, exc: FoodNotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage unavailable, please retry"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/foods/search")
    async def search_foods(request: Request, q: str = "") -> dict[str, object]:
        """Return the top match and the remaining ranked foods."""
        state_container: AppContainer = request.app.state.container
        foods = await state_container.search_service.search_with_fallback(q)
        results = split_results(foods)
        return {
            "query": q,
            "top": _format_food(results.top) if results.top else None,
            "more": [_format_food(food) for food in results.more],
            "total": len(foods),
        }

    @app.get("/foods/{food_id}")
    async def food_detail(food_id: UUID, request: Request) -> dict[str, object]:
        """Return a food with its portions."""
        state_container: AppContainer = request.app.state.container
        food = state_container.catalog_service.get_food(food_id)
        portions = state_container.catalog_service.get_portions(food_id)
        return {
            "food": _format_food(food),
            "portions": [_format_portion(portion) for portion in portions],
        }

    @app.post("/foods", status_code=status.HTTP_201_CREATED)
    async def create_food(
        payload: CustomFoodPayload, request: Request
    ) -> dict[str, object]:
        """Create a custom food."""
        state_container: AppContainer = request.app.state.container
        food = state_container.catalog_service.create_custom_food(payload)
        return {"food": _format_food(food)}

    @app.get("/logs")
    async def logs_for_day(
        request: Request, day: date = Query(alias="date")
    ) -> dict[str, object]:
        """Return logs for one day with the day's totals."""
        state_container: AppContainer = request.app.state.container
        logs = state_container.ledger_service.list_logs_by_day(day)
        totals = state_container.stats_service.daily_totals(day, day)[0]
        return {
            "date": day.isoformat(),
            "logs": [_format_log(log) for log in logs],
            "totals": _format_daily_totals(totals),
        }

    @app.get("/logs/range")
    async def logs_for_range(
        request: Request, start: date, end: date
    ) -> dict[str, object]:
        """Return logs between two dates inclusive."""
        state_container: AppContainer = request.app.state.container
        logs = state_container.ledger_service.list_logs_for_range(start, end)
        return {"logs": [_format_log(log) for log in logs]}

    @app.get("/logs/recent-foods")
    async def recent_foods(request: Request, limit: int = 10) -> dict[str, object]:
        """Return distinct recently logged foods."""
        state_container: AppContainer = request.app.state.container
        foods = state_container.ledger_service.list_recent_foods(limit)
        return {"foods": [_format_recent_food(food) for food in foods]}

    @app.post("/logs", status_code=status.HTTP_201_CREATED)
    async def create_log(payload: LogCreateRequest, request: Request) -> dict[str, object]:
        """Log a food from grams or portions."""
        state_container: AppContainer = request.app.state.container
        selection = _resolve_amount(state_container, payload.food_id, payload)
        log = state_container.ledger_service.log_food(
            payload.food_id, payload.log_date, payload.meal, selection
        )
        return {"log": _format_log(log)}

    @app.patch("/logs/{log_id}")
    async def edit_log(
        log_id: UUID, payload: AmountPayload, request: Request
    ) -> dict[str, object]:
        """Change the amount of a logged food."""
        state_container: AppContainer = request.app.state.container
        existing = state_container.ledger_service.get_log(log_id)
        selection = _resolve_amount(state_container, existing.food_id, payload)
        log = state_container.ledger_service.edit_log_quantity(log_id, selection)
        return {"log": _format_log(log)}

    @app.delete("/logs/{log_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_log(log_id: UUID, request: Request) -> None:
        """Delete a log; unknown ids are ignored."""
        state_container: AppContainer = request.app.state.container
        state_container.ledger_service.delete_log(log_id)

    @app.post("/logs/copy")
    async def copy_logs(payload: CopyDayRequest, request: Request) -> dict[str, object]:
        """Copy one day's logs onto another day."""
        state_container: AppContainer = request.app.state.container
        copied = state_container.ledger_service.copy_logs_from_day(
            payload.from_date, payload.to_date
        )
        return {"copied": copied}

    @app.get("/stats/range")
    async def stats_range(request: Request, start: date, end: date) -> dict[str, object]:
        """Return per-day totals and averages."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.period_summary(start, end)
        return {
            "daily": [_format_daily_totals(day) for day in summary.daily],
            "averages": {
                "calories": summary.avg_calories,
                "protein_g": summary.avg_protein_g,
                "carbs_g": summary.avg_carbs_g,
                "fat_g": summary.avg_fat_g,
            },
        }

    @app.get("/stats/streak")
    async def stats_streak(
        request: Request, today: date | None = None
    ) -> dict[str, object]:
        """Return the current logging streak."""
        state_container: AppContainer = request.app.state.container
        resolved_today = today or date.today()
        streak = state_container.stats_service.streak(resolved_today)
        return {"today": resolved_today.isoformat(), "streak": streak}

    @app.post("/goals/status")
    async def goal_status(payload: GoalStatusRequest, request: Request) -> dict[str, object]:
        """Project the weight goal from the supplied profile and weigh-ins."""
        state_container: AppContainer = request.app.state.container
        profile = ProfileSnapshot(
            current_weight_kg=payload.current_weight_kg,
            height_cm=payload.height_cm,
            goal_type=payload.goal_type,
            target_weight_kg=payload.target_weight_kg,
            plan_start_date=payload.plan_start_date,
            plan_start_weight_kg=payload.plan_start_weight_kg,
            plan_target_date=payload.plan_target_date,
            plan_pace_kg_per_week=payload.plan_pace_kg_per_week,
        )
        entries = [
            WeightEntry(day=weight.day, weight_kg=weight.weight_kg)
            for weight in payload.weights
        ]
        today = payload.today or date.today()
        snapshot = state_container.goal_timeline_service.timeline(profile, entries, today)
        body = _format_timeline(snapshot)
        energy = payload.energy
        body["daily_calorie_target"] = (
            daily_calorie_target(
                energy.sex,
                payload.current_weight_kg,
                payload.height_cm,
                age_on(energy.birthdate, today),
                energy.activity_level,
                energy.goal,
            )
            if energy
            else None
        )
        return body

    return app


def _resolve_amount(
    container: AppContainer, food_id: UUID, payload: AmountPayload
) -> UnitSelection:
    if payload.unit_mode == "grams":
        if payload.grams is None:
            raise LogValidationError({"grams": "Field required in grams mode"})
        return GramsSelection(grams=payload.grams)
    if payload.portion_id is None:
        portion = container.catalog_service.default_portion(food_id)
    else:
        portion = _find_portion(container, food_id, payload.portion_id)
    return PortionSelection(
        portion_id=portion.id,
        label=portion.label,
        portion_grams=portion.grams,
        quantity=payload.quantity,
    )


def _find_portion(container: AppContainer, food_id: UUID, portion_id: UUID) -> Portion:
    for portion in container.catalog_service.get_portions(food_id):
        if portion.id == portion_id:
            return portion
    raise LogValidationError({"portion_id": "Portion does not belong to this food"})


def _format_macros(macros: MacroProfile) -> dict[str, float]:
    return {
        "calories": macros.calories,
        "protein_g": macros.protein_g,
        "carbs_g": macros.carbs_g,
        "fat_g": macros.fat_g,
    }


def _format_food(food: Food) -> dict[str, object]:
    return {
        "id": str(food.id),
        "source": food.source,
        "source_id": food.source_id,
        "name": food.name,
        "name_secondary": food.name_secondary,
        "per_100g": _format_macros(food.per_100g),
    }


def _format_portion(portion: Portion) -> dict[str, object]:
    return {
        "id": str(portion.id) if portion.id else None,
        "label": portion.label,
        "grams": portion.grams,
        "is_default": portion.is_default,
    }


def _format_log(log: LogEntry) -> dict[str, object]:
    return {
        "id": str(log.id),
        "food_id": str(log.food_id),
        "food_name": log.food_name,
        "logged_at": log.logged_at.isoformat(),
        "log_date": log.log_date.isoformat(),
        "meal": log.meal,
        "unit_mode": log.unit_mode,
        "quantity": log.quantity,
        "portion_id": str(log.portion_id) if log.portion_id else None,
        "portion_label": log.portion_label,
        "grams_total": log.grams_total,
        "totals": _format_macros(log.totals),
        "metadata": log.metadata.model_dump() if log.metadata else None,
    }


def _format_recent_food(food: RecentFood) -> dict[str, object]:
    return {
        "food_id": str(food.food_id),
        "name": food.name,
        "name_secondary": food.name_secondary,
        "per_100g": _format_macros(food.per_100g),
        "last_logged_at": food.last_logged_at.isoformat(),
    }


def _format_daily_totals(totals: DailyTotals) -> dict[str, object]:
    return {
        "date": totals.day.isoformat(),
        "calories": totals.calories,
        "protein_g": totals.protein_g,
        "carbs_g": totals.carbs_g,
        "fat_g": totals.fat_g,
        "entries": totals.entry_count,
    }


def _format_timeline(snapshot: TimelineSnapshot) -> dict[str, object]:
    eta = snapshot.status.eta_date
    return {
        "trend_weight_kg": snapshot.trend_weight_kg,
        "status": snapshot.status.status,
        "eta_date": eta.isoformat() if eta else None,
        "message": snapshot.status.message,
        "progress_pct": snapshot.progress_pct,
        "weeks_elapsed": snapshot.weeks_elapsed,
        "weeks_left": snapshot.weeks_left,
        "weeks_total": snapshot.weeks_total,
        "bmi": snapshot.bmi,
        "bmi_category": snapshot.bmi_category,
    }
