"""Services for the local food catalog: schema, seeding and food creation."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from calorie_tracker.data.seed_foods import SEED_FOODS
from calorie_tracker.domain.catalog import (
    DEFAULT_PORTION_GRAMS,
    DEFAULT_PORTION_LABEL,
    CatalogEntry,
    CustomFoodPayload,
    Food,
    NewFood,
    Portion,
    PortionSpec,
    SeedFood,
    SeedReport,
    normalize_alias,
)
from calorie_tracker.domain.errors import (
    CatalogInitializationError,
    FoodNotFoundError,
    StorageError,
)
from calorie_tracker.domain.nutrition import ExternalFood, MacroProfile

_logger = logging.getLogger(__name__)

RECIPE_PORTION_LABEL = "1 ширхэг"


class CatalogRepository(Protocol):
    """Persistence interface for foods, aliases and portions."""

    def ensure_schema(self) -> list[str]:
        """Create missing tables and columns; return applied migration names."""

    def get_food(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""

    def find_food_by_source(self, source: str, source_id: str) -> Food | None:
        """Return the food created from an external record, if present."""

    def list_catalog(self) -> list[CatalogEntry]:
        """Return every food with its alias texts, in insertion order."""

    def list_portions(self, food_id: UUID) -> list[Portion]:
        """Return portions for a food, default first then by grams."""

    def list_aliases(self, food_id: UUID) -> list[tuple[str, str]]:
        """Return stored ``(text, lang)`` aliases for a food."""

    def insert_food(self, new_food: NewFood) -> Food:
        """Insert a food with its aliases and portions atomically."""

    def add_alias(self, food_id: UUID, text: str, lang: str) -> bool:
        """Insert an alias unless it already exists; return whether it was added."""

    def count_logs_for_food(self, food_id: UUID) -> int:
        """Return how many log rows reference a food."""

    def update_food_nutrition(self, food_id: UUID, per_100g: MacroProfile) -> Food:
        """Overwrite per-100g values of an unreferenced food."""


@dataclass
class CatalogService:
    """Application service for catalog lifecycle and lookups."""

    repository: CatalogRepository
    seed_foods: tuple[SeedFood, ...] = SEED_FOODS

    def initialize(self) -> list[str]:
        """Create or migrate the schema. Safe to call on every start."""
        try:
            applied = self.repository.ensure_schema()
        except StorageError as exc:
            raise CatalogInitializationError(f"Schema migration failed: {exc}") from exc
        for name in applied:
            _logger.info("Applied catalog migration: %s", name)
        return applied

    def seed(self) -> SeedReport:
        """Add missing reference foods and aliases without overwriting anything."""
        report = SeedReport()
        try:
            for seed_food in self.seed_foods:
                if self.repository.get_food(seed_food.id) is None:
                    self.repository.insert_food(_seed_to_new_food(seed_food))
                    report.foods_added += 1
                    continue
                added = 0
                for alias in _seed_alias_texts(seed_food):
                    if self.repository.add_alias(seed_food.id, alias, "mn"):
                        added += 1
                if added:
                    report.aliases_added += added
                    report.healed_food_keys.append(seed_food.key)
        except StorageError as exc:
            raise CatalogInitializationError(f"Catalog seeding failed: {exc}") from exc
        if report.foods_added or report.aliases_added:
            _logger.info(
                "Seeded catalog: foods_added=%s aliases_added=%s",
                report.foods_added,
                report.aliases_added,
            )
        return report

    def get_food(self, food_id: UUID) -> Food:
        """Return a food or raise ``FoodNotFoundError``."""
        food = self.repository.get_food(food_id)
        if food is None:
            raise FoodNotFoundError(f"Food {food_id} not found")
        return food

    def list_entries(self) -> list[CatalogEntry]:
        """Return the full foods x aliases view used by search."""
        return self.repository.list_catalog()

    def get_portions(self, food_id: UUID) -> list[Portion]:
        """Return stored portions for a food."""
        return self.repository.list_portions(food_id)

    def default_portion(self, food_id: UUID) -> Portion:
        """Return the default portion, or the implicit 100 g one."""
        for portion in self.repository.list_portions(food_id):
            if portion.is_default:
                return portion
        return Portion(
            id=None,
            food_id=food_id,
            label=DEFAULT_PORTION_LABEL,
            grams=DEFAULT_PORTION_GRAMS,
            is_default=True,
        )

    def add_alias(self, food_id: UUID, text: str, lang: str = "mn") -> bool:
        """Attach a user alias to a food."""
        self.get_food(food_id)
        normalized = normalize_alias(text)
        if not normalized:
            return False
        return self.repository.add_alias(food_id, normalized, lang)

    def create_custom_food(self, payload: CustomFoodPayload) -> Food:
        """Create a user-entered food."""
        if payload.portions:
            portions = tuple(
                PortionSpec(label=p.label, grams=p.grams, is_default=p.is_default)
                for p in payload.portions
            )
        else:
            portions = (
                PortionSpec(DEFAULT_PORTION_LABEL, DEFAULT_PORTION_GRAMS, True),
                PortionSpec("1 ширхэг", DEFAULT_PORTION_GRAMS, False),
            )
        new_food = NewFood(
            source="custom",
            name=payload.name.strip(),
            name_secondary=payload.name_secondary or payload.name.strip(),
            per_100g=MacroProfile(
                calories=payload.calories,
                protein_g=payload.protein_g,
                carbs_g=payload.carbs_g,
                fat_g=payload.fat_g,
            ),
            aliases=_custom_aliases(payload),
            portions=_single_default(portions),
        )
        return self.repository.insert_food(new_food)

    def upsert_external_food(self, query: str, external: ExternalFood) -> Food:
        """Store an external record once per external id."""
        source_id = str(external.fdc_id)
        existing = self.repository.find_food_by_source("external", source_id)
        if existing is not None:
            return existing
        new_food = NewFood(
            source="external",
            source_id=source_id,
            name=query.strip(),
            name_secondary=external.name_en,
            per_100g=external.per_100g,
            aliases=(
                (normalize_alias(query), "mn"),
                (normalize_alias(external.name_en), "en"),
            ),
            portions=(PortionSpec(DEFAULT_PORTION_LABEL, DEFAULT_PORTION_GRAMS, True),),
        )
        food = self.repository.insert_food(new_food)
        _logger.info("Cached external food fdc_id=%s as %s", source_id, food.id)
        return food

    def get_or_create_recipe_food(
        self, recipe_id: int, title: str, per_serving: MacroProfile
    ) -> Food:
        """Return the food derived from a recipe, creating it on first use.

        One serving is stored as a 100 g portion so per-serving values map
        directly onto the per-100g columns.
        """
        existing = self.repository.find_food_by_source("recipe", str(recipe_id))
        if existing is not None:
            return existing
        new_food = NewFood(
            source="recipe",
            source_id=str(recipe_id),
            name=title.strip(),
            name_secondary=title.strip(),
            per_100g=per_serving,
            aliases=((normalize_alias(title), "en"),),
            portions=(PortionSpec(RECIPE_PORTION_LABEL, DEFAULT_PORTION_GRAMS, True),),
        )
        return self.repository.insert_food(new_food)

    def rederive_food(self, food_id: UUID, per_100g: MacroProfile) -> Food:
        """Change nutrition values without touching logged history.

        Foods already referenced by logs are copied to a new row instead of
        being edited.
        """
        food = self.get_food(food_id)
        if self.repository.count_logs_for_food(food_id) == 0:
            return self.repository.update_food_nutrition(food_id, per_100g)
        portions = tuple(
            PortionSpec(label=p.label, grams=p.grams, is_default=p.is_default)
            for p in self.repository.list_portions(food_id)
        )
        aliases = tuple(self.repository.list_aliases(food_id))
        derived = self.repository.insert_food(
            NewFood(
                source=food.source,
                source_id=None,
                name=food.name,
                name_secondary=food.name_secondary,
                per_100g=per_100g,
                aliases=aliases,
                portions=portions,
            )
        )
        _logger.info("Re-derived food %s as %s", food_id, derived.id)
        return derived


def _custom_aliases(payload: CustomFoodPayload) -> tuple[tuple[str, str], ...]:
    aliases = [(normalize_alias(payload.name), "mn")]
    secondary = normalize_alias(payload.name_secondary or "")
    if secondary and secondary != aliases[0][0]:
        aliases.append((secondary, "en"))
    return tuple(aliases)


def _seed_alias_texts(seed_food: SeedFood) -> list[str]:
    texts: list[str] = []
    for raw in (*seed_food.aliases, seed_food.name):
        alias = normalize_alias(raw)
        if alias and alias not in texts:
            texts.append(alias)
    return texts


def _seed_to_new_food(seed_food: SeedFood) -> NewFood:
    return NewFood(
        food_id=seed_food.id,
        source="custom",
        name=seed_food.name,
        name_secondary=seed_food.name_secondary,
        per_100g=seed_food.per_100g,
        aliases=tuple((alias, "mn") for alias in _seed_alias_texts(seed_food)),
        portions=_single_default(seed_food.portions),
    )


def _single_default(portions: tuple[PortionSpec, ...]) -> tuple[PortionSpec, ...]:
    """Keep only the first portion flagged as default."""
    seen_default = False
    result: list[PortionSpec] = []
    for portion in portions:
        is_default = portion.is_default and not seen_default
        seen_default = seen_default or is_default
        result.append(PortionSpec(portion.label, portion.grams, is_default))
    return tuple(result)
