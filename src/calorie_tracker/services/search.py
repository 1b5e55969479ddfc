"""Alias-aware fuzzy search over the local catalog."""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Protocol

from calorie_tracker.domain.catalog import CatalogEntry, Food
from calorie_tracker.services.catalog import CatalogService

_logger = logging.getLogger(__name__)

SUBSTRING_WEIGHT = 0.5
PREFIX_WEIGHT = 0.3
TRIGRAM_WEIGHT = 0.5
DEFAULT_RESULT_LIMIT = 50
MORE_RESULTS_LIMIT = 8


class ExternalFoodLookup(Protocol):
    """Remote fallback used when the local catalog has no match."""

    async def lookup(self, query: str) -> Food | None:
        """Return a catalog food for ``query`` from the remote database."""


@dataclass(frozen=True)
class SearchResults:
    """Top match plus the expandable remainder."""

    top: Food | None
    more: list[Food]


@dataclass
class SearchService:
    """Ranks catalog foods against free-text queries."""

    catalog: CatalogService
    limit: int = DEFAULT_RESULT_LIMIT
    fallback: ExternalFoodLookup | None = None

    def search(self, query: str) -> list[Food]:
        """Return foods matching ``query``, best first."""
        q = _normalize(query)
        if not q:
            return []
        scored: list[tuple[float, Food]] = []
        for entry in self.catalog.list_entries():
            if not _contains(q, entry):
                continue
            score = score_food(q, entry.food.name, entry.aliases)
            if score > 0:
                scored.append((score, entry.food))
        scored.sort(key=lambda item: item[0], reverse=True)
        return [food for _, food in scored[: self.limit]]

    async def search_with_fallback(self, query: str) -> list[Food]:
        """Search locally, then ask the external database once."""
        local = self.search(query)
        if local or not _normalize(query):
            return local
        if self.fallback is None:
            _logger.debug("No external lookup configured for query=%s", query)
            return []
        food = await self.fallback.lookup(query)
        if food is None:
            return []
        return [food]


def split_results(foods: list[Food], more_limit: int = MORE_RESULTS_LIMIT) -> SearchResults:
    """Split ranked foods into the top match and a capped remainder."""
    if not foods:
        return SearchResults(top=None, more=[])
    return SearchResults(top=foods[0], more=foods[1 : 1 + more_limit])


def score_food(query: str, name: str, aliases: list[str]) -> float:
    """Score a candidate by substring, prefix and trigram overlap."""
    q = _normalize(query)
    texts = [name.lower(), *(alias.lower() for alias in aliases)]
    score = 0.0
    if any(q in text for text in texts):
        score += SUBSTRING_WEIGHT
    if any(text.startswith(q) for text in texts):
        score += PREFIX_WEIGHT
    score += TRIGRAM_WEIGHT * trigram_similarity(q, " ".join(texts))
    return score


def trigram_similarity(a: str, b: str) -> float:
    """Dice coefficient over the multisets of 3-character substrings."""
    grams_a = _trigrams(a)
    grams_b = _trigrams(b)
    total = sum(grams_a.values()) + sum(grams_b.values())
    if not grams_a or not grams_b:
        return 0.0
    shared = sum((grams_a & grams_b).values())
    return 2 * shared / total


def _trigrams(text: str) -> Counter[str]:
    return Counter(text[i : i + 3] for i in range(len(text) - 2))


def _contains(q: str, entry: CatalogEntry) -> bool:
    # Matching happens here instead of SQL LIKE, which only folds ASCII case.
    haystacks = [entry.food.name, *entry.aliases]
    if entry.food.name_secondary:
        haystacks.append(entry.food.name_secondary)
    return any(q in text.lower() for text in haystacks)


def _normalize(query: str) -> str:
    return query.strip().lower()
