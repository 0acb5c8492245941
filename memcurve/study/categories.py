"""
Content categories.

Category statistics are derived from the items that reference them and
are recomputed on request; they are never authoritative on their own.
"""

from __future__ import annotations

import uuid
from typing import Iterable, Optional

from loguru import logger

from memcurve.core.models import Category, MemoryItem

UNCATEGORIZED = "uncategorized"

DEFAULT_CATEGORIES = (
    Category(id="vocab", name="Vocabulary", color="#3B82F6"),
    Category(id="concept", name="Concepts", color="#EF4444"),
    Category(id="formula", name="Formulas", color="#10B981"),
)


def compute_category_stats(category: Category, items: Iterable[MemoryItem]) -> Category:
    """Category with item count and mean recorded retention refreshed."""
    members = [item for item in items if item.category == category.id]
    average = sum(item.retention_rate for item in members) / len(members) if members else 0.0
    return Category(
        id=category.id,
        name=category.name,
        color=category.color,
        item_count=len(members),
        average_retention=average,
    )


class ContentClassificationSystem:
    """In-memory category registry."""

    def __init__(self, categories: Optional[Iterable[Category]] = None):
        self._categories: dict[str, Category] = {
            category.id: category for category in (categories or ())
        }

    def add_category(self, name: str, color: Optional[str] = None) -> Category:
        category = Category(id=str(uuid.uuid4()), name=name, color=color)
        self._categories[category.id] = category
        logger.debug("Category added: {} ({})", name, category.id)
        return category

    def update_category_stats(self, category_id: str, items: Iterable[MemoryItem]) -> Optional[Category]:
        """Recompute one category; unknown ids are ignored."""
        category = self._categories.get(category_id)
        if category is None:
            return None

        updated = compute_category_stats(category, items)
        self._categories[category_id] = updated
        return updated

    def get_categories(self) -> list[Category]:
        return list(self._categories.values())

    def get_items_by_category(self, items: Iterable[MemoryItem], category_id: str) -> list[MemoryItem]:
        return [item for item in items if item.category == category_id]
