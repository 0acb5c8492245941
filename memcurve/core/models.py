"""
Domain models for memorized content.

MemoryItem is the unit of learning content; ReviewInterval is one entry of
its append-only review log. Items are passed around as values: scheduling
operations return updated copies instead of mutating their input.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from memcurve.core.constants import REVIEW_INTERVALS


class Difficulty(str, Enum):
    """Content difficulty, fixed when the item is created."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class ReviewInterval:
    """One planned or attempted review event."""

    interval: int  # Minutes since the preceding anchor
    scheduled_time: datetime
    success: bool = False
    retention_before: float = 100.0
    retention_after: float = 100.0
    actual_time: Optional[datetime] = None

    @property
    def attempted(self) -> bool:
        """True once the review has actually happened."""
        return self.actual_time is not None

    @property
    def failed(self) -> bool:
        return self.attempted and not self.success


@dataclass
class MemoryItem:
    """A piece of content the learner is memorizing."""

    id: str
    content: str
    category: str
    difficulty: Difficulty
    created_at: datetime
    next_review_at: datetime
    retention_rate: float = 100.0  # 0-100, last known estimate
    review_count: int = 0
    last_reviewed_at: Optional[datetime] = None
    intervals: list[ReviewInterval] = field(default_factory=list)

    def __post_init__(self):
        """Coerce plain strings into Difficulty (raises ValueError if unknown)."""
        if not isinstance(self.difficulty, Difficulty):
            self.difficulty = Difficulty(self.difficulty)
        if self.intervals is None:
            self.intervals = []

    @classmethod
    def create(
        cls,
        content: str,
        category: str,
        difficulty: Difficulty | str = Difficulty.MEDIUM,
        now: Optional[datetime] = None,
        item_id: Optional[str] = None,
    ) -> MemoryItem:
        """New item, first review one ladder rung after creation."""
        created_at = now or datetime.now()
        return cls(
            id=item_id or str(uuid.uuid4()),
            content=content,
            category=category,
            difficulty=difficulty,
            created_at=created_at,
            next_review_at=created_at + timedelta(minutes=REVIEW_INTERVALS[0]),
        )

    @property
    def anchor_time(self) -> datetime:
        """Start of the current decay period."""
        return self.last_reviewed_at or self.created_at

    @property
    def completed_reviews(self) -> list[ReviewInterval]:
        return [entry for entry in self.intervals if entry.attempted]

    @property
    def is_new(self) -> bool:
        return not any(entry.attempted for entry in self.intervals)

    def is_due(self, now: datetime) -> bool:
        return self.next_review_at <= now


@dataclass
class Category:
    """Derived aggregate over items sharing a category id."""

    id: str
    name: str
    color: Optional[str] = None
    item_count: int = 0
    average_retention: float = 0.0
