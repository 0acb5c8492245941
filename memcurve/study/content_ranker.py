"""
Forgotten-content identification and urgency ranking.

Priority score:
    (overdue_hours * 2 + (100 - current_retention) * 0.5) * difficulty_weight
    + (5 - min(review_count, 5)) * 10

Current retention is always predicted from the forgetting curve at query
time, never read from the item's last recorded value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from memcurve.core.clock import Clock, SystemClock
from memcurve.core.constants import (
    DIFFICULTY_PRIORITY_WEIGHT,
    OVERDUE_HOUR_WEIGHT,
    RETENTION_DEFICIT_WEIGHT,
    UNDER_REVIEWED_BONUS,
    UNDER_REVIEWED_CAP,
)
from memcurve.core.models import MemoryItem
from memcurve.study.forgetting_curve import current_retention, is_forgotten


@dataclass(frozen=True)
class WeeklyStats:
    """Learning summary over items created in the trailing week."""

    learned: int = 0
    reviewed: int = 0
    average_retention: float = 0.0
    forgotten_count: int = 0


class ForgottenContentIdentifier:
    """Finds items that need review and orders them by urgency."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    def identify_forgotten_content(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """Items that are due, or whose predicted retention is below threshold."""
        now = self.clock.now()
        return [
            item for item in items
            if item.next_review_at <= now or is_forgotten(current_retention(item, now))
        ]

    def sort_by_priority(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """Highest priority first; equal scores fall back to item id."""
        now = self.clock.now()
        return sorted(
            items,
            key=lambda item: (-self.calculate_priority_score(item, now), item.id),
        )

    def calculate_priority_score(self, item: MemoryItem, now: Optional[datetime] = None) -> float:
        now = now or self.clock.now()

        overdue_hours = max(0.0, (now - item.next_review_at).total_seconds() / 3600)
        retention = current_retention(item, now)

        score = overdue_hours * OVERDUE_HOUR_WEIGHT
        score += (100 - retention) * RETENTION_DEFICIT_WEIGHT
        score *= DIFFICULTY_PRIORITY_WEIGHT[item.difficulty.value]
        score += (UNDER_REVIEWED_CAP - min(item.review_count, UNDER_REVIEWED_CAP)) * UNDER_REVIEWED_BONUS

        return score

    def get_today_reviews(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """Items scheduled anywhere in the current calendar day."""
        today = datetime.combine(self.clock.now().date(), datetime.min.time())
        tomorrow = today + timedelta(days=1)
        return [item for item in items if today <= item.next_review_at < tomorrow]

    def get_weekly_stats(self, items: Iterable[MemoryItem]) -> WeeklyStats:
        """
        Summary of the last 7 days of new content.

        average_retention uses recorded retention; forgotten_count uses the
        retention predicted right now.
        """
        now = self.clock.now()
        week_ago = now - timedelta(days=7)

        recent = [item for item in items if item.created_at >= week_ago]
        if not recent:
            return WeeklyStats()

        return WeeklyStats(
            learned=len(recent),
            reviewed=sum(1 for item in recent if item.review_count > 0),
            average_retention=sum(item.retention_rate for item in recent) / len(recent),
            forgotten_count=sum(
                1 for item in recent if is_forgotten(current_retention(item, now))
            ),
        )
