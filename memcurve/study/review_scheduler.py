"""
Review Scheduler - Adaptive interval scheduling over the review ladder.

Workflow per review:
1. Score the response (success + response latency)
2. Reset or penalize the recorded retention
3. Advance one ladder rung past the last successful review
4. Stretch or shrink that interval by performance and difficulty
5. Append the attempt to the item's interval log

Operations never mutate their arguments: every method returns new
MemoryItem values and the caller decides what to persist. Reviews of the
same item must be applied one at a time, in order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta
from typing import Iterable, Optional

from loguru import logger

from memcurve.core.clock import Clock, SystemClock
from memcurve.core.constants import FAILURE_RETENTION_PENALTY, REVIEW_INTERVALS
from memcurve.core.models import MemoryItem, ReviewInterval
from memcurve.study.forgetting_curve import (
    adjust_interval_by_performance,
    calculate_retention_rate,
    generate_review_schedule,
    minutes_between,
    next_ladder_interval,
    predict_future_retention,
    rung_index_for,
)

# Response-time bands (seconds) for successful reviews
FAST_RESPONSE_SECONDS = 3
NORMAL_RESPONSE_SECONDS = 10


@dataclass(frozen=True)
class RetentionForecast:
    """Average predicted retention across items on one future day."""

    date: datetime
    predicted_retention: float


class ReviewScheduler:
    """
    Forgetting-curve review scheduler.

    Decides when each item is next reviewed, builds daily plans and
    surfaces items whose recorded retention has collapsed.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        fast_retry_minutes: int = 10,
        active_review_window_minutes: int = 5,
        urgent_window_minutes: int = 60,
        urgent_retention_threshold: float = 50.0,
    ):
        self.clock = clock or SystemClock()
        self.fast_retry_minutes = fast_retry_minutes
        self.active_review_window_minutes = active_review_window_minutes
        self.urgent_window_minutes = urgent_window_minutes
        self.urgent_retention_threshold = urgent_retention_threshold

    # =========================================================================
    # Review processing
    # =========================================================================

    def calculate_performance_score(
        self,
        success: bool,
        response_time: Optional[float] = None,
    ) -> float:
        """
        Score a single review in [0, 1].

        Failures score 0. Successes score 1.0 under 3 s, 0.9 under 10 s and
        0.7 otherwise; a success without a response time scores 1.0.
        """
        if response_time is not None and response_time < 0:
            raise ValueError(f"response_time must be >= 0, got {response_time}")

        if not success:
            return 0.0
        if response_time is None or response_time < FAST_RESPONSE_SECONDS:
            return 1.0
        if response_time < NORMAL_RESPONSE_SECONDS:
            return 0.9
        return 0.7

    def process_review_result(
        self,
        item: MemoryItem,
        success: bool,
        response_time: Optional[float] = None,
    ) -> MemoryItem:
        """
        Apply one review outcome and return the updated item.

        Args:
            item: Current item state (left untouched)
            success: Whether the learner recalled the content
            response_time: Seconds taken to answer, if measured

        Returns:
            New MemoryItem with retention, counters, next review time and
            interval log updated
        """
        now = self.clock.now()
        intervals = list(item.intervals or [])

        performance_score = self.calculate_performance_score(success, response_time)

        if success:
            retention_after = 100.0
        else:
            retention_after = max(0.0, item.retention_rate - FAILURE_RETENTION_PENALTY)

        elapsed_minutes = minutes_between(item.anchor_time, now)
        retention_before = calculate_retention_rate(elapsed_minutes, item.difficulty)

        next_interval = self._determine_next_interval(
            intervals, item.difficulty, performance_score
        )

        entry = ReviewInterval(
            interval=round(elapsed_minutes),
            scheduled_time=item.next_review_at,
            actual_time=now,
            success=success,
            retention_before=retention_before,
            retention_after=retention_after,
        )

        updated = replace(
            item,
            review_count=item.review_count + 1,
            retention_rate=retention_after,
            last_reviewed_at=now,
            next_review_at=now + timedelta(minutes=next_interval),
            intervals=[*intervals, entry],
        )

        logger.debug(
            "Review processed for {}: success={}, score={:.1f}, next in {} min",
            item.id,
            success,
            performance_score,
            next_interval,
        )

        return updated

    def _determine_next_interval(
        self,
        intervals: list[ReviewInterval],
        difficulty,
        performance_score: float,
    ) -> int:
        """Ladder interval after the last success, adjusted by performance."""
        base_interval = REVIEW_INTERVALS[0]

        last_success = next(
            (entry for entry in reversed(intervals) if entry.success),
            None,
        )
        if last_success is not None:
            base_interval = next_ladder_interval(rung_index_for(last_success.interval))

        multiplier = adjust_interval_by_performance(performance_score, difficulty)

        return round(base_interval * multiplier)

    # =========================================================================
    # Batch scheduling
    # =========================================================================

    def batch_schedule_reviews(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """
        Initialize new items and fast-retry overdue failures.

        - Items without an interval log get the full ladder plan and are
          due at its first rung.
        - Overdue items whose latest review failed, and which have no plan
          entry starting within the active window, are retried shortly.
        """
        now = self.clock.now()
        scheduled: list[MemoryItem] = []

        for item in items:
            if not item.intervals:
                plan = generate_review_schedule(item)
                item = replace(item, intervals=plan, next_review_at=plan[0].scheduled_time)

            if item.next_review_at <= now and not self._has_active_review(item, now):
                last_entry = item.intervals[-1]
                if last_entry.failed:
                    item = replace(
                        item,
                        next_review_at=now + timedelta(minutes=self.fast_retry_minutes),
                    )
                    logger.info(
                        "Fast retry scheduled for {} in {} min",
                        item.id,
                        self.fast_retry_minutes,
                    )

            scheduled.append(item)

        return scheduled

    def _has_active_review(self, item: MemoryItem, now: datetime) -> bool:
        """True if an unattempted plan entry starts within the active window."""
        window_end = now + timedelta(minutes=self.active_review_window_minutes)
        return any(
            not entry.attempted and now < entry.scheduled_time <= window_end
            for entry in item.intervals
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_urgent_reviews(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """Items due within the urgent window whose retention fell below threshold."""
        threshold = self.clock.now() + timedelta(minutes=self.urgent_window_minutes)

        urgent = [
            item for item in items
            if item.next_review_at <= threshold
            and item.retention_rate < self.urgent_retention_threshold
        ]

        return sorted(urgent, key=lambda item: item.next_review_at)

    def generate_daily_plan(
        self,
        items: Iterable[MemoryItem],
        max_items_per_day: int = 20,
    ) -> list[MemoryItem]:
        """
        Today's bounded review list.

        Order:
        1. Items due between now and the end of today
        2. Soonest upcoming items, if slots remain

        Items falling in the same one-minute bucket are ordered weakest
        first; otherwise by due time. When more items are due today than
        fit, the most urgent ones are kept.
        """
        if max_items_per_day <= 0:
            raise ValueError(f"max_items_per_day must be positive, got {max_items_per_day}")

        now = self.clock.now()
        today_end = datetime.combine(now.date(), time.max)
        items = list(items)

        def plan_order(item: MemoryItem):
            bucket = int((item.next_review_at - now).total_seconds() // 60)
            return (bucket, item.retention_rate, item.next_review_at, item.id)

        selected = sorted(
            (item for item in items if now <= item.next_review_at <= today_end),
            key=plan_order,
        )

        if len(selected) < max_items_per_day:
            upcoming = sorted(
                (item for item in items if item.next_review_at > today_end),
                key=lambda item: (item.next_review_at, item.id),
            )
            selected.extend(upcoming[: max_items_per_day - len(selected)])

        return sorted(selected[:max_items_per_day], key=plan_order)

    def predict_long_term_retention(
        self,
        items: Iterable[MemoryItem],
        days_ahead: int = 30,
    ) -> list[RetentionForecast]:
        """
        Average predicted retention for each of the next days.

        Items whose prediction has decayed to zero are left out of that
        day's average.
        """
        if days_ahead <= 0:
            raise ValueError(f"days_ahead must be positive, got {days_ahead}")

        now = self.clock.now()
        items = list(items)
        forecast: list[RetentionForecast] = []

        for day in range(1, days_ahead + 1):
            target = now + timedelta(days=day)
            predictions = [
                retention
                for retention in (predict_future_retention(item, target) for item in items)
                if retention > 0
            ]
            average = sum(predictions) / len(predictions) if predictions else 0.0
            forecast.append(RetentionForecast(date=target, predicted_retention=average))

        return forecast
