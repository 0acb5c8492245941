"""
Forgetting Curve - Closed-form retention model and review ladder.

Implements:
1. Exponential decay: R(t) = 100 * exp(-t / (S * 60)), t in minutes
2. Difficulty-scaled memory strength (easy decays slower, hard faster)
3. Standard review ladder (20 min -> 31 days, doubling past the end)
4. Performance-driven interval multiplier

The "forgotten" threshold (41.8%) is the medium-difficulty curve at exactly
20 minutes, the first rung of the ladder.
"""

from __future__ import annotations

import math
from bisect import bisect_right
from datetime import datetime, timedelta
from typing import Optional

from memcurve.core.constants import (
    BASE_STRENGTH,
    DIFFICULTY_INTERVAL_MULTIPLIER,
    DIFFICULTY_STRENGTH_MULTIPLIER,
    EXTENDED_INTERVAL,
    FORGOTTEN_THRESHOLD,
    MAX_INTERVAL_MULTIPLIER,
    MIN_INTERVAL_MULTIPLIER,
    REVIEW_INTERVALS,
)
from memcurve.core.models import Difficulty, MemoryItem, ReviewInterval


# =============================================================================
# RETENTION MODEL
# =============================================================================

def memory_strength(difficulty: Difficulty | str) -> float:
    """Strength factor S for a difficulty level."""
    level = Difficulty(difficulty)
    return BASE_STRENGTH * DIFFICULTY_STRENGTH_MULTIPLIER[level.value]


def calculate_retention_rate(
    elapsed_minutes: float,
    difficulty: Difficulty | str = Difficulty.MEDIUM,
) -> float:
    """
    Predicted retention after a period without review.

    Args:
        elapsed_minutes: Minutes since the last review (or creation), >= 0
        difficulty: Content difficulty

    Returns:
        Retention percentage in [0, 100]

    Raises:
        ValueError: If elapsed_minutes is negative or difficulty unknown
    """
    if elapsed_minutes < 0:
        raise ValueError(f"elapsed_minutes must be >= 0, got {elapsed_minutes}")

    strength = memory_strength(difficulty)
    retention = math.exp(-elapsed_minutes / (strength * 60)) * 100

    return max(0.0, min(100.0, retention))


def is_forgotten(retention_rate: float) -> bool:
    """True if retention has dropped below the 20-minute medium-curve anchor."""
    if not 0 <= retention_rate <= 100:
        raise ValueError(f"retention_rate must be within [0, 100], got {retention_rate}")
    return retention_rate < FORGOTTEN_THRESHOLD


def minutes_between(start: datetime, end: datetime) -> float:
    """Elapsed minutes from start to end, clamped at zero."""
    return max(0.0, (end - start).total_seconds() / 60)


def current_retention(item: MemoryItem, now: datetime) -> float:
    """Predicted retention of an item right now."""
    return calculate_retention_rate(minutes_between(item.anchor_time, now), item.difficulty)


def predict_future_retention(item: MemoryItem, target: datetime) -> float:
    """Predicted retention of an item at a future instant."""
    return calculate_retention_rate(minutes_between(item.anchor_time, target), item.difficulty)


# =============================================================================
# REVIEW LADDER
# =============================================================================

def rung_index_for(interval_minutes: float) -> Optional[int]:
    """
    Ladder rung reached by an interval.

    Exact rung values map to their own index; anything in between maps to
    the highest rung it covers. Intervals shorter than the first rung have
    not completed any rung and return None.
    """
    index = bisect_right(REVIEW_INTERVALS, interval_minutes) - 1
    return index if index >= 0 else None


def next_ladder_interval(rung_index: Optional[int]) -> int:
    """Interval (minutes) that follows a completed rung."""
    if rung_index is None:
        return REVIEW_INTERVALS[0]
    if rung_index >= len(REVIEW_INTERVALS) - 1:
        return EXTENDED_INTERVAL
    return REVIEW_INTERVALS[rung_index + 1]


def get_next_review_time(rung_index: int, last_review_time: datetime) -> datetime:
    """Timestamp of the next review after completing a rung."""
    return last_review_time + timedelta(minutes=next_ladder_interval(rung_index))


def generate_review_schedule(item: MemoryItem) -> list[ReviewInterval]:
    """
    Initial plan: one entry per ladder rung, chained from creation time.

    Each entry carries the retention predicted just before it and a
    provisional post-review retention of 100%.
    """
    schedule: list[ReviewInterval] = []
    current_time = item.created_at

    for interval in REVIEW_INTERVALS:
        current_time = current_time + timedelta(minutes=interval)
        schedule.append(
            ReviewInterval(
                interval=interval,
                scheduled_time=current_time,
                success=False,
                retention_before=calculate_retention_rate(interval, item.difficulty),
                retention_after=100.0,
            )
        )

    return schedule


# =============================================================================
# PERFORMANCE ADJUSTMENT
# =============================================================================

def adjust_interval_by_performance(
    success_rate: float,
    difficulty: Difficulty | str,
) -> float:
    """
    Interval multiplier from recent performance and content difficulty.

    Performance tiers: >=0.95 -> 1.3, >=0.85 -> 1.1, <=0.50 -> 0.7,
    <=0.65 -> 0.8, otherwise 1.0. Difficulty then scales the result
    (easy x1.1, hard x0.9) and the product is clamped to [0.5, 2.0].
    """
    if not 0 <= success_rate <= 1:
        raise ValueError(f"success_rate must be within [0, 1], got {success_rate}")

    if success_rate >= 0.95:
        multiplier = 1.3
    elif success_rate >= 0.85:
        multiplier = 1.1
    elif success_rate <= 0.5:
        multiplier = 0.7
    elif success_rate <= 0.65:
        multiplier = 0.8
    else:
        multiplier = 1.0

    multiplier *= DIFFICULTY_INTERVAL_MULTIPLIER[Difficulty(difficulty).value]

    return max(MIN_INTERVAL_MULTIPLIER, min(MAX_INTERVAL_MULTIPLIER, multiplier))
