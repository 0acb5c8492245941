"""Memory pattern analysis over recorded retention."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Optional

from memcurve.core.models import MemoryItem

LOW_RETENTION_THRESHOLD = 60.0
MAX_FOCUS_AREAS = 3


@dataclass
class MemoryPatterns:
    average_retention_by_difficulty: dict[str, float] = field(default_factory=dict)
    average_retention_by_category: dict[str, float] = field(default_factory=dict)
    most_difficult_category: Optional[str] = None
    easiest_category: Optional[str] = None


@dataclass
class Recommendations:
    focus_areas: list[str] = field(default_factory=list)
    low_retention_count: int = 0


def _average_by(items: list[MemoryItem], key) -> dict[str, float]:
    groups: dict[str, list[float]] = defaultdict(list)
    for item in items:
        groups[key(item)].append(item.retention_rate)
    return {name: sum(values) / len(values) for name, values in groups.items()}


class MemoryAnalyzer:
    """Summarizes where the learner retains well and where they struggle."""

    def analyze_patterns(self, items: Iterable[MemoryItem]) -> MemoryPatterns:
        items = list(items)
        if not items:
            return MemoryPatterns()

        by_category = _average_by(items, lambda item: item.category)

        return MemoryPatterns(
            average_retention_by_difficulty=_average_by(items, lambda item: item.difficulty.value),
            average_retention_by_category=by_category,
            most_difficult_category=min(by_category, key=lambda name: (by_category[name], name)),
            easiest_category=max(by_category, key=lambda name: (by_category[name], name)),
        )

    def generate_recommendations(self, items: Iterable[MemoryItem]) -> Recommendations:
        """Categories with the most weakly retained items, worst first."""
        weak = [item for item in items if item.retention_rate < LOW_RETENTION_THRESHOLD]
        counts = Counter(item.category for item in weak)

        ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))

        return Recommendations(
            focus_areas=[category for category, _ in ranked[:MAX_FOCUS_AREAS]],
            low_retention_count=len(weak),
        )
