"""
Unit tests for category statistics and memory pattern analysis.
"""

import pytest

from memcurve.core.models import Category
from memcurve.study.analysis import MemoryAnalyzer, MemoryPatterns
from memcurve.study.categories import (
    DEFAULT_CATEGORIES,
    ContentClassificationSystem,
    compute_category_stats,
)


@pytest.fixture
def items(make_item):
    return [
        make_item("v1", category="vocab", difficulty="easy", retention_rate=90.0),
        make_item("v2", category="vocab", difficulty="medium", retention_rate=50.0),
        make_item("c1", category="concept", difficulty="hard", retention_rate=30.0),
        make_item("c2", category="concept", difficulty="hard", retention_rate=40.0),
        make_item("f1", category="formula", difficulty="medium", retention_rate=100.0),
    ]


class TestCategoryStats:
    def test_compute(self, items):
        stats = compute_category_stats(Category(id="vocab", name="Vocabulary"), items)
        assert stats.item_count == 2
        assert stats.average_retention == pytest.approx(70.0)

    def test_empty_category(self, items):
        stats = compute_category_stats(Category(id="history", name="History"), items)
        assert stats.item_count == 0
        assert stats.average_retention == 0.0


class TestContentClassificationSystem:
    def test_add_category_gets_unique_id(self):
        system = ContentClassificationSystem()
        first = system.add_category("History", "#F59E0B")
        second = system.add_category("History")

        assert first.id != second.id
        assert len(system.get_categories()) == 2

    def test_update_stats(self, items):
        system = ContentClassificationSystem(DEFAULT_CATEGORIES)

        updated = system.update_category_stats("concept", items)

        assert updated.item_count == 2
        assert updated.average_retention == pytest.approx(35.0)
        assert {c.id: c.item_count for c in system.get_categories()}["concept"] == 2

    def test_update_unknown_category_ignored(self, items):
        system = ContentClassificationSystem(DEFAULT_CATEGORIES)
        assert system.update_category_stats("missing", items) is None

    def test_items_by_category(self, items):
        system = ContentClassificationSystem(DEFAULT_CATEGORIES)
        assert [item.id for item in system.get_items_by_category(items, "formula")] == ["f1"]


class TestMemoryAnalyzer:
    def test_patterns(self, items):
        patterns = MemoryAnalyzer().analyze_patterns(items)

        assert patterns.average_retention_by_difficulty == pytest.approx(
            {"easy": 90.0, "medium": 75.0, "hard": 35.0}
        )
        assert patterns.most_difficult_category == "concept"
        assert patterns.easiest_category == "formula"

    def test_patterns_empty(self):
        assert MemoryAnalyzer().analyze_patterns([]) == MemoryPatterns()

    def test_recommendations(self, items):
        recommendations = MemoryAnalyzer().generate_recommendations(items)

        assert recommendations.focus_areas == ["concept", "vocab"]
        assert recommendations.low_retention_count == 3
