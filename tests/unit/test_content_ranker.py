"""
Unit tests for ForgottenContentIdentifier.

Tests:
- Forgotten/overdue detection against predicted retention
- Priority scoring and ordering
- Today's reviews
- Weekly statistics
"""

from datetime import datetime, timedelta

import pytest

from memcurve.study.content_ranker import ForgottenContentIdentifier, WeeklyStats
from memcurve.study.forgetting_curve import calculate_retention_rate


@pytest.fixture
def identifier(clock):
    return ForgottenContentIdentifier(clock=clock)


def overdue_item(make_item, base_time, item_id, difficulty, **overrides):
    """Item created 3 hours ago and due 2 hours ago."""
    return make_item(
        item_id,
        difficulty=difficulty,
        created_at=base_time - timedelta(hours=3),
        next_review_at=base_time - timedelta(hours=2),
        **overrides,
    )


class TestIdentifyForgottenContent:
    def test_due_items_included(self, identifier, make_item, base_time):
        item = make_item(
            last_reviewed_at=base_time - timedelta(minutes=2),
            next_review_at=base_time - timedelta(minutes=1),
        )
        assert identifier.identify_forgotten_content([item]) == [item]

    def test_decayed_items_included_before_due(self, identifier, make_item, base_time):
        # 30 minutes without review on the medium curve is ~17.8%
        item = make_item(
            created_at=base_time - timedelta(minutes=30),
            next_review_at=base_time + timedelta(hours=1),
        )
        assert identifier.identify_forgotten_content([item]) == [item]

    def test_fresh_items_excluded(self, identifier, make_item, base_time):
        item = make_item(
            last_reviewed_at=base_time - timedelta(minutes=5),
            next_review_at=base_time + timedelta(hours=1),
        )
        assert identifier.identify_forgotten_content([item]) == []

    def test_recorded_retention_is_ignored(self, identifier, make_item, base_time):
        item = make_item(
            retention_rate=5.0,
            last_reviewed_at=base_time - timedelta(minutes=5),
            next_review_at=base_time + timedelta(hours=1),
        )
        assert identifier.identify_forgotten_content([item]) == []


class TestPriority:
    def test_hard_outranks_easy_when_equally_overdue(self, identifier, make_item, base_time):
        hard = overdue_item(make_item, base_time, "hard", "hard")
        easy = overdue_item(make_item, base_time, "easy", "easy")

        assert identifier.calculate_priority_score(hard) > identifier.calculate_priority_score(easy)
        assert [item.id for item in identifier.sort_by_priority([easy, hard])] == ["hard", "easy"]

    def test_score_formula(self, identifier, make_item, base_time):
        item = overdue_item(make_item, base_time, "medium", "medium")
        retention = calculate_retention_rate(180, "medium")

        expected = (2 * 2 + (100 - retention) * 0.5) * 1.5 + 5 * 10

        assert identifier.calculate_priority_score(item) == pytest.approx(expected)

    def test_under_review_bonus_shrinks_and_caps(self, identifier, make_item, base_time):
        scores = [
            identifier.calculate_priority_score(
                overdue_item(make_item, base_time, f"n{count}", "medium", review_count=count)
            )
            for count in (0, 1, 5, 12)
        ]

        assert scores[0] - scores[1] == pytest.approx(10)
        assert scores[2] == pytest.approx(scores[3])

    def test_not_yet_due_has_no_overdue_component(self, identifier, make_item, base_time):
        item = make_item(
            last_reviewed_at=base_time,
            next_review_at=base_time + timedelta(days=1),
            review_count=5,
        )
        assert identifier.calculate_priority_score(item) == 0

    def test_equal_scores_ordered_by_id(self, identifier, make_item, base_time):
        b = overdue_item(make_item, base_time, "b", "medium")
        a = overdue_item(make_item, base_time, "a", "medium")
        assert [item.id for item in identifier.sort_by_priority([b, a])] == ["a", "b"]


class TestTodayReviews:
    def test_calendar_day_window(self, identifier, make_item):
        inside_start = make_item("start", next_review_at=datetime(2024, 3, 6, 0, 0))
        inside_end = make_item("end", next_review_at=datetime(2024, 3, 6, 23, 59))
        tomorrow = make_item("tomorrow", next_review_at=datetime(2024, 3, 7, 0, 0))
        yesterday = make_item("yesterday", next_review_at=datetime(2024, 3, 5, 23, 59))

        today = identifier.get_today_reviews([inside_start, tomorrow, yesterday, inside_end])

        assert [item.id for item in today] == ["start", "end"]


class TestWeeklyStats:
    def test_summary(self, identifier, make_item, base_time):
        reviewed = make_item(
            "reviewed",
            created_at=base_time - timedelta(days=1),
            review_count=1,
            retention_rate=80.0,
            last_reviewed_at=base_time - timedelta(minutes=10),
        )
        neglected = make_item("neglected", created_at=base_time - timedelta(days=2))
        old = make_item("old", created_at=base_time - timedelta(days=10), retention_rate=0.0)

        stats = identifier.get_weekly_stats([reviewed, neglected, old])

        assert stats.learned == 2
        assert stats.reviewed == 1
        assert stats.average_retention == pytest.approx(90.0)
        assert stats.forgotten_count == 1

    def test_empty_week(self, identifier, make_item, base_time):
        old = make_item(created_at=base_time - timedelta(days=30))
        assert identifier.get_weekly_stats([old]) == WeeklyStats()
