"""
Study Module - Retention modeling and review scheduling.

Provides:
- Forgetting curve and review ladder
- Adaptive review scheduling and daily plans
- Forgotten-content identification and priority ranking
- Review reminders
- Category statistics and memory pattern analysis
"""

from memcurve.study.analysis import MemoryAnalyzer
from memcurve.study.categories import ContentClassificationSystem
from memcurve.study.content_ranker import ForgottenContentIdentifier, WeeklyStats
from memcurve.study.forgetting_curve import (
    REVIEW_INTERVALS,
    adjust_interval_by_performance,
    calculate_retention_rate,
    generate_review_schedule,
    get_next_review_time,
    is_forgotten,
    predict_future_retention,
)
from memcurve.study.reminders import ReviewReminderService
from memcurve.study.review_scheduler import RetentionForecast, ReviewScheduler

__all__ = [
    "REVIEW_INTERVALS",
    "calculate_retention_rate",
    "is_forgotten",
    "adjust_interval_by_performance",
    "generate_review_schedule",
    "get_next_review_time",
    "predict_future_retention",
    "ReviewScheduler",
    "RetentionForecast",
    "ForgottenContentIdentifier",
    "WeeklyStats",
    "ReviewReminderService",
    "ContentClassificationSystem",
    "MemoryAnalyzer",
]
