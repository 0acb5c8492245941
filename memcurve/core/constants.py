"""
Forgetting-curve and review-ladder constants.

All tunable numbers of the retention model live here so the model,
the scheduler and the rankers agree on them.
"""

# =============================================================================
# FORGETTING CURVE
# R(t) = 100 * exp(-t / (S * 60)), t in minutes
# =============================================================================

BASE_STRENGTH = 0.29

DIFFICULTY_STRENGTH_MULTIPLIER = {
    "easy": 1.2,
    "medium": 1.0,
    "hard": 0.8,
}

# Medium-difficulty retention after exactly 20 minutes
FORGOTTEN_THRESHOLD = 41.8


# =============================================================================
# REVIEW LADDER (minutes)
# =============================================================================

REVIEW_INTERVALS: tuple[int, ...] = (
    20,      # 20 minutes
    60,      # 1 hour
    540,     # 9 hours
    1440,    # 1 day
    2880,    # 2 days
    8640,    # 6 days
    44640,   # 31 days
)

# Past the last rung the ladder extends by doubling it
EXTENDED_INTERVAL = REVIEW_INTERVALS[-1] * 2


# =============================================================================
# PERFORMANCE ADJUSTMENT
# =============================================================================

MIN_INTERVAL_MULTIPLIER = 0.5
MAX_INTERVAL_MULTIPLIER = 2.0

DIFFICULTY_INTERVAL_MULTIPLIER = {
    "easy": 1.1,
    "medium": 1.0,
    "hard": 0.9,
}

# Retention lost on a failed review (percentage points)
FAILURE_RETENTION_PENALTY = 20.0


# =============================================================================
# PRIORITY RANKING
# =============================================================================

DIFFICULTY_PRIORITY_WEIGHT = {
    "easy": 1.0,
    "medium": 1.5,
    "hard": 2.0,
}

OVERDUE_HOUR_WEIGHT = 2.0
RETENTION_DEFICIT_WEIGHT = 0.5
UNDER_REVIEWED_CAP = 5
UNDER_REVIEWED_BONUS = 10.0
