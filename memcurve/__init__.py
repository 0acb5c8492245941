"""
memcurve - forgetting-curve review scheduling.

Predicts how much of each memorized item the learner still retains,
decides when it should be reviewed next and ranks overdue content.
"""

__version__ = "1.0.0"
