"""
Core Module - Shared domain models and time source.

Components:
- models: MemoryItem, ReviewInterval, Category, Difficulty
- clock: Injectable clock (SystemClock, FixedClock)
- constants: Forgetting-curve, ladder and ranking parameters
"""

from memcurve.core.clock import Clock, FixedClock, SystemClock
from memcurve.core.models import Category, Difficulty, MemoryItem, ReviewInterval

__all__ = [
    # Models
    "Category",
    "Difficulty",
    "MemoryItem",
    "ReviewInterval",
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
]
