"""
Table models for memorized content.

An item row owns its review log; the log keeps insertion order through an
explicit position column and is only ever appended to by the scheduler.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class MemoryItemRecord(Base):
    """One memorized item with its current scheduling state."""

    __tablename__ = "memory_items"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    difficulty: Mapped[str] = mapped_column(Text, nullable=False)  # easy | medium | hard
    created_at: Mapped[datetime] = mapped_column(nullable=False)
    next_review_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
    retention_rate: Mapped[float] = mapped_column(Float, default=100.0)
    review_count: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed_at: Mapped[datetime | None] = mapped_column()

    # Relationships
    intervals: Mapped[list[ReviewIntervalRecord]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="ReviewIntervalRecord.position",
    )


class ReviewIntervalRecord(Base):
    """One planned or attempted review of an item."""

    __tablename__ = "review_intervals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(
        ForeignKey("memory_items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    interval: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    scheduled_time: Mapped[datetime] = mapped_column(nullable=False)
    actual_time: Mapped[datetime | None] = mapped_column()
    success: Mapped[bool] = mapped_column(Boolean, default=False)
    retention_before: Mapped[float] = mapped_column(Float, default=100.0)
    retention_after: Mapped[float] = mapped_column(Float, default=100.0)

    item: Mapped[MemoryItemRecord] = relationship(back_populates="intervals")


class CategoryRecord(Base):
    """Category with cached aggregate statistics."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    color: Mapped[str | None] = mapped_column(Text)
    item_count: Mapped[int] = mapped_column(Integer, default=0)
    average_retention: Mapped[float] = mapped_column(Float, default=0.0)
