"""
Memory Repository - Whole-item persistence for the review engine.

The scheduler hands back complete item values; this repository stores and
loads them as a unit (item row plus its full review log). Category rows
carry cached statistics that are recomputed after every item write.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy import Engine, delete, or_, select, update
from sqlalchemy.orm import Session, selectinload

from memcurve.core.models import Category, MemoryItem, ReviewInterval
from memcurve.db.database import get_engine, init_db, session_scope
from memcurve.db.models import CategoryRecord, MemoryItemRecord, ReviewIntervalRecord
from memcurve.study.categories import DEFAULT_CATEGORIES, UNCATEGORIZED, compute_category_stats

BACKUP_VERSION = "1.0.0"


class BackupPayload(BaseModel):
    """JSON backup of all items and categories."""

    items: list[MemoryItem] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    exported_at: datetime
    version: str = BACKUP_VERSION


# ========================================
# Row <-> domain conversion
# ========================================


def _to_domain(record: MemoryItemRecord) -> MemoryItem:
    return MemoryItem(
        id=record.id,
        content=record.content,
        category=record.category,
        difficulty=record.difficulty,
        created_at=record.created_at,
        next_review_at=record.next_review_at,
        retention_rate=record.retention_rate,
        review_count=record.review_count,
        last_reviewed_at=record.last_reviewed_at,
        intervals=[
            ReviewInterval(
                interval=row.interval,
                scheduled_time=row.scheduled_time,
                actual_time=row.actual_time,
                success=row.success,
                retention_before=row.retention_before,
                retention_after=row.retention_after,
            )
            for row in record.intervals
        ],
    )


def _interval_rows(item: MemoryItem) -> list[ReviewIntervalRecord]:
    return [
        ReviewIntervalRecord(
            position=position,
            interval=entry.interval,
            scheduled_time=entry.scheduled_time,
            actual_time=entry.actual_time,
            success=entry.success,
            retention_before=entry.retention_before,
            retention_after=entry.retention_after,
        )
        for position, entry in enumerate(item.intervals)
    ]


def _category_to_domain(record: CategoryRecord) -> Category:
    return Category(
        id=record.id,
        name=record.name,
        color=record.color,
        item_count=record.item_count,
        average_retention=record.average_retention,
    )


class MemoryRepository:
    """
    SQLAlchemy-backed item and category store.

    Usage:
        repo = MemoryRepository()
        repo.save(item)
        items = repo.load_all()
    """

    def __init__(self, engine: Optional[Engine] = None, create_tables: bool = True):
        self.engine = engine or get_engine()
        if create_tables:
            init_db(self.engine)

    # ========================================
    # Items
    # ========================================

    def load_all(self) -> list[MemoryItem]:
        with session_scope(self.engine) as session:
            records = session.scalars(
                select(MemoryItemRecord)
                .options(selectinload(MemoryItemRecord.intervals))
                .order_by(MemoryItemRecord.created_at, MemoryItemRecord.id)
            ).all()
            return [_to_domain(record) for record in records]

    def get(self, item_id: str) -> Optional[MemoryItem]:
        with session_scope(self.engine) as session:
            record = session.get(MemoryItemRecord, item_id)
            return _to_domain(record) if record else None

    def save(self, item: MemoryItem) -> None:
        """Insert or fully replace an item, including its review log."""
        with session_scope(self.engine) as session:
            self._write_item(session, item)

        logger.debug("Saved item {} ({} intervals)", item.id, len(item.intervals))

    def save_all(self, items: list[MemoryItem]) -> None:
        with session_scope(self.engine) as session:
            for item in items:
                self._write_item(session, item)

    def _write_item(self, session: Session, item: MemoryItem) -> None:
        record = session.get(MemoryItemRecord, item.id)
        previous_category = record.category if record else None

        if record is None:
            record = MemoryItemRecord(id=item.id)
            session.add(record)

        record.content = item.content
        record.category = item.category
        record.difficulty = item.difficulty.value
        record.created_at = item.created_at
        record.next_review_at = item.next_review_at
        record.retention_rate = item.retention_rate
        record.review_count = item.review_count
        record.last_reviewed_at = item.last_reviewed_at
        record.intervals = _interval_rows(item)
        session.flush()

        self._refresh_category(session, item.category)
        if previous_category and previous_category != item.category:
            self._refresh_category(session, previous_category)

    def delete(self, item_id: str) -> bool:
        """Delete an item; returns False if it did not exist."""
        with session_scope(self.engine) as session:
            record = session.get(MemoryItemRecord, item_id)
            if record is None:
                return False

            category = record.category
            session.delete(record)
            session.flush()
            self._refresh_category(session, category)

        logger.debug("Deleted item {}", item_id)
        return True

    def search(self, query: str = "", category: Optional[str] = None) -> list[MemoryItem]:
        """Case-insensitive substring search over content and category."""
        statement = select(MemoryItemRecord).options(selectinload(MemoryItemRecord.intervals))

        if category and category != "all":
            statement = statement.where(MemoryItemRecord.category == category)

        if query.strip():
            pattern = f"%{query.strip().lower()}%"
            statement = statement.where(
                or_(
                    MemoryItemRecord.content.ilike(pattern),
                    MemoryItemRecord.category.ilike(pattern),
                )
            )

        with session_scope(self.engine) as session:
            records = session.scalars(statement.order_by(MemoryItemRecord.created_at)).all()
            return [_to_domain(record) for record in records]

    def get_items_to_review(self, now: datetime) -> list[MemoryItem]:
        with session_scope(self.engine) as session:
            records = session.scalars(
                select(MemoryItemRecord)
                .options(selectinload(MemoryItemRecord.intervals))
                .where(MemoryItemRecord.next_review_at <= now)
                .order_by(MemoryItemRecord.next_review_at)
            ).all()
            return [_to_domain(record) for record in records]

    # ========================================
    # Categories
    # ========================================

    def get_categories(self) -> list[Category]:
        """All categories; seeds the defaults on first use."""
        with session_scope(self.engine) as session:
            records = session.scalars(select(CategoryRecord).order_by(CategoryRecord.name)).all()
            if not records:
                for default in DEFAULT_CATEGORIES:
                    session.add(
                        CategoryRecord(id=default.id, name=default.name, color=default.color)
                    )
                session.flush()
                records = session.scalars(select(CategoryRecord).order_by(CategoryRecord.name)).all()
            return [_category_to_domain(record) for record in records]

    def save_category(self, category: Category) -> None:
        with session_scope(self.engine) as session:
            record = session.get(CategoryRecord, category.id)
            if record is None:
                record = CategoryRecord(id=category.id)
                session.add(record)
            record.name = category.name
            record.color = category.color
            session.flush()
            self._refresh_category(session, category.id)

    def delete_category(self, category_id: str) -> None:
        """Remove a category and move its items to 'uncategorized'."""
        with session_scope(self.engine) as session:
            session.execute(delete(CategoryRecord).where(CategoryRecord.id == category_id))
            session.execute(
                update(MemoryItemRecord)
                .where(MemoryItemRecord.category == category_id)
                .values(category=UNCATEGORIZED)
            )
        logger.info("Deleted category {}", category_id)

    def update_category_stats(self, category_id: str) -> Optional[Category]:
        with session_scope(self.engine) as session:
            return self._refresh_category(session, category_id)

    def _refresh_category(self, session: Session, category_id: str) -> Optional[Category]:
        record = session.get(CategoryRecord, category_id)
        if record is None:
            return None

        members = session.scalars(
            select(MemoryItemRecord)
            .options(selectinload(MemoryItemRecord.intervals))
            .where(MemoryItemRecord.category == category_id)
        ).all()
        stats = compute_category_stats(
            _category_to_domain(record), [_to_domain(member) for member in members]
        )

        record.item_count = stats.item_count
        record.average_retention = stats.average_retention
        return stats

    # ========================================
    # Backup
    # ========================================

    def export_data(self, now: Optional[datetime] = None) -> str:
        payload = BackupPayload(
            items=self.load_all(),
            categories=self.get_categories(),
            exported_at=now or datetime.now(),
        )
        return payload.model_dump_json(indent=2)

    def import_data(self, json_data: str) -> int:
        """
        Replace all stored items and categories with a backup.

        Runs in one transaction: if any write fails the store is left as
        it was.

        Raises:
            pydantic.ValidationError: If the payload is malformed
        """
        payload = BackupPayload.model_validate_json(json_data)

        with session_scope(self.engine) as session:
            self._clear(session)
            for category in payload.categories:
                session.add(
                    CategoryRecord(
                        id=category.id,
                        name=category.name,
                        color=category.color,
                        item_count=category.item_count,
                        average_retention=category.average_retention,
                    )
                )
            session.flush()

            for item in payload.items:
                self._write_item(session, item)

        logger.info(
            "Imported {} items and {} categories (backup version {})",
            len(payload.items),
            len(payload.categories),
            payload.version,
        )
        return len(payload.items)

    def clear_all(self) -> None:
        with session_scope(self.engine) as session:
            self._clear(session)

    def _clear(self, session: Session) -> None:
        session.execute(delete(ReviewIntervalRecord))
        session.execute(delete(MemoryItemRecord))
        session.execute(delete(CategoryRecord))
