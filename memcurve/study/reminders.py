"""
Review reminder service.

Finds items coming due within a short look-ahead window and hands them to
registered callbacks. Delivery (terminal, email, push) is up to the
callbacks; this module only decides *what* to remind about.

A periodic check runs in a background thread and stops cleanly:
once stop() returns no callback is invoked again.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Callable, Iterable, Optional, Sequence, Union

from loguru import logger

from memcurve.core.clock import Clock, SystemClock
from memcurve.core.models import MemoryItem

ReminderCallback = Callable[[list[MemoryItem]], None]
ItemSource = Union[Sequence[MemoryItem], Callable[[], Iterable[MemoryItem]]]


@dataclass
class ReviewReminderService:
    """
    Reminder fan-out for items about to be due.

    Usage:
        reminders = ReviewReminderService()
        reminders.register_reminder(lambda items: print(len(items)))
        reminders.start_periodic_checks(repository.load_all, interval_ms=60_000)
        # ...
        reminders.stop()

    No de-duplication is done across checks: an item is reported on every
    check while it stays inside the window.
    """

    clock: Clock = field(default_factory=SystemClock)
    lead_minutes: int = 15

    # Internal state
    _callbacks: list[ReminderCallback] = field(default_factory=list, repr=False)
    _thread: Optional[threading.Thread] = field(default=None, repr=False)
    _stop_event: threading.Event = field(default_factory=threading.Event, repr=False)
    _callbacks_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def register_reminder(self, callback: ReminderCallback) -> None:
        with self._callbacks_lock:
            self._callbacks.append(callback)

    def _registered_callbacks(self) -> list[ReminderCallback]:
        """Snapshot of the callbacks; dispatch runs without holding the lock."""
        with self._callbacks_lock:
            return list(self._callbacks)

    def items_to_remind(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """Items whose next review falls in [now, now + lead time]."""
        now = self.clock.now()
        window_end = now + timedelta(minutes=self.lead_minutes)
        return [item for item in items if now <= item.next_review_at <= window_end]

    def check_and_remind(self, items: Iterable[MemoryItem]) -> list[MemoryItem]:
        """
        Notify every callback once with the full list of due-soon items.

        Returns:
            The items that were reported (empty if none, callbacks skipped)
        """
        due_soon = self.items_to_remind(items)
        if not due_soon:
            return []

        for callback in self._registered_callbacks():
            callback(list(due_soon))

        return due_soon

    def start_periodic_checks(
        self,
        items: ItemSource,
        interval_ms: int = 60_000,
    ) -> None:
        """
        Run check_and_remind on a fixed cadence in a background thread.

        Args:
            items: Item sequence, or a zero-argument callable returning the
                current items (e.g. a repository loader) on each check
            interval_ms: Milliseconds between checks
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        if self.is_running:
            logger.warning("Reminder checks already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._check_loop,
            args=(items, interval_ms / 1000),
            name="memcurve-reminders",
            daemon=True,
        )
        self._thread.start()

        logger.info("Reminder checks started (interval: {}ms)", interval_ms)

    def stop(self) -> None:
        """Stop periodic checks; no callback fires after this returns."""
        if self._thread is None:
            return

        self._stop_event.set()

        if self._thread is not threading.current_thread():
            self._thread.join()
            self._thread = None

        logger.info("Reminder checks stopped")

    def _check_loop(self, items: ItemSource, interval_seconds: float) -> None:
        while not self._stop_event.wait(interval_seconds):
            try:
                current = items() if callable(items) else items
                due_soon = self.items_to_remind(current)
                if not due_soon:
                    continue

                for callback in self._registered_callbacks():
                    if self._stop_event.is_set():
                        return
                    callback(list(due_soon))
            except Exception:
                logger.exception("Reminder check failed")
