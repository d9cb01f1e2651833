# Overview: Recurring background scan that notifies about overdue customers.

"""
Overdue Scanner

Every OVERDUE_SCAN_INTERVAL_SECONDS the scanner selects customers whose
paymentStatus is "Pending" and whose due date has passed, and emits one
"payment_overdue" notification per match.

- A failed query skips the tick; the next tick starts from current data.
- Each match is emitted independently; a failure is logged and the
  remaining matches are still processed.
- There is no suppression window: a customer keeps being reported on
  every tick until its status changes.
"""

from __future__ import annotations

import logging
import threading

from flask import Flask
from sqlalchemy import select

from ..models import Customer, NOTIFICATION_PAYMENT_OVERDUE, STATUS_PENDING
from ..validation import StorageError
from paytrack.time_utils import utctoday
from .notification_service import NotificationEmitter
from .storage import Storage


logger = logging.getLogger(__name__)


def overdue_message(customer_id: int, name: str) -> str:
    return f"Payment overdue for Customer: {name} (ID: {customer_id})"


def find_overdue_customers(storage: Storage) -> list[dict]:
    # A due date means midnight of that day, so it has passed once the day begins
    stmt = (
        select(Customer.id, Customer.name)
        .where(Customer.payment_status == STATUS_PENDING)
        .where(Customer.due_date <= utctoday())
        .order_by(Customer.id)
    )
    return storage.execute(stmt)


class OverdueScanner:
    def __init__(
        self,
        app: Flask,
        storage: Storage,
        emitter: NotificationEmitter,
        interval_seconds: float = 3600,
    ):
        self.app = app
        self.storage = storage
        self.emitter = emitter
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def scan_once(self) -> int:
        """
        Run one tick. Must be called inside an app context.

        Returns the number of notifications persisted.
        """
        try:
            matches = find_overdue_customers(self.storage)
        except StorageError:
            logger.exception("Overdue payment check failed; skipping this tick")
            return 0

        emitted = 0
        for row in matches:
            try:
                notification = self.emitter.emit(
                    NOTIFICATION_PAYMENT_OVERDUE,
                    overdue_message(row["id"], row["name"]),
                )
            except Exception:
                logger.exception("Overdue notification failed for customer %s", row["id"])
                continue
            if notification is not None:
                emitted += 1

        if matches:
            logger.info("Overdue scan: %d match(es), %d notification(s) stored", len(matches), emitted)
        return emitted

    def _tick(self) -> None:
        with self.app.app_context():
            self.scan_once()

    def _run(self) -> None:
        # First scan happens one full interval after start
        while not self._stop.wait(self.interval_seconds):
            try:
                self._tick()
            except Exception:
                logger.exception("Overdue scanner tick crashed")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="overdue-scanner", daemon=True)
        self._thread.start()
        logger.info("Overdue scanner started (interval=%ss)", self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Overdue scanner stopped")
