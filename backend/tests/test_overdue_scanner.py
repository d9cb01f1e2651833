"""
Overdue scanner.

Verifies:
- A Pending customer past due produces one payment_overdue row per tick
- Completed and not-yet-due customers are ignored
- A failed query skips the tick; a failed emit does not stop the others
- The background thread ticks on its interval and stops cleanly
"""

import json
import threading
from datetime import timedelta

from paytrack.extensions import db
from paytrack.models import Notification
from paytrack.services import overdue_scanner
from paytrack.services.overdue_scanner import OverdueScanner
from paytrack.time_utils import utctoday
from paytrack.validation import StorageError

from conftest import FakeSocket, create_customer


def _overdue_rows():
    return (
        db.session.query(Notification)
        .filter_by(type="payment_overdue")
        .order_by(Notification.id)
        .all()
    )


def test_acme_scenario(client, app, components):
    customer_id = create_customer(
        client,
        name="Acme",
        contact="555-0100",
        outstandingAmount=500,
        dueDate="2020-01-01",
        paymentStatus="Pending",
    )

    with app.app_context():
        assert components.scanner.scan_once() == 1
        rows = _overdue_rows()
        assert len(rows) == 1
        assert "Acme" in rows[0].message
        assert rows[0].message == f"Payment overdue for Customer: Acme (ID: {customer_id})"


def test_repeats_every_tick_while_still_pending(client, app, components):
    create_customer(client, dueDate="2020-01-01")

    with app.app_context():
        for _ in range(3):
            assert components.scanner.scan_once() == 1
        assert len(_overdue_rows()) == 3


def test_paid_customer_stops_being_reported(client, app, components):
    customer_id = create_customer(client, dueDate="2020-01-01")

    with app.app_context():
        assert components.scanner.scan_once() == 1

    client.post('/payments', json={"customerId": customer_id, "amount": 500})

    with app.app_context():
        assert components.scanner.scan_once() == 0
        assert len(_overdue_rows()) == 1


def test_only_pending_and_past_due_match(client, app, components):
    future = (utctoday() + timedelta(days=30)).isoformat()
    create_customer(client, name="Late", dueDate="2021-05-05", paymentStatus="Pending")
    create_customer(client, name="Paid", dueDate="2021-05-05", paymentStatus="Completed")
    create_customer(client, name="Early", dueDate=future, paymentStatus="Pending")

    with app.app_context():
        assert components.scanner.scan_once() == 1
        assert "Late" in _overdue_rows()[0].message


def test_due_today_counts_as_overdue(client, app, components):
    create_customer(client, name="Today", dueDate=utctoday().isoformat())

    with app.app_context():
        assert components.scanner.scan_once() == 1


def test_overdue_push_reaches_subscribers(client, app, components, registry):
    create_customer(client, name="Acme", dueDate="2020-01-01")
    ws = FakeSocket()
    registry.add(ws)

    with app.app_context():
        components.scanner.scan_once()

    assert json.loads(ws.sent[-1])["type"] == "payment_overdue"


def test_query_failure_skips_tick(app, components, monkeypatch):
    def broken(storage):
        raise StorageError("lost connection")

    monkeypatch.setattr(overdue_scanner, "find_overdue_customers", broken)

    with app.app_context():
        assert components.scanner.scan_once() == 0
        assert _overdue_rows() == []


class _FlakyEmitter:
    def __init__(self):
        self.messages = []

    def emit(self, type, message):
        if "First" in message:
            raise RuntimeError("boom")
        self.messages.append(message)
        return object()


def test_one_failed_emit_does_not_stop_the_rest(client, app, components):
    create_customer(client, name="First", dueDate="2020-01-01")
    create_customer(client, name="Second", dueDate="2020-01-02")
    create_customer(client, name="Third", dueDate="2020-01-03")

    emitter = _FlakyEmitter()
    scanner = OverdueScanner(app, components.storage, emitter, interval_seconds=3600)

    with app.app_context():
        assert scanner.scan_once() == 2
    assert len(emitter.messages) == 2
    assert "Second" in emitter.messages[0]
    assert "Third" in emitter.messages[1]


def test_background_thread_ticks_and_stops(app, components, monkeypatch):
    ticked = threading.Event()
    scanner = OverdueScanner(app, components.storage, components.emitter, interval_seconds=0.01)
    monkeypatch.setattr(scanner, "scan_once", lambda: ticked.set() or 0)

    scanner.start()
    try:
        assert scanner.running
        assert ticked.wait(2.0)
    finally:
        scanner.stop()

    assert not scanner.running


def test_start_is_idempotent(app, components):
    scanner = OverdueScanner(app, components.storage, components.emitter, interval_seconds=3600)
    scanner.start()
    first = scanner._thread
    scanner.start()
    try:
        assert scanner._thread is first
    finally:
        scanner.stop()


def test_scanner_is_not_started_in_tests(components):
    assert components.scanner.running is False
