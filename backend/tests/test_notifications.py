"""
Notification emitter, listing endpoint and realtime registry.

Verifies:
- emit() persists first, then pushes {type, message} to open subscribers
- A failing or closed subscriber does not stop pushes to the others
- An insert failure aborts the emit without pushing anything
- GET /notifications is newest first
"""

import json
import threading
from contextlib import contextmanager
from datetime import datetime

import pytest

from paytrack.extensions import db
from paytrack.models import Notification
from paytrack.services.notification_service import NotificationEmitter
from paytrack.services.realtime import SubscriberRegistry
from paytrack.validation import StorageError, ValidationError

from conftest import FakeSocket, create_customer


class TestSubscriberRegistry:

    def test_broadcast_reaches_every_open_subscriber(self):
        registry = SubscriberRegistry()
        a, b = FakeSocket(), FakeSocket()
        registry.add(a)
        registry.add(b)

        assert registry.broadcast("hello") == 2
        assert a.sent == ["hello"]
        assert b.sent == ["hello"]

    def test_closed_subscribers_are_skipped(self):
        registry = SubscriberRegistry()
        open_ws, closed_ws = FakeSocket(), FakeSocket(connected=False)
        registry.add(open_ws)
        registry.add(closed_ws)

        assert registry.broadcast("hello") == 1
        assert closed_ws.sent == []

    def test_failing_subscriber_does_not_block_others(self):
        registry = SubscriberRegistry()
        broken = FakeSocket(fail=True)
        healthy = [FakeSocket() for _ in range(3)]
        registry.add(broken)
        for ws in healthy:
            registry.add(ws)

        assert registry.broadcast("hello") == 3
        assert all(ws.sent == ["hello"] for ws in healthy)

    def test_discard_removes_subscriber(self):
        registry = SubscriberRegistry()
        ws = FakeSocket()
        registry.add(ws)
        registry.discard(ws)
        registry.discard(ws)
        assert len(registry) == 0
        assert registry.broadcast("hello") == 0

    def test_subscribers_may_connect_during_broadcast(self):
        registry = SubscriberRegistry()
        late = FakeSocket()

        class JoiningSocket(FakeSocket):
            def send(self, data):
                registry.add(late)
                super().send(data)

        registry.add(JoiningSocket())
        assert registry.broadcast("first") == 1
        assert late.sent == []
        assert registry.broadcast("second") == 2
        assert late.sent == ["second"]

    def test_concurrent_connects_and_broadcasts(self):
        registry = SubscriberRegistry()
        sockets = [FakeSocket() for _ in range(50)]
        errors = []

        def connect_all():
            for ws in sockets:
                registry.add(ws)

        def broadcast_many():
            try:
                for _ in range(50):
                    registry.broadcast("tick")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=connect_all), threading.Thread(target=broadcast_many)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(registry) == 50


class _BrokenStorage:
    @contextmanager
    def transaction(self):
        raise StorageError("database is gone")
        yield  # pragma: no cover


class TestNotificationEmitter:

    def test_emit_persists_then_pushes_json(self, app_ctx, components, registry):
        ws = FakeSocket()
        registry.add(ws)

        notification = components.emitter.emit("payment_overdue", "Payment overdue for Customer: Acme (ID: 1)")

        assert notification is not None
        stored = db.session.get(Notification, notification.id)
        assert stored.type == "payment_overdue"
        assert stored.created_at is not None
        assert [json.loads(m) for m in ws.sent] == [
            {"type": "payment_overdue", "message": "Payment overdue for Customer: Acme (ID: 1)"},
        ]

    def test_emit_without_subscribers_still_persists(self, app_ctx, components):
        components.emitter.emit("customer_added", "New customer Acme added successfully")
        assert db.session.query(Notification).count() == 1

    def test_insert_failure_aborts_without_push(self):
        registry = SubscriberRegistry()
        ws = FakeSocket()
        registry.add(ws)
        emitter = NotificationEmitter(_BrokenStorage(), registry)

        assert emitter.emit("customer_added", "x") is None
        assert ws.sent == []

    def test_unknown_type_is_rejected(self, app_ctx, components):
        with pytest.raises(ValidationError):
            components.emitter.emit("something_else", "x")

    def test_http_create_pushes_to_connected_subscriber(self, client, registry):
        ws = FakeSocket()
        registry.add(ws)

        create_customer(client, name="Hooli")

        assert [json.loads(m) for m in ws.sent] == [
            {"type": "customer_added", "message": "New customer Hooli added successfully"},
        ]


class TestListNotifications:

    def test_newest_first(self, client, app):
        with app.app_context():
            db.session.add_all([
                Notification(type="customer_added", message="old", created_at=datetime(2024, 1, 1)),
                Notification(type="payment_received", message="new", created_at=datetime(2024, 6, 1)),
                Notification(type="payment_overdue", message="middle", created_at=datetime(2024, 3, 1)),
            ])
            db.session.commit()

        resp = client.get('/notifications')
        assert resp.status_code == 200
        data = resp.get_json()
        assert [n["message"] for n in data] == ["new", "middle", "old"]
        assert data[0]["createdAt"] == "2024-06-01T00:00:00Z"
        assert set(data[0]) == {"id", "type", "message", "createdAt"}

    def test_limit(self, client, app):
        with app.app_context():
            for i in range(5):
                db.session.add(Notification(type="customer_added", message=str(i), created_at=datetime(2024, 1, i + 1)))
            db.session.commit()

        data = client.get('/notifications?limit=2').get_json()
        assert [n["message"] for n in data] == ["4", "3"]


class TestRealtimeRoute:

    def test_socket_is_registered_until_it_closes(self, app_ctx, registry):
        from paytrack.routes.realtime import subscribe

        class ClientSocket(FakeSocket):
            seen = None

            def receive(self, timeout=None):
                self.seen = len(registry)
                self.connected = False
                return "client frames are ignored"

        ws = ClientSocket()
        subscribe(ws)

        assert ws.seen == 1
        assert len(registry) == 0

    def test_websocket_route_is_mounted_at_base_path(self, app):
        rules = [r for r in app.url_map.iter_rules() if r.rule == "/"]
        assert len(rules) == 1
        assert rules[0].websocket is True
