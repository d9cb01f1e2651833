"""
Pytest fixtures for paytrack backend tests.

Provides an in-memory SQLite app, a per-test table wipe, the test client,
auth helpers and small builders for uploads and fake websocket handles.
"""

import io

import pytest
from openpyxl import Workbook

from paytrack import create_app
from paytrack.components import get_components
from paytrack.extensions import db


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_ENGINE_OPTIONS': {},
    'SECRET_KEY': 'test-secret-key-0123456789abcdefghij',
    'JWT_SECRET_KEY': 'test-secret-key-0123456789abcdefghij',
    'OVERDUE_SCANNER_ENABLED': False,
    'API_AUTH_REQUIRED': False,
}

HEADERS = ["Name", "Contact", "Outstanding Amount", "Due Date", "Payment Status"]


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(autouse=True)
def clean_db(app):
    """Clear all data but keep schema."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
    yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def components(app):
    return get_components(app)


@pytest.fixture
def registry(components):
    """The app's live subscriber registry, emptied after the test."""
    yield components.registry
    for handle in components.registry.snapshot():
        components.registry.discard(handle)


@pytest.fixture
def auth_required(app, monkeypatch):
    monkeypatch.setitem(app.config, 'API_AUTH_REQUIRED', True)


class FakeSocket:
    """Stand-in for a simple_websocket.Server handle."""

    def __init__(self, connected=True, fail=False):
        self.connected = connected
        self.fail = fail
        self.sent = []

    def send(self, data):
        if self.fail:
            raise ConnectionResetError("connection reset by peer")
        self.sent.append(data)


def make_xlsx(rows, headers=HEADERS) -> io.BytesIO:
    wb = Workbook()
    sheet = wb.active
    sheet.append(headers)
    for row in rows:
        sheet.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


def customer_payload(**overrides) -> dict:
    payload = {
        "name": "Acme",
        "contact": "555-0100",
        "outstandingAmount": 500,
        "dueDate": "2020-01-01",
        "paymentStatus": "Pending",
    }
    payload.update(overrides)
    return payload


def create_customer(client, **overrides) -> int:
    resp = client.post('/customers', json=customer_payload(**overrides))
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["id"]


def register_and_login(client, email="ops@example.com", password="s3cret-pass") -> str:
    client.post('/register', json={"name": "Ops", "email": email, "password": password})
    resp = client.post('/login', json={"email": email, "password": password})
    return resp.get_json().get("token")


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
