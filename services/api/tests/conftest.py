"""
Shared fixtures: an in-memory spreadsheet backend and a test app.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from core.errors import UpstreamUnavailable, UpstreamWriteFailed
from main import create_app
from settings import Settings

HEADERS = ["Fase", "Jogo", "Confronto", "Data", "Dia", "Horário", "Quadra"]
ROW = ["FINAL", "Jogo 1", "A vs B", "2024-05-01", "Quarta", "19:00", "Saibro"]

PASSWORD = "segredo-123"


class FakeBackend:
    """Stands in for SheetsBackend; records every call."""

    def __init__(self, rows=None):
        self.rows = [list(r) for r in (rows if rows is not None else [HEADERS, ROW])]
        self.read_calls = 0
        self.appended = []
        self.updated = []
        self.fail_reads = False
        self.write_status = None

    def read_range(self):
        self.read_calls += 1
        if self.fail_reads:
            raise UpstreamUnavailable(detail="connection refused")
        return [list(r) for r in self.rows]

    def append_row(self, values):
        if self.write_status is not None:
            raise UpstreamWriteFailed.from_status(self.write_status, detail="upstream said no")
        self.appended.append(list(values))
        self.rows.append(list(values))
        return len(values)

    def update_row(self, row_index, values):
        if self.write_status is not None:
            raise UpstreamWriteFailed.from_status(self.write_status, detail="upstream said no")
        self.updated.append((row_index, list(values)))
        self.rows[row_index - 1] = list(values)
        return len(values)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        sheets_spreadsheet_id="test-sheet",
        auth_password=PASSWORD,
        cache_max_age_seconds=5,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings, backend):
    return create_app(settings=settings, backend=backend)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def token(client):
    resp = client.post("/api/auth", json={"password": PASSWORD})
    assert resp.status_code == 200
    return resp.json()["token"]


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}
