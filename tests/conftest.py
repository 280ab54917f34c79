"""
Shared fixtures: temporary data directory, test client and caller headers
"""
import shutil
import tempfile

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api import rate_limit
from app.database import storage


@pytest.fixture
def temp_data_dir(monkeypatch):
    """Point the document store at a temporary directory"""
    temp_dir = tempfile.mkdtemp()
    monkeypatch.setattr(storage, "DATA_DIR", temp_dir)
    storage.clear_cache()

    yield temp_dir

    storage.clear_cache()
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def client(temp_data_dir):
    """Test client backed by the temporary data directory"""
    rate_limit.PUBLIC_RSVP_LIMITER.clear()
    rate_limit.PUBLIC_CHECKIN_LIMITER.clear()
    return TestClient(app)


def make_headers(user_id: str, role: str = "", name: str = "Test User", admin: bool = False) -> dict:
    headers = {"X-User-ID": user_id, "X-User-Name": name}
    if role:
        headers["X-User-Role"] = role
    if admin:
        headers["X-User-Admin"] = "true"
    return headers


@pytest.fixture
def admin_headers():
    return make_headers("admin-1", name="Ada Admin", admin=True)


@pytest.fixture
def volunteer_headers():
    return make_headers("vol-1", role="Core Volunteer", name="Val Volunteer")


@pytest.fixture
def clinician_headers():
    return make_headers("clin-1", role="Licensed Medical Professional", name="Dr. Cleo")


@pytest.fixture
def coordinator_headers():
    return make_headers("coord-1", role="Events Coordinator", name="Cora Coordinator")


@pytest.fixture
def new_client(client, volunteer_headers):
    """Create a client record and return it"""
    def _create(**overrides):
        payload = {
            "first_name": "Maria",
            "last_name": "Lopez",
            "phone": "(323) 555-0142",
            "email": "maria@example.com",
            **overrides,
        }
        response = client.post("/api/clients/create", json=payload, headers=volunteer_headers)
        assert response.status_code == 200, response.text
        return response.json()
    return _create
