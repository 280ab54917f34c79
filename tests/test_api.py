"""
API route tests - health check, caller identity and client intake
"""
import json
from pathlib import Path


def test_root(client):
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_missing_user_header_is_400(client):
    response = client.get("/api/clients")
    assert response.status_code == 400
    assert "X-User-ID" in response.json()["detail"]


def test_role_without_intake_access_is_403(client):
    response = client.get("/api/clients", headers={"X-User-ID": "u9", "X-User-Role": "Board Member"})
    assert response.status_code == 403


def test_create_client(client, temp_data_dir, volunteer_headers):
    """Test creating a client and verify the collection file is written"""
    response = client.post("/api/clients/create", json={
        "first_name": "Maria",
        "last_name": "Lopez",
        "dob": "1975-06-01",
        "housing_status": "unhoused",
        "needs": {"food": True},
    }, headers=volunteer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] is not None
    assert data["status"] == "Active"
    assert data["intake_by"] == "vol-1"
    assert data["created_at"]

    client_file = Path(temp_data_dir) / "clients.json"
    assert client_file.exists(), f"Client file should be created at {client_file}"
    with open(client_file, 'r') as f:
        saved = json.load(f)
    assert len(saved) == 1
    assert saved[0]["id"] == data["id"]


def test_create_client_validation(client, volunteer_headers):
    response = client.post("/api/clients/create", json={"first_name": "Maria"}, headers=volunteer_headers)
    assert response.status_code == 422

    response = client.post("/api/clients/create", json={
        "first_name": "Maria", "last_name": "Lopez", "dob": "2999-01-01",
    }, headers=volunteer_headers)
    assert response.status_code == 422


def test_search_by_phone_digits(client, new_client, volunteer_headers):
    created = new_client()
    response = client.post("/api/clients/search", json={"phone": "323-555-0142"}, headers=volunteer_headers)
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_search_by_email_case_insensitive(client, new_client, volunteer_headers):
    created = new_client()
    response = client.post("/api/clients/search", json={"email": "MARIA@Example.com"}, headers=volunteer_headers)
    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


def test_search_multiple_and_none(client, new_client, volunteer_headers):
    new_client()
    new_client(first_name="Mario", phone="555-0000", email="mario@example.com")

    response = client.post("/api/clients/search", json={"name": "lopez"}, headers=volunteer_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["multiple"] is True
    assert len(body["results"]) == 2

    response = client.post("/api/clients/search", json={"email": "nobody@example.com"}, headers=volunteer_headers)
    assert response.status_code == 404


def test_search_requires_criteria(client, volunteer_headers):
    response = client.post("/api/clients/search", json={"phone": "  "}, headers=volunteer_headers)
    assert response.status_code == 400


def test_search_during_shift_is_audited(client, new_client, volunteer_headers, admin_headers):
    new_client()
    client.post("/api/clients/search", json={"phone": "3235550142", "shift_id": "shift-1"},
                headers=volunteer_headers)

    logs = client.get("/api/ops/audit/shift-1", headers=admin_headers).json()
    assert [log["action_type"] for log in logs] == ["CLIENT_SEARCH"]
    assert logs[0]["actor_user_id"] == "vol-1"


def test_update_and_list_clients(client, new_client, volunteer_headers):
    created = new_client()
    new_client(first_name="Sam", last_name="Reyes", phone="555-9999", email="sam@example.com")

    response = client.put(f"/api/clients/{created['id']}", json={"status": "Inactive", "spa": "6"},
                          headers=volunteer_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "Inactive"
    assert response.json()["updated_at"]

    listed = client.get("/api/clients", params={"q": "reyes"}, headers=volunteer_headers).json()
    assert [c["last_name"] for c in listed] == ["Reyes"]

    inactive = client.get("/api/clients", params={"status": "Inactive"}, headers=volunteer_headers).json()
    assert [c["id"] for c in inactive] == [created["id"]]

    assert client.get("/api/clients/missing", headers=volunteer_headers).status_code == 404
    assert client.put("/api/clients/missing", json={"spa": "1"}, headers=volunteer_headers).status_code == 404
