"""
Org calendar: event CRUD, visibility, RSVPs and board meetings
"""
import pytest

from app.database import storage


@pytest.fixture
def board_headers():
    return {"X-User-ID": "board-1", "X-User-Role": "Board Member", "X-User-Name": "Bea Board"}


def _create_event(client, headers, **overrides):
    payload = {"title": "All Hands", "date": "2026-11-05", "start_time": "6:00 PM", "type": "all-hands"}
    payload.update(overrides)
    response = client.post("/api/org-calendar", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


def test_create_requires_calendar_role(client, volunteer_headers, coordinator_headers):
    payload = {"title": "Training", "date": "2026-11-05", "start_time": "10:00 AM"}
    assert client.post("/api/org-calendar", json=payload, headers=volunteer_headers).status_code == 403

    event = _create_event(client, coordinator_headers)
    assert event["source"] == "org-calendar"
    assert event["created_by"] == "coord-1"
    assert event["rsvps"] == []


def test_create_rejects_bad_date(client, coordinator_headers):
    response = client.post("/api/org-calendar", json={
        "title": "Training", "date": "11/05/2026", "start_time": "10:00 AM",
    }, headers=coordinator_headers)
    assert response.status_code == 422


def test_visible_to_filters_the_feed(client, volunteer_headers, coordinator_headers, admin_headers):
    _create_event(client, coordinator_headers, title="Everyone")
    _create_event(client, coordinator_headers, title="Leads only", visible_to=["Events Coordinator"])

    def titles(headers):
        return [e["title"] for e in client.get("/api/org-calendar", headers=headers).json()]

    assert titles(volunteer_headers) == ["Everyone"]
    assert sorted(titles(coordinator_headers)) == ["Everyone", "Leads only"]
    assert sorted(titles(admin_headers)) == ["Everyone", "Leads only"]


def test_feed_window_and_sort(client, coordinator_headers):
    _create_event(client, coordinator_headers, title="December", date="2026-12-01")
    _create_event(client, coordinator_headers, title="October", date="2026-10-20")
    _create_event(client, coordinator_headers, title="November", date="2026-11-10")

    everything = client.get("/api/org-calendar", headers=coordinator_headers).json()
    assert [e["title"] for e in everything] == ["October", "November", "December"]

    window = client.get("/api/org-calendar", params={"start": "2026-11-01", "end": "2026-11-30"},
                        headers=coordinator_headers).json()
    assert [e["title"] for e in window] == ["November"]


def test_board_meetings_only_reach_board_roles(client, volunteer_headers, board_headers):
    assert client.post("/api/board/meetings", json={"date": "2026-11-12"},
                       headers=volunteer_headers).status_code == 403

    response = client.post("/api/board/meetings", json={
        "title": "Q4 Board Meeting",
        "date": "2026-11-12",
        "time": "7:00 PM",
        "agenda": ["Budget", "Programs"],
        "google_meet_link": "https://meet.google.com/abc-defg-hij",
    }, headers=board_headers)
    assert response.status_code == 200
    meeting = response.json()

    feed = client.get("/api/org-calendar", headers=board_headers).json()
    merged = [e for e in feed if e["source"] == "board-meeting"]
    assert len(merged) == 1
    assert merged[0]["id"] == meeting["id"]
    assert merged[0]["description"] == "Budget, Programs"
    assert merged[0]["location"] == "Virtual"
    assert merged[0]["type"] == "board"

    volunteer_feed = client.get("/api/org-calendar", headers=volunteer_headers).json()
    assert all(e["source"] != "board-meeting" for e in volunteer_feed)

    assert client.get("/api/board/meetings", headers=volunteer_headers).status_code == 403
    assert len(client.get("/api/board/meetings", headers=board_headers).json()) == 1


def test_update_and_delete(client, coordinator_headers, admin_headers):
    event = _create_event(client, coordinator_headers)

    response = client.put(f"/api/org-calendar/{event['id']}", json={"location": "Community Room"},
                          headers=coordinator_headers)
    assert response.status_code == 200
    assert response.json()["location"] == "Community Room"
    assert response.json()["title"] == "All Hands"
    assert response.json()["updated_at"]

    assert client.put("/api/org-calendar/missing", json={"title": "x"},
                      headers=coordinator_headers).status_code == 404

    assert client.delete(f"/api/org-calendar/{event['id']}", headers=coordinator_headers).status_code == 403
    assert client.delete(f"/api/org-calendar/{event['id']}", headers=admin_headers).json() == {"success": True}
    assert client.delete(f"/api/org-calendar/{event['id']}", headers=admin_headers).status_code == 404


def test_rsvp_is_one_per_user(client, coordinator_headers, volunteer_headers):
    event = _create_event(client, coordinator_headers)
    url = f"/api/org-calendar/{event['id']}/rsvp"

    assert client.post(url, json={"status": "maybe"}, headers=volunteer_headers).status_code == 400
    assert client.post("/api/org-calendar/missing/rsvp", json={"status": "attending"},
                       headers=volunteer_headers).status_code == 404

    client.post(url, json={"status": "attending"}, headers=volunteer_headers)
    client.post(url, json={"status": "tentative"}, headers=coordinator_headers)
    response = client.post(url, json={"status": "declined"}, headers=volunteer_headers)
    assert response.status_code == 200
    rsvps = response.json()["rsvps"]
    assert len(rsvps) == 2
    assert rsvps[0]["user_id"] == "vol-1"
    assert rsvps[0]["status"] == "declined"

    summary = client.get(f"/api/org-calendar/{event['id']}/rsvps", headers=volunteer_headers).json()
    assert summary["attending"] == 0
    assert summary["tentative"] == 1
    assert summary["declined"] == 1


def test_rsvp_to_board_meeting(client, board_headers):
    meeting = client.post("/api/board/meetings", json={"date": "2026-11-12"}, headers=board_headers).json()
    response = client.post(f"/api/org-calendar/{meeting['id']}/rsvp", json={"status": "attending"},
                           headers=board_headers)
    assert response.status_code == 200
    assert response.json()["rsvps"][0]["user_name"] == "Bea Board"


def test_update_cannot_null_required_fields(client, coordinator_headers):
    event = _create_event(client, coordinator_headers)
    url = f"/api/org-calendar/{event['id']}"

    assert client.put(url, json={"title": None}, headers=coordinator_headers).status_code == 422
    assert client.put(url, json={"date": None, "type": None}, headers=coordinator_headers).status_code == 422

    feed = client.get("/api/org-calendar", headers=coordinator_headers)
    assert feed.status_code == 200
    assert [e["title"] for e in feed.json()] == ["All Hands"]


def test_feed_skips_malformed_stored_events(client, coordinator_headers):
    _create_event(client, coordinator_headers, title="Good")
    broken = _create_event(client, coordinator_headers, title="Broken")
    storage.update_record(storage.ORG_CALENDAR_EVENTS, broken["id"], {"title": None})

    feed = client.get("/api/org-calendar", headers=coordinator_headers)
    assert feed.status_code == 200
    assert [e["title"] for e in feed.json()] == ["Good"]


def test_feed_is_empty_when_storage_fails(client, coordinator_headers, monkeypatch):
    _create_event(client, coordinator_headers)

    def unreadable(collection):
        raise OSError("disk unavailable")

    monkeypatch.setattr(storage, "list_records", unreadable)

    response = client.get("/api/org-calendar", headers=coordinator_headers)
    assert response.status_code == 200
    assert response.json() == []
