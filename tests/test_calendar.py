"""
Calendar merge visibility, RSVP upsert and RSVP statistics
"""
from app.services.calendar import merge_calendar, upsert_rsvp, summarize_rsvps
from app.services.rsvp_stats import build_rsvp_stats

ORG_EVENTS = [
    {"id": "e1", "title": "All Hands", "date": "2026-04-02", "start_time": "6:00 PM", "type": "all-hands"},
    {"id": "e2", "title": "Leads Sync", "date": "2026-03-20", "start_time": "9:00 AM", "type": "committee",
     "visible_to": ["Events Lead"]},
]
BOARD_MEETINGS = [
    {"id": "b1", "title": "Q2 Board", "date": "2026-03-25", "time": "5:00 PM", "type": "board",
     "agenda": ["Budget", "Elections"], "google_meet_link": "https://meet.example/abc"},
    {"id": "b2", "date": "2026-03-28", "type": "cab"},
]
OPPORTUNITIES = [
    {"id": "o1", "title": "Health Fair", "date": "2026-03-22T00:00:00.000Z", "time": "10:00 AM",
     "service_location": "MLK Park"},
    {"id": "o2", "title": "Undated Drive"},
]


def test_volunteer_sees_open_events_and_community_events():
    merged = merge_calendar(ORG_EVENTS, BOARD_MEETINGS, OPPORTUNITIES, role="Core Volunteer")
    assert [e["id"] for e in merged] == ["o1", "e1"]
    assert merged[0]["date"] == "2026-03-22"
    assert merged[0]["type"] == "community-event"
    assert merged[0]["source"] == "event-finder"


def test_role_listed_in_visible_to_sees_restricted_event():
    merged = merge_calendar(ORG_EVENTS, [], [], role="Events Lead")
    assert {e["id"] for e in merged} == {"e1", "e2"}


def test_board_member_sees_board_meetings():
    merged = merge_calendar([], BOARD_MEETINGS, [], role="Board Member")
    board = {e["id"]: e for e in merged}
    assert board["b1"]["type"] == "board"
    assert board["b1"]["location"] == "Virtual"
    assert board["b1"]["description"] == "Budget, Elections"
    assert board["b1"]["start_time"] == "5:00 PM"
    assert board["b2"]["type"] == "committee"
    assert board["b2"]["title"] == "Board Meeting"
    assert board["b2"]["location"] is None


def test_admin_sees_everything_sorted_by_date():
    merged = merge_calendar(ORG_EVENTS, BOARD_MEETINGS, OPPORTUNITIES, is_admin=True)
    assert [e["date"] for e in merged] == sorted(e["date"] for e in merged)
    assert len(merged) == 5


def test_date_window_is_inclusive():
    merged = merge_calendar(ORG_EVENTS, BOARD_MEETINGS, OPPORTUNITIES, is_admin=True,
                            start="2026-03-22", end="2026-03-28")
    assert [e["id"] for e in merged] == ["o1", "b1", "b2"]


def test_upsert_rsvp_keeps_one_entry_per_user():
    rsvps = upsert_rsvp([], "u1", "Uma", "tentative", "2026-03-01T00:00:00+00:00")
    rsvps = upsert_rsvp(rsvps, "u2", "Ben", "attending", "2026-03-01T01:00:00+00:00")
    rsvps = upsert_rsvp(rsvps, "u1", "Uma", "attending", "2026-03-02T00:00:00+00:00")
    assert len(rsvps) == 2
    assert rsvps[0]["status"] == "attending"
    assert summarize_rsvps(rsvps) == {"attending": 2, "tentative": 0, "declined": 0}


def test_rsvp_stats():
    event = {"id": "o1", "title": "Health Fair", "date": "2026-03-22", "rsvp_count": 0}
    rsvps = [
        {"guests": 2, "needs": "Food, Housing", "source": "client-portal", "checked_in": True},
        {"guests": 0, "needs": "Food", "source": "client-portal", "checked_in": False},
        {"guests": 1, "needs": "", "checked_in": False},
    ]
    stats = build_rsvp_stats(event, rsvps)
    assert stats["total_rsvps"] == 3
    assert stats["total_guests"] == 3
    assert stats["total_expected_attendees"] == 6
    assert stats["estimated_attendance"] == 4
    assert stats["checked_in_count"] == 3
    assert stats["check_in_rate"] == 50
    assert stats["needs_breakdown"] == {"Food": 2, "Housing": 1}
    assert stats["source_breakdown"] == {"client-portal": 2, "unknown": 1}
    assert stats["rsvp_count"] == 6


def test_rsvp_stats_without_rsvps():
    stats = build_rsvp_stats({"id": "o1"}, [])
    assert stats["event_title"] == "Unknown Event"
    assert stats["check_in_rate"] == 0
    assert stats["estimated_attendance"] == 0
