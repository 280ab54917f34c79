"""
Organization calendar

Merges three sources into one calendar feed:
- native org calendar events (filtered by visible_to)
- board and committee meetings (admins and board roles only)
- community events (opportunities) that have a date
"""
from typing import Dict, Any, List, Optional

from app.core.roles import BOARD_ROLES

VALID_RSVP_STATUSES = ("attending", "tentative", "declined")


def can_see_org_event(event: Dict[str, Any], role: str, is_admin: bool) -> bool:
    if is_admin:
        return True
    visible_to = event.get("visible_to") or []
    if not visible_to:
        return True
    return role in visible_to


def board_meeting_to_event(meeting: Dict[str, Any]) -> Dict[str, Any]:
    meeting_type = "committee" if meeting.get("type") in ("committee", "cab") else "board"
    agenda = meeting.get("agenda")
    if isinstance(agenda, list):
        description = ", ".join(agenda) if agenda else None
    else:
        description = agenda or None
    meet_link = meeting.get("google_meet_link") or None
    return {
        "id": meeting.get("id"),
        "title": meeting.get("title") or "Board Meeting",
        "description": description,
        "date": meeting.get("date") or "",
        "start_time": meeting.get("time") or "",
        "type": meeting_type,
        "location": "Virtual" if meet_link else None,
        "meet_link": meet_link,
        "rsvps": meeting.get("rsvps") or [],
        "created_by": meeting.get("created_by"),
        "source": "board-meeting",
    }


def opportunity_to_event(opportunity: Dict[str, Any]) -> Dict[str, Any]:
    raw_date = opportunity.get("date") or ""
    return {
        "id": opportunity.get("id"),
        "title": opportunity.get("title") or "Community Event",
        "description": opportunity.get("description") or None,
        "date": raw_date.split("T")[0] if raw_date else "",
        "start_time": opportunity.get("time") or "",
        "type": "community-event",
        "location": opportunity.get("service_location") or None,
        "source": "event-finder",
    }


def _in_window(event_date: str, start: Optional[str], end: Optional[str]) -> bool:
    if start and event_date < start:
        return False
    if end and event_date > end:
        return False
    return True


def merge_calendar(org_events: List[Dict[str, Any]], board_meetings: List[Dict[str, Any]],
                   opportunities: List[Dict[str, Any]], role: str = "", is_admin: bool = False,
                   start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Build the calendar feed a caller is allowed to see

    Args:
        org_events: Stored org calendar events
        board_meetings: Stored board meetings
        opportunities: Stored community events
        role: Caller role
        is_admin: Caller is an admin
        start: Optional inclusive start date (YYYY-MM-DD)
        end: Optional inclusive end date (YYYY-MM-DD)

    Returns:
        Events sorted by date
    """
    merged = [
        {**event, "source": "org-calendar"}
        for event in org_events
        if can_see_org_event(event, role, is_admin)
    ]

    if is_admin or role in BOARD_ROLES:
        merged.extend(board_meeting_to_event(m) for m in board_meetings)

    merged.extend(e for e in (opportunity_to_event(o) for o in opportunities) if e["date"])

    merged = [e for e in merged if _in_window(e.get("date") or "", start, end)]
    merged.sort(key=lambda e: e.get("date") or "")
    return merged


def upsert_rsvp(rsvps: List[Dict[str, Any]], user_id: str, user_name: str,
                status: str, responded_at: str) -> List[Dict[str, Any]]:
    """
    Replace the user's RSVP or append a new one (one RSVP per user)
    """
    entry = {
        "user_id": user_id,
        "user_name": user_name,
        "status": status,
        "responded_at": responded_at,
    }
    updated = [dict(r) for r in rsvps or []]
    for index, existing in enumerate(updated):
        if existing.get("user_id") == user_id:
            updated[index] = entry
            return updated
    updated.append(entry)
    return updated


def summarize_rsvps(rsvps: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = {status: 0 for status in VALID_RSVP_STATUSES}
    for rsvp in rsvps or []:
        status = rsvp.get("status")
        if status in counts:
            counts[status] += 1
    return counts
