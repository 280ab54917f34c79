"""
Organization calendar endpoints

Native org events, board meetings and community events merged into one
feed, plus RSVP tracking for org events and board meetings.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from app.core.roles import ORG_CALENDAR_ROLES, BOARD_ROLES
from app.database import storage as database
from app.database.schemas import (
    OrgCalendarEvent,
    OrgCalendarEventInput,
    OrgCalendarEventUpdate,
    CalendarRsvpRequest,
    CalendarRsvpResponse,
    CalendarRsvpSummary,
    BoardMeetingInput,
)
from app.api.utils import get_current_user, require_admin, require_role
from app.services.calendar import merge_calendar, upsert_rsvp, summarize_rsvps, VALID_RSVP_STATUSES
from app.services.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


def _as_calendar_event(event: dict) -> Optional[OrgCalendarEvent]:
    try:
        return OrgCalendarEvent.model_validate(event)
    except ValidationError as exc:
        logger.warning(f"[ORG-CALENDAR] Skipping malformed event {event.get('id')}: {exc.error_count()} errors")
        return None


@router.get("/org-calendar", response_model=List[OrgCalendarEvent])
async def get_org_calendar(request: Request, start: Optional[str] = None, end: Optional[str] = None):
    """
    Merged calendar feed for the caller

    Returns an empty list when a source cannot be read, the calendar is
    polled and should never break the page. Records that no longer fit the
    calendar shape are skipped.
    """
    actor = get_current_user(request)
    try:
        merged = merge_calendar(
            database.list_records(database.ORG_CALENDAR_EVENTS),
            database.list_records(database.BOARD_MEETINGS),
            database.list_records(database.OPPORTUNITIES),
            role=actor.role,
            is_admin=actor.is_admin,
            start=start,
            end=end,
        )
        return [event for event in (_as_calendar_event(e) for e in merged) if event is not None]
    except Exception as e:
        logger.error(f"[ORG-CALENDAR] GET failed: {str(e)}", exc_info=True)
        return []


@router.post("/org-calendar", response_model=OrgCalendarEvent)
async def create_calendar_event(event: OrgCalendarEventInput, request: Request):
    actor = get_current_user(request)
    require_role(actor, ORG_CALENDAR_ROLES,
                 detail="Only admins, coordinators, and leads can create calendar events")

    stored = database.insert_record(database.ORG_CALENDAR_EVENTS, {
        **event.model_dump(),
        "rsvps": [],
        "created_by": actor.user_id,
        "created_at": utc_now_iso(),
        "source": "org-calendar",
    })
    logger.info(f"[ORG-CALENDAR] Created event {stored['id']} on {stored['date']}")
    return stored


@router.put("/org-calendar/{event_id}", response_model=OrgCalendarEvent)
async def update_calendar_event(event_id: str, updates: OrgCalendarEventUpdate, request: Request):
    """
    Update an org event (id and source cannot change)
    """
    actor = get_current_user(request)
    require_role(actor, ORG_CALENDAR_ROLES,
                 detail="Only admins, coordinators, and leads can update calendar events")

    existing = database.get_record(database.ORG_CALENDAR_EVENTS, event_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Event not found")

    changes = {**updates.model_dump(exclude_unset=True), "updated_at": utc_now_iso()}
    try:
        OrgCalendarEvent.model_validate({**existing, **changes})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    return database.update_record(database.ORG_CALENDAR_EVENTS, event_id, changes)


@router.delete("/org-calendar/{event_id}")
async def delete_calendar_event(event_id: str, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can delete calendar events")

    if not database.delete_record(database.ORG_CALENDAR_EVENTS, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True}


@router.post("/org-calendar/{event_id}/rsvp", response_model=CalendarRsvpResponse)
async def rsvp_calendar_event(event_id: str, body: CalendarRsvpRequest, request: Request):
    """
    RSVP to an org event or board meeting (one RSVP per user)
    """
    actor = get_current_user(request)
    if body.status not in VALID_RSVP_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid RSVP status")

    collection = database.ORG_CALENDAR_EVENTS
    event = database.get_record(collection, event_id)
    if not event:
        collection = database.BOARD_MEETINGS
        event = database.get_record(collection, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    rsvps = upsert_rsvp(event.get("rsvps") or [], actor.user_id, actor.display_name, body.status, utc_now_iso())
    database.update_record(collection, event_id, {"rsvps": rsvps})
    return {"success": True, "rsvps": rsvps}


@router.get("/org-calendar/{event_id}/rsvps", response_model=CalendarRsvpSummary)
async def get_calendar_rsvps(event_id: str, request: Request):
    get_current_user(request)
    event = (database.get_record(database.ORG_CALENDAR_EVENTS, event_id)
             or database.get_record(database.BOARD_MEETINGS, event_id))
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    rsvps = event.get("rsvps") or []
    return {"event_id": event_id, **summarize_rsvps(rsvps), "rsvps": rsvps}


@router.get("/board/meetings")
async def list_board_meetings(request: Request):
    actor = get_current_user(request)
    require_role(actor, BOARD_ROLES, detail="Only admins and board members can view board meetings")

    meetings = database.list_records(database.BOARD_MEETINGS)
    meetings.sort(key=lambda m: m.get("date") or "")
    return meetings


@router.post("/board/meetings")
async def create_board_meeting(meeting: BoardMeetingInput, request: Request):
    actor = get_current_user(request)
    require_role(actor, BOARD_ROLES, detail="Only admins and board members can schedule board meetings")

    return database.insert_record(database.BOARD_MEETINGS, {
        **meeting.model_dump(),
        "rsvps": [],
        "created_by": actor.user_id,
        "created_at": utc_now_iso(),
    })
