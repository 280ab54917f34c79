"""
Client portal endpoints (no identity headers required)

Upcoming public events, RSVP and event-day check-in.
"""
import logging
import secrets
from typing import List

from fastapi import APIRouter, HTTPException, Request

from app.api.rate_limit import PUBLIC_CHECKIN_LIMITER, PUBLIC_RSVP_LIMITER, enforce_rate_limit
from app.database import storage as database
from app.database.schemas import (
    PublicEvent,
    PublicRsvpRequest,
    PublicRsvpResponse,
    CheckinRequest,
    CheckinResponse,
)
from app.services.utils import utc_now, utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


def to_public_event(event: dict) -> dict:
    """
    Public view of an opportunity with portal defaults for missing fields
    """
    location = event.get("location") or event.get("service_location") or "TBD"
    return {
        "id": event["id"],
        "title": event.get("title") or "Untitled Event",
        "date": event.get("date"),
        "time": event.get("time") or event.get("start_time") or "TBD",
        "location": location,
        "city": event.get("city") or "Los Angeles",
        "address": event.get("address") or event.get("service_location") or "",
        "program": event.get("program") or event.get("category") or "Community Health",
        "description": event.get("description") or "",
        "save_the_date": bool(event.get("save_the_date")),
        "flyer_url": event.get("flyer_url"),
    }


@router.get("/public/events", response_model=List[PublicEvent])
async def get_public_events(all: bool = False):
    """
    Approved events dated today or later, soonest first

    all=true includes events not marked public-facing (internal tools)
    """
    today = utc_now().date().isoformat()
    events = [
        e for e in database.list_records(database.OPPORTUNITIES)
        if e.get("approval_status") == "approved"
        and (e.get("date") or "")[:10] >= today
        and (all or e.get("is_public_facing") is not False)
    ]
    events.sort(key=lambda e: e.get("date") or "")
    logger.info(f"[PUBLIC EVENTS] Returned {len(events)} approved events (all={all})")
    return [to_public_event(e) for e in events]


@router.post("/public/rsvp", response_model=PublicRsvpResponse)
async def create_public_rsvp(rsvp: PublicRsvpRequest, request: Request):
    """
    RSVP from the client portal

    Returns a check-in token the client shows at the event.
    """
    enforce_rate_limit(PUBLIC_RSVP_LIMITER, request)

    event = database.get_record(database.OPPORTUNITIES, rsvp.event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    checkin_token = secrets.token_hex(16)
    stored = database.insert_record(database.PUBLIC_RSVPS, {
        **rsvp.model_dump(),
        "event_title": rsvp.event_title or event.get("title") or "",
        "event_date": rsvp.event_date or event.get("date") or "",
        "checkin_token": checkin_token,
        "checked_in": False,
        "checked_in_at": None,
        "created_at": utc_now_iso(),
    })
    database.increment_field(database.OPPORTUNITIES, rsvp.event_id, "rsvp_count", 1 + rsvp.guests)

    logger.info(f"[PUBLIC RSVP] Created RSVP {stored['id']} for event {rsvp.event_id}")
    return {
        "success": True,
        "rsvp_id": stored["id"],
        "checkin_token": checkin_token,
        "message": "RSVP recorded successfully",
    }


@router.post("/public/checkin", response_model=CheckinResponse)
async def public_checkin(body: CheckinRequest, request: Request):
    enforce_rate_limit(PUBLIC_CHECKIN_LIMITER, request)

    matches = database.find_records(database.PUBLIC_RSVPS, checkin_token=body.checkin_token)
    if not matches:
        raise HTTPException(status_code=404, detail="RSVP not found")

    rsvp = matches[0]
    if rsvp.get("checked_in"):
        raise HTTPException(status_code=400, detail=f"Already checked in at {rsvp.get('checked_in_at')}")

    checked_in_at = utc_now_iso()
    database.update_record(database.PUBLIC_RSVPS, rsvp["id"], {
        "checked_in": True,
        "checked_in_at": checked_in_at,
    })
    database.increment_field(database.OPPORTUNITIES, rsvp["event_id"], "checkin_count", 1 + (rsvp.get("guests") or 0))

    logger.info(f"[PUBLIC CHECKIN] Checked in RSVP {rsvp['id']} for event {rsvp['event_id']}")
    return {
        "success": True,
        "name": rsvp.get("name"),
        "event_title": rsvp.get("event_title"),
        "checked_in_at": checked_in_at,
        "message": "Check-in successful",
    }
