"""
Community event (opportunity) endpoints for staff

Creation, approval for the public portal, and RSVP statistics.
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request

from app.core.roles import EVENT_MANAGEMENT_ROLES
from app.database import storage as database
from app.database.schemas import Opportunity, OpportunityInput, RsvpStats
from app.api.utils import get_current_user, require_admin, require_role
from app.services.rsvp_stats import build_rsvp_stats
from app.services.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/events", response_model=List[Opportunity])
async def list_events(request: Request):
    get_current_user(request)
    events = database.list_records(database.OPPORTUNITIES)
    events.sort(key=lambda e: e.get("date") or "")
    return events


@router.post("/events", response_model=Opportunity)
async def create_event(event: OpportunityInput, request: Request):
    """
    Create a community event (pending approval)
    """
    actor = get_current_user(request)
    require_role(actor, EVENT_MANAGEMENT_ROLES,
                 detail="Only admins and event management roles can create events")

    stored = database.insert_record(database.OPPORTUNITIES, {
        **event.model_dump(),
        "approval_status": "pending",
        "rsvp_count": 0,
        "checkin_count": 0,
        "created_by": actor.user_id,
        "created_at": utc_now_iso(),
    })
    logger.info(f"[EVENTS] Created event {stored['id']} ({stored['title']})")
    return stored


@router.put("/events/{event_id}/approve", response_model=Opportunity)
async def approve_event(event_id: str, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can approve events")

    updated = database.update_record(database.OPPORTUNITIES, event_id, {"approval_status": "approved"})
    if not updated:
        raise HTTPException(status_code=404, detail="Event not found")
    return updated


@router.get("/events/{event_id}/rsvp-stats", response_model=RsvpStats)
async def get_rsvp_stats(event_id: str, request: Request):
    """
    RSVP totals, estimated attendance and check-in rate
    """
    actor = get_current_user(request)
    require_role(actor, EVENT_MANAGEMENT_ROLES,
                 detail="Only admins and event coordinators can view RSVP stats")

    event = database.get_record(database.OPPORTUNITIES, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    rsvps = database.find_records(database.PUBLIC_RSVPS, event_id=event_id)
    stats = build_rsvp_stats(event, rsvps)
    logger.info(f"[RSVP STATS] {event_id}: {stats['total_rsvps']} RSVPs, "
                f"{stats['checked_in_count']} checked in")
    return stats
