"""
Health screening endpoints

Screening capture at event stations, the live feed and clinical review
queue polled during events, and the flagged-screenings view used by
referral management.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request, Query

from app.core.config import FLAGGED_LOOKBACK_DAYS
from app.core.roles import INTAKE_ROLES, CLINICAL_REVIEW_ROLES, REFERRAL_ROLES
from app.database import storage as database
from app.database.schemas import (
    Screening,
    ScreeningInput,
    ScreeningReview,
    ScreeningFeed,
    FlaggedScreening,
    ScreeningReferralRequest,
    Referral,
)
from app.api.utils import get_current_user, require_role
from app.services.audit import record_audit
from app.services.referrals import create_referral
from app.services.review_queue import build_review_queue, summarize_feed, filter_flagged, sort_newest_first
from app.services.utils import utc_now_iso, client_display_name
from app.services.vitals import (
    evaluate_vitals,
    resolve_follow_up,
    compute_bmi,
    suggest_service_needed,
    suggest_urgency,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/screenings/create", response_model=Screening)
async def create_screening(screening: ScreeningInput, request: Request):
    """
    Record a screening

    Flags, BMI and follow-up are computed here from the vitals.
    """
    actor = get_current_user(request)
    require_role(actor, INTAKE_ROLES)

    client = database.get_record(database.CLIENTS, screening.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    vitals = screening.vitals.model_dump()
    evaluation = evaluate_vitals(vitals)
    follow_up = resolve_follow_up(screening.follow_up_needed, screening.follow_up_reason, evaluation["has_flags"])
    now = utc_now_iso()

    record = {
        **screening.model_dump(),
        **follow_up,
        "vitals": vitals,
        "flags": evaluation["flags"],
        "abnormal_flag": evaluation["abnormal"],
        "bmi": compute_bmi(vitals.get("weight"), vitals.get("height")),
        "client_name": client_display_name(client),
        "volunteer_id": actor.user_id,
        "created_at": now,
        "timestamp": now,
    }
    stored = database.insert_record(database.SCREENINGS, record)

    flag_text = "FLAGS PRESENT." if evaluation["abnormal"] else "No flags."
    record_audit(
        "CREATE_SCREENING",
        f"Screening recorded for {stored['client_name']}. {flag_text}",
        actor,
        shift_id=screening.shift_id,
        event_id=screening.event_id,
        target_system="screenings",
        target_id=stored["id"],
    )
    if evaluation["has_flags"]:
        logger.warning(f"[SCREENINGS] Flagged screening {stored['id']} queued for review")
    return stored


@router.get("/ops/screenings/{event_id}", response_model=List[Screening])
async def list_event_screenings(event_id: str, request: Request):
    """
    Screenings for an event, newest first
    """
    get_current_user(request)
    return sort_newest_first(database.find_records(database.SCREENINGS, event_id=event_id))


@router.get("/ops/screenings/{event_id}/feed", response_model=ScreeningFeed)
async def get_screening_feed(event_id: str, request: Request, since: Optional[str] = None):
    """
    Live feed summary (polled by station tablets)

    Pass the previous response's latest_created_at as `since` to learn
    whether a new critical screening arrived.
    """
    get_current_user(request)
    screenings = database.find_records(database.SCREENINGS, event_id=event_id)
    return {"event_id": event_id, **summarize_feed(screenings, since)}


@router.get("/ops/screenings/{event_id}/review-queue", response_model=List[Screening])
async def get_review_queue(event_id: str, request: Request):
    """
    Screenings awaiting clinical review, oldest first
    """
    get_current_user(request)
    return build_review_queue(database.find_records(database.SCREENINGS, event_id=event_id))


@router.put("/ops/screenings/{screening_id}/review", response_model=Screening)
async def review_screening(screening_id: str, review: ScreeningReview, request: Request):
    """
    Clear a screening from the review queue
    """
    actor = get_current_user(request)
    require_role(actor, CLINICAL_REVIEW_ROLES, detail="Only clinical reviewers can review screenings")

    screening = database.get_record(database.SCREENINGS, screening_id)
    if not screening:
        raise HTTPException(status_code=404, detail="Screening not found")
    if screening.get("reviewed_at"):
        raise HTTPException(status_code=409, detail="Screening has already been reviewed")

    updated = database.update_record(database.SCREENINGS, screening_id, {
        "reviewed_at": utc_now_iso(),
        "reviewed_by": actor.user_id,
        "reviewed_by_name": actor.display_name,
        "review_notes": review.review_notes,
        "clinical_action": review.clinical_action,
    })

    record_audit(
        "REVIEW_SCREENING",
        f"Clinical review for {updated.get('client_name') or 'client'}: {review.clinical_action}",
        actor,
        shift_id=updated.get("shift_id"),
        event_id=updated.get("event_id"),
        target_system="screenings",
        target_id=screening_id,
    )
    return updated


@router.get("/screenings/flagged", response_model=List[FlaggedScreening])
async def get_flagged_screenings(
    request: Request,
    flag_type: str = Query("all", pattern="^(all|blood_pressure|glucose)$"),
    severity: str = Query("all", pattern="^(all|critical|high)$"),
    days: int = Query(FLAGGED_LOOKBACK_DAYS, ge=1, le=3650),
):
    """
    Flagged screenings joined with client name and referral status
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    flagged = filter_flagged(database.list_records(database.SCREENINGS), flag_type, severity, days)
    clients = {c["id"]: c for c in database.list_records(database.CLIENTS)}
    referrals = database.list_records(database.REFERRALS)
    by_id = {r["id"]: r for r in referrals}
    by_screening = {r["screening_id"]: r for r in referrals if r.get("screening_id")}

    results = []
    for s in flagged:
        referral = by_id.get(s.get("referral_id")) or by_screening.get(s["id"])
        flags = s.get("flags") or {}
        vitals = s.get("vitals") or {}
        client = clients.get(s.get("client_id"))
        results.append({
            "id": s["id"],
            "client_id": s.get("client_id"),
            "client_name": client_display_name(client) if client else (s.get("client_name") or "Unknown"),
            "date": s.get("created_at") or s.get("timestamp"),
            "event_id": s.get("event_id"),
            "flags": flags,
            "follow_up_needed": bool(s.get("follow_up_needed")),
            "abnormal_flag": bool(s.get("abnormal_flag")),
            "clinical_action": s.get("clinical_action"),
            "reviewed_by": s.get("reviewed_by_name") or s.get("reviewed_by"),
            "vitals": {
                "systolic": vitals.get("systolic"),
                "diastolic": vitals.get("diastolic"),
                "glucose": vitals.get("glucose"),
            },
            "has_referral": referral is not None,
            "referral_status": referral.get("status") if referral else None,
            "suggested_service": suggest_service_needed(flags),
            "suggested_urgency": suggest_urgency(flags),
        })
    return results


@router.post("/screenings/{screening_id}/referral", response_model=Referral)
async def create_referral_from_screening(screening_id: str, body: ScreeningReferralRequest, request: Request):
    """
    Create a referral for a flagged screening and link it back
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    screening = database.get_record(database.SCREENINGS, screening_id)
    if not screening:
        raise HTTPException(status_code=404, detail="Screening not found")
    if not screening.get("client_id"):
        raise HTTPException(status_code=400, detail="Screening has no client to refer")

    client = database.get_record(database.CLIENTS, screening["client_id"])
    resource = None
    if body.resource_id:
        resource = database.get_record(database.RESOURCES, body.resource_id)
        if not resource:
            raise HTTPException(status_code=404, detail="Resource not found")

    flags = screening.get("flags") or {}
    referral = create_referral({
        "client_id": screening["client_id"],
        "client_name": client_display_name(client) if client else (screening.get("client_name") or "Unknown"),
        "service_needed": suggest_service_needed(flags),
        "service_category": "Healthcare",
        "urgency": suggest_urgency(flags),
        "referred_to": resource.get("resource_name") if resource else None,
        "referred_to_id": resource.get("id") if resource else None,
        "notes": body.notes,
        "event_id": screening.get("event_id"),
        "screening_id": screening_id,
    }, actor.user_id, actor.name)

    database.update_record(database.SCREENINGS, screening_id, {"referral_id": referral["id"]})
    record_audit(
        "CREATE_REFERRAL",
        f"Referral from flagged screening: {referral['service_needed']}",
        actor,
        shift_id=screening.get("shift_id"),
        event_id=screening.get("event_id"),
        target_system="referrals",
        target_id=referral["id"],
    )
    return referral
