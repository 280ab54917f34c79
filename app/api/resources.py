"""
Referral resource, partner agency and feedback endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from app.core.roles import REFERRAL_ROLES
from app.database import storage as database
from app.database.schemas import (
    ReferralResource,
    BulkImportRequest,
    BulkImportResult,
    PartnerAgency,
    PartnerAgencyInput,
    PartnerAgencyUpdate,
    Feedback,
    FeedbackInput,
    MatchRequest,
    MatchResponse,
)
from app.api.utils import get_current_user, require_admin, require_role
from app.services.ai import is_ai_enabled, rank_resources_with_ai
from app.services.matching import active_resources, keyword_match, summarize_matches
from app.services.resource_import import decode_csv_payload, parse_resources_csv
from app.services.utils import round_half_up, utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

@router.get("/resources", response_model=List[ReferralResource])
async def list_resources(request: Request, active_only: bool = False):
    get_current_user(request)
    resources = database.list_records(database.RESOURCES)
    if active_only:
        resources = active_resources(resources)
    resources.sort(key=lambda r: (r.get("resource_name") or "").lower())
    return resources


@router.post("/resources/create", response_model=ReferralResource)
async def create_resource(resource: ReferralResource, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can add resources")

    payload = resource.model_dump(exclude={"id"})
    payload["created_at"] = utc_now_iso()
    return database.insert_record(database.RESOURCES, payload)


@router.post("/resources/bulk-import", response_model=BulkImportResult)
async def bulk_import_resources(body: BulkImportRequest, request: Request):
    """
    Import resources from a base64-encoded CSV export
    """
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can import resources")

    try:
        text = decode_csv_payload(body.csv_data)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    resources, skipped = parse_resources_csv(text)
    now = utc_now_iso()
    for resource in resources:
        database.insert_record(database.RESOURCES, {**resource, "created_at": now})

    logger.info(f"[RESOURCES] Imported {len(resources)} resources, skipped {skipped} rows")
    return {"success": True, "imported_count": len(resources), "skipped_count": skipped}


# ---------------------------------------------------------------------------
# Partner agencies
# ---------------------------------------------------------------------------

@router.get("/partners", response_model=List[PartnerAgency])
async def list_partners(request: Request):
    get_current_user(request)
    partners = database.list_records(database.PARTNERS)
    partners.sort(key=lambda p: (p.get("name") or "").lower())
    return partners


@router.post("/partners", response_model=PartnerAgency)
async def create_partner(partner: PartnerAgencyInput, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can add partner agencies")

    payload = {**partner.model_dump(), "status": "Active", "created_at": utc_now_iso()}
    return database.insert_record(database.PARTNERS, payload)


@router.put("/partners/{partner_id}", response_model=PartnerAgency)
async def update_partner(partner_id: str, updates: PartnerAgencyUpdate, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can update partner agencies")

    existing = database.get_record(database.PARTNERS, partner_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Partner agency not found")

    changes = {**updates.model_dump(exclude_unset=True), "updated_at": utc_now_iso()}
    try:
        PartnerAgency.model_validate({**existing, **changes})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    return database.update_record(database.PARTNERS, partner_id, changes)


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------

def _refresh_resource_rating(resource_id: str, submitted_at: str) -> None:
    """
    Recompute a resource's average rating from all of its feedback
    """
    ratings = [
        f["rating"] for f in database.find_records(database.FEEDBACK, resource_id=resource_id)
        if isinstance(f.get("rating"), (int, float))
    ]
    if not ratings:
        return
    database.update_record(database.RESOURCES, resource_id, {
        "average_rating": round_half_up(sum(ratings) / len(ratings), 1),
        "last_feedback_date": submitted_at,
    })


@router.get("/feedback", response_model=List[Feedback])
async def list_feedback(request: Request, resource_id: Optional[str] = None):
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    feedback = database.list_records(database.FEEDBACK)
    if resource_id:
        feedback = [f for f in feedback if f.get("resource_id") == resource_id]
    feedback.sort(key=lambda f: f.get("submitted_at") or "", reverse=True)
    return feedback


@router.post("/feedback", response_model=Feedback)
async def submit_feedback(feedback: FeedbackInput, request: Request):
    actor = get_current_user(request)

    if feedback.resource_id and not database.get_record(database.RESOURCES, feedback.resource_id):
        raise HTTPException(status_code=404, detail="Resource not found")

    submitted_at = utc_now_iso()
    stored = database.insert_record(database.FEEDBACK, {
        **feedback.model_dump(),
        "submitted_at": submitted_at,
        "submitted_by": actor.user_id,
    })
    if feedback.resource_id:
        _refresh_resource_rating(feedback.resource_id, submitted_at)
    return stored


# ---------------------------------------------------------------------------
# Resource matching
# ---------------------------------------------------------------------------

@router.post("/ai/match-resources", response_model=MatchResponse)
async def match_resources(body: MatchRequest, request: Request):
    """
    Rank active resources for a client need

    Uses OpenAI when configured and falls back to keyword matching when
    the AI call fails. use_ai=true fails with 503 when AI is not configured.
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    if body.use_ai and not is_ai_enabled():
        raise HTTPException(status_code=503, detail="AI matching is not configured")

    resources = active_resources(database.list_records(database.RESOURCES))
    client = database.get_record(database.CLIENTS, body.client_id) if body.client_id else None

    flags = None
    if body.screening_id:
        screening = database.get_record(database.SCREENINGS, body.screening_id)
        if not screening:
            raise HTTPException(status_code=404, detail="Screening not found")
        flags = screening.get("flags") or {}

    if body.use_ai is not False and is_ai_enabled():
        try:
            matches = rank_resources_with_ai(body.service_needed, resources, client, body.limit)
            return {
                "matches": matches,
                "summary": summarize_matches(matches, body.service_needed),
                "source": "ai",
            }
        except Exception as e:
            logger.warning(f"[AI MATCH] Falling back to keyword matching: {str(e)}")

    matches = keyword_match(resources, body.service_needed, flags, body.limit)
    return {
        "matches": matches,
        "summary": summarize_matches(matches, body.service_needed),
        "source": "keyword",
    }
