"""
Referral management endpoints

Referrals connect a client to a community resource and must get first
contact within the 72 hour SLA.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request, Query
from pydantic import ValidationError

from app.core.roles import REFERRAL_ROLES
from app.database import storage as database
from app.database.schemas import (
    Referral,
    ReferralInput,
    ReferralUpdate,
    ReferralDetail,
    SlaReport,
    ReferralDashboard,
)
from app.api.utils import get_current_user, require_role
from app.services.audit import record_audit
from app.services.referrals import create_referral, apply_referral_update
from app.services.sla import build_sla_report, sla_countdown
from app.services.utils import utc_now, parse_iso, client_display_name

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/referrals", response_model=List[Referral])
async def list_referrals(
    request: Request,
    view: str = Query("all", pattern="^(all|pending|urgent)$"),
    status: Optional[str] = None,
    client_id: Optional[str] = None,
):
    """
    List referrals, newest first

    view=pending keeps status Pending, view=urgent keeps Urgent and Emergency
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    referrals = database.list_records(database.REFERRALS)
    if view == "pending":
        referrals = [r for r in referrals if r.get("status") == "Pending"]
    elif view == "urgent":
        referrals = [r for r in referrals if r.get("urgency") in ("Urgent", "Emergency")]
    if status:
        referrals = [r for r in referrals if r.get("status") == status]
    if client_id:
        referrals = [r for r in referrals if r.get("client_id") == client_id]

    referrals.sort(key=lambda r: r.get("created_at") or "", reverse=True)
    return referrals


@router.post("/referrals/create", response_model=Referral)
async def create_referral_endpoint(referral: ReferralInput, request: Request):
    """
    Create a referral (status Pending, SLA deadline 72h from now)
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    client = database.get_record(database.CLIENTS, referral.client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    data = referral.model_dump()
    if not data.get("client_name"):
        data["client_name"] = client_display_name(client)

    stored = create_referral(data, actor.user_id, actor.name)
    record_audit(
        "CREATE_REFERRAL",
        f"Referral for {stored['client_name']}: {stored['service_needed']} ({stored['urgency']})",
        actor,
        event_id=stored.get("event_id"),
        target_system="referrals",
        target_id=stored["id"],
    )
    return stored


@router.get("/referrals/sla-report", response_model=SlaReport)
async def get_sla_report(request: Request):
    """
    SLA compliance across all referrals
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)
    return build_sla_report(database.list_records(database.REFERRALS))


@router.get("/referrals/dashboard", response_model=ReferralDashboard)
async def get_referral_dashboard(request: Request):
    """
    Headline numbers for the referral management dashboard
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    referrals = database.list_records(database.REFERRALS)
    clients = database.list_records(database.CLIENTS)
    resources = database.list_records(database.RESOURCES)
    now = utc_now()

    def completed_this_month(r: dict) -> bool:
        if r.get("status") != "Completed":
            return False
        created: Optional[datetime] = parse_iso(r.get("created_at"))
        return created is not None and created.year == now.year and created.month == now.month

    report = build_sla_report(referrals, now)
    return {
        "active_clients": sum(1 for c in clients if c.get("status", "Active") == "Active"),
        "pending_referrals": sum(1 for r in referrals if r.get("status") == "Pending"),
        "urgent_referrals": sum(1 for r in referrals if r.get("urgency") in ("Urgent", "Emergency")),
        "completed_this_month": sum(1 for r in referrals if completed_this_month(r)),
        "sla_compliance_rate": report["compliance_rate"],
        "active_resources": sum(1 for r in resources if r.get("active", True)),
    }


@router.get("/referrals/{referral_id}", response_model=ReferralDetail)
async def get_referral(referral_id: str, request: Request):
    """
    Referral with its SLA countdown
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    referral = database.get_record(database.REFERRALS, referral_id)
    if not referral:
        raise HTTPException(status_code=404, detail="Referral not found")
    return {**referral, "sla": sla_countdown(referral)}


@router.put("/referrals/{referral_id}", response_model=Referral)
async def update_referral(referral_id: str, updates: ReferralUpdate, request: Request):
    """
    Update referral (only provided fields change)
    """
    actor = get_current_user(request)
    require_role(actor, REFERRAL_ROLES)

    existing = database.get_record(database.REFERRALS, referral_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Referral not found")

    merged = apply_referral_update(existing, updates.model_dump(exclude_unset=True), actor.user_id)
    try:
        Referral.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    stored = database.update_record(database.REFERRALS, referral_id, merged)
    if existing.get("status") != stored.get("status"):
        logger.info(f"[REFERRALS] {referral_id} {existing.get('status')} -> {stored.get('status')}")
        record_audit(
            "UPDATE_REFERRAL",
            f"Referral status {existing.get('status')} -> {stored.get('status')}",
            actor,
            event_id=stored.get("event_id"),
            target_system="referrals",
            target_id=referral_id,
        )
    return stored
