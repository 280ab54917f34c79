"""
Event operations endpoints

Per-volunteer shift run: station checklist, field incidents, sign-off
and the shift audit trail.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request

from app.core.roles import COORDINATOR_AND_LEAD_ROLES
from app.database import storage as database
from app.database.schemas import (
    OpsRun,
    OpsRunView,
    ChecklistUpdate,
    SignoffRequest,
    Incident,
    IncidentInput,
    AuditEntryInput,
    AuditLog,
)
from app.api.utils import get_current_user, require_admin, require_role
from app.services.audit import record_audit, audit_logs_for_shift
from app.services.checklist_templates import template_for_category, checklist_progress
from app.services.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


def run_id_for(shift_id: str, user_id: str) -> str:
    return f"{shift_id}_{user_id}"


def run_owner(run_id: str, existing: Optional[dict], actor_id: str,
              shift_id: Optional[str] = None) -> Optional[str]:
    """
    Volunteer a run belongs to

    Stored runs carry volunteer_id. New runs are "<shift>_<user>", which is
    resolved against the caller's id or the given shift id. None when the
    owner cannot be told from the id.
    """
    if existing:
        return existing.get("volunteer_id")
    if run_id.endswith(f"_{actor_id}"):
        return actor_id
    if shift_id and run_id.startswith(f"{shift_id}_"):
        return run_id[len(shift_id) + 1:]
    return None


def _require_run_access(actor, owner: Optional[str]) -> None:
    if owner != actor.user_id:
        require_role(actor, COORDINATOR_AND_LEAD_ROLES, detail="Cannot modify another volunteer's run")


def _new_run(run_id: str, owner: Optional[str], shift_id: Optional[str] = None) -> dict:
    if shift_id is None and owner and run_id.endswith(f"_{owner}"):
        shift_id = run_id[: -len(owner) - 1]
    return {"id": run_id, "shift_id": shift_id, "volunteer_id": owner, "completed_items": []}


@router.get("/ops/run/{shift_id}/{user_id}", response_model=OpsRunView)
async def get_ops_run(shift_id: str, user_id: str, request: Request, category: Optional[str] = None):
    """
    Everything event-ops mode needs for one volunteer's shift

    The run defaults to an empty checklist until the first update.
    """
    actor = get_current_user(request)
    if actor.user_id != user_id:
        require_role(actor, COORDINATOR_AND_LEAD_ROLES, detail="Cannot view another volunteer's run")

    run_id = run_id_for(shift_id, user_id)
    ops_run = database.get_record(database.OPS_RUNS, run_id) or {
        "id": run_id, "shift_id": shift_id, "volunteer_id": user_id, "completed_items": [],
    }
    template = template_for_category(category)

    return {
        "ops_run": ops_run,
        "incidents": database.find_records(database.INCIDENTS, shift_id=shift_id),
        "audit_logs": audit_logs_for_shift(shift_id),
        "checklist": template,
        "progress": checklist_progress(template, ops_run.get("completed_items") or []),
    }


@router.post("/ops/checklist", response_model=OpsRun)
async def save_checklist(body: ChecklistUpdate, request: Request):
    """
    Save completed checklist items for a run
    """
    actor = get_current_user(request)

    existing = database.get_record(database.OPS_RUNS, body.run_id)
    owner = run_owner(body.run_id, existing, actor.user_id, body.shift_id)
    _require_run_access(actor, owner)
    if existing and existing.get("signoff_timestamp"):
        raise HTTPException(status_code=400, detail="Shift has already been signed off")

    run = existing or _new_run(body.run_id, owner, body.shift_id)
    run["completed_items"] = list(dict.fromkeys(body.completed_items))
    run["updated_at"] = utc_now_iso()
    return database.upsert_record(database.OPS_RUNS, run)


@router.post("/ops/incidents", response_model=Incident)
async def report_incident(incident: IncidentInput, request: Request):
    actor = get_current_user(request)

    if not incident.description.strip():
        raise HTTPException(status_code=400, detail="Incident description is required")

    stored = database.insert_record(database.INCIDENTS, {
        **incident.model_dump(),
        "volunteer_id": actor.user_id,
        "timestamp": utc_now_iso(),
        "status": "reported",
    })
    record_audit(
        "CREATE_INCIDENT",
        f"Field Incident: {incident.type}",
        actor,
        shift_id=incident.shift_id,
        event_id=incident.event_id,
        target_system="incidents",
        target_id=stored["id"],
    )
    logger.warning(f"[INCIDENTS] {incident.type} reported on shift {incident.shift_id}")
    return stored


@router.put("/ops/incidents/{incident_id}/resolve", response_model=Incident)
async def resolve_incident(incident_id: str, request: Request):
    actor = get_current_user(request)

    updated = database.update_record(database.INCIDENTS, incident_id, {
        "status": "resolved",
        "resolved_at": utc_now_iso(),
        "resolved_by": actor.user_id,
    })
    if not updated:
        raise HTTPException(status_code=404, detail="Incident not found")

    record_audit(
        "RESOLVE_INCIDENT",
        f"Resolved incident: {updated.get('type')}",
        actor,
        shift_id=updated.get("shift_id"),
        event_id=updated.get("event_id"),
        target_system="incidents",
        target_id=incident_id,
    )
    return updated


@router.post("/ops/signoff", response_model=OpsRun)
async def sign_off_shift(body: SignoffRequest, request: Request):
    """
    Sign off a shift (once per run)
    """
    actor = get_current_user(request)

    if not body.signature.strip():
        raise HTTPException(status_code=400, detail="Signature is required")

    existing = database.get_record(database.OPS_RUNS, body.run_id)
    owner = run_owner(body.run_id, existing, actor.user_id, body.shift_id)
    _require_run_access(actor, owner)
    if existing and existing.get("signoff_timestamp"):
        raise HTTPException(status_code=409, detail="Shift has already been signed off")

    run = existing or _new_run(body.run_id, owner, body.shift_id)
    now = utc_now_iso()
    run["signoff_signature"] = body.signature
    run["signoff_timestamp"] = now
    run["updated_at"] = now
    stored = database.upsert_record(database.OPS_RUNS, run)

    record_audit(
        "SHIFT_SIGNOFF",
        f"Shift signed off by {actor.display_name}",
        actor,
        shift_id=body.shift_id or stored.get("shift_id"),
        event_id=body.event_id,
        target_system="mission_ops_runs",
        target_id=body.run_id,
    )
    return stored


@router.post("/ops/audit", response_model=AuditLog)
async def create_audit_entry(entry: AuditEntryInput, request: Request):
    """
    Audit entry reported by a station client
    """
    actor = get_current_user(request)
    return record_audit(
        entry.action_type,
        entry.summary,
        actor,
        shift_id=entry.shift_id,
        event_id=entry.event_id,
        target_system=entry.target_system,
        target_id=entry.target_id,
    )


@router.get("/ops/audit/{shift_id}", response_model=List[AuditLog])
async def get_shift_audit(shift_id: str, request: Request):
    actor = get_current_user(request)
    require_admin(actor, detail="Only admins can view the audit trail")
    return audit_logs_for_shift(shift_id)
