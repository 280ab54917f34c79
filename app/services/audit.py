"""
Audit trail

Every write made during an event shift leaves an entry in audit_logs so
coordinators can reconstruct what happened at a station.
"""
import logging
from typing import Dict, Any, Optional

from app.database import storage as database
from app.services.utils import utc_now_iso

logger = logging.getLogger(__name__)


def record_audit(action_type: str, summary: str, actor=None,
                 shift_id: Optional[str] = None, event_id: Optional[str] = None,
                 target_system: Optional[str] = None, target_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Write one audit entry

    Args:
        action_type: Upper-case action key, e.g. CREATE_SCREENING
        summary: Human-readable description
        actor: Acting user (Actor) or None for system actions
        shift_id: Shift the action belongs to
        event_id: Event the action belongs to
        target_system: Collection the action touched
        target_id: Record the action touched

    Returns:
        The stored entry
    """
    entry = {
        "timestamp": utc_now_iso(),
        "action_type": action_type,
        "summary": summary,
        "actor_user_id": getattr(actor, "user_id", None),
        "actor_role": getattr(actor, "role", None),
        "shift_id": shift_id,
        "event_id": event_id,
        "target_system": target_system,
        "target_id": target_id,
    }
    stored = database.insert_record(database.AUDIT_LOGS, entry)
    logger.info(f"[AUDIT] {action_type} by {entry['actor_user_id'] or 'system'}: {summary}")
    return stored


def audit_logs_for_shift(shift_id: str):
    """
    Audit entries for a shift, newest first
    """
    logs = database.find_records(database.AUDIT_LOGS, shift_id=shift_id)
    logs.sort(key=lambda log: log.get("timestamp") or "", reverse=True)
    return logs
