"""
Referral record service

Creation and status transitions shared by the referral endpoints and
the flagged-screening shortcut.
"""
import logging
from typing import Dict, Any, Optional

from app.database import storage as database
from app.services.sla import sla_deadline, compliance_status
from app.services.utils import utc_now, utc_now_iso, convert_datetime_to_iso

logger = logging.getLogger(__name__)

# Statuses that mean the client was reached
CONTACT_STATUSES = ("In Progress", "Completed")


def create_referral(data: Dict[str, Any], referred_by: str, referred_by_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Store a new Pending referral with its SLA deadline

    Args:
        data: Referral fields (client_id, client_name, service_needed, ...)
        referred_by: User ID creating the referral
        referred_by_name: Display name of that user

    Returns:
        The stored referral
    """
    created = utc_now()
    record = {
        **data,
        "status": "Pending",
        "referral_date": created,
        "created_at": created,
        "sla_deadline": sla_deadline(created),
        "sla_compliance_status": "On Track",
        "referred_by": referred_by,
        "referred_by_name": referred_by_name,
    }
    record = convert_datetime_to_iso(record, ["referral_date", "created_at", "sla_deadline"])
    stored = database.insert_record(database.REFERRALS, record)
    logger.info(f"[REFERRALS] Created referral {stored['id']} for client {stored.get('client_id')} "
                f"({stored.get('urgency')})")
    return stored


def apply_referral_update(existing: Dict[str, Any], changes: Dict[str, Any], actor_id: str) -> Dict[str, Any]:
    """
    Merge an update into a referral

    Moving to In Progress or Completed records first contact when
    none was recorded yet, so a referral closed in one step is still judged
    against the SLA. Cancelled, Withdrawn and No Show leave it unset and the
    referral is excluded. SLA compliance is recomputed on every update.
    """
    merged = {**existing, **changes}
    if (changes.get("status") in CONTACT_STATUSES
            and existing.get("status") != changes.get("status")
            and not merged.get("first_contact_date")):
        merged["first_contact_date"] = utc_now_iso()
        merged["first_contact_by"] = actor_id
    merged["sla_compliance_status"] = compliance_status(merged)
    merged["updated_at"] = utc_now_iso()
    return merged
