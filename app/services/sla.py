"""
Referral SLA tracking

A referral must get first contact within SLA_HOURS (72h) of creation.
Pending referrals past the deadline count against compliance; closed
referrals are judged by how long first contact took.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional

from app.core.config import SLA_HOURS
from app.services.utils import parse_iso, round_half_up, utc_now

logger = logging.getLogger(__name__)

EXCLUDED_STATUSES = {"Cancelled", "Withdrawn", "No Show"}


def sla_deadline(created_at: datetime) -> datetime:
    return created_at + timedelta(hours=SLA_HOURS)


def _created(referral: Dict[str, Any]) -> Optional[datetime]:
    return parse_iso(referral.get("created_at") or referral.get("referral_date"))


def hours_to_first_contact(referral: Dict[str, Any]) -> Optional[float]:
    created = _created(referral)
    contacted = parse_iso(referral.get("first_contact_date"))
    if created is None or contacted is None:
        return None
    return (contacted - created).total_seconds() / 3600


def sla_countdown(referral: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Time left before the SLA deadline

    Returns:
        {"deadline": iso or None, "hours_remaining": float >= 0, "is_overdue": bool}

    Only Pending referrals can be overdue.
    """
    now = now or utc_now()
    created = _created(referral)
    if created is None:
        return {"deadline": None, "hours_remaining": 0, "is_overdue": False}

    deadline = sla_deadline(created)
    remaining = (deadline - now).total_seconds() / 3600
    return {
        "deadline": deadline.isoformat(),
        "hours_remaining": round_half_up(max(remaining, 0), 1),
        "is_overdue": referral.get("status") == "Pending" and now > deadline,
    }


def compliance_status(referral: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """
    Compliant / Non-Compliant / On Track / Excluded for a single referral
    """
    now = now or utc_now()
    hours = hours_to_first_contact(referral)
    if hours is not None:
        return "Compliant" if hours <= SLA_HOURS else "Non-Compliant"

    if referral.get("status") in EXCLUDED_STATUSES:
        return "Excluded"

    created = _created(referral)
    if created is not None and now > sla_deadline(created):
        return "Non-Compliant"
    return "On Track"


def compliance_rate(compliant: int, non_compliant: int) -> Optional[int]:
    measured = compliant + non_compliant
    if measured == 0:
        return None
    return round_half_up(compliant / measured * 100)


def build_sla_report(referrals: List[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Aggregate SLA compliance across referrals

    Pending referrals are on track or non-compliant depending on the
    deadline. Other referrals count only when first contact was recorded.
    """
    now = now or utc_now()
    report = {
        "total": len(referrals),
        "compliant": 0,
        "non_compliant": 0,
        "on_track": 0,
        "pending": 0,
        "by_status": {},
        "by_urgency": {},
        "avg_response_time_hours": 0,
        "compliance_rate": None,
    }

    total_response_hours = 0.0
    response_count = 0

    for referral in referrals:
        status = referral.get("status") or "Unknown"
        urgency = referral.get("urgency") or "Unknown"
        report["by_status"][status] = report["by_status"].get(status, 0) + 1
        report["by_urgency"][urgency] = report["by_urgency"].get(urgency, 0) + 1

        if status == "Pending":
            created = _created(referral)
            if created is not None and now > sla_deadline(created):
                report["non_compliant"] += 1
            else:
                report["on_track"] += 1
            report["pending"] += 1
            continue

        hours = hours_to_first_contact(referral)
        if hours is None:
            continue
        total_response_hours += hours
        response_count += 1
        if hours <= SLA_HOURS:
            report["compliant"] += 1
        else:
            report["non_compliant"] += 1

    if response_count > 0:
        report["avg_response_time_hours"] = round_half_up(total_response_hours / response_count, 1)
    report["compliance_rate"] = compliance_rate(report["compliant"], report["non_compliant"])

    logger.debug(f"[SLA] report over {len(referrals)} referrals: "
                 f"{report['compliant']} compliant, {report['non_compliant']} non-compliant")
    return report
