"""
Public RSVP statistics for one community event
"""
from typing import Dict, Any, List

from app.services.utils import round_half_up

# Share of RSVPs (with guests) expected to actually show up
SHOW_RATE = 0.7


def _breakdown(values: List[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value in values:
        counts[value] = counts.get(value, 0) + 1
    return counts


def build_rsvp_stats(event: Dict[str, Any], rsvps: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Totals, estimated attendance and check-in rate for an event

    Args:
        event: Stored opportunity
        rsvps: Public RSVPs for the event

    Returns:
        Dict matching RsvpStats
    """
    total_rsvps = len(rsvps)
    total_guests = sum(r.get("guests") or 0 for r in rsvps)
    expected = total_rsvps + total_guests

    checked_in = [r for r in rsvps if r.get("checked_in")]
    checked_in_total = len(checked_in) + sum(r.get("guests") or 0 for r in checked_in)

    needs = []
    for rsvp in rsvps:
        if rsvp.get("needs"):
            needs.extend(n.strip() for n in rsvp["needs"].split(",") if n.strip())

    return {
        "event_id": event.get("id"),
        "event_title": event.get("title") or "Unknown Event",
        "event_date": event.get("date"),
        "total_rsvps": total_rsvps,
        "total_guests": total_guests,
        "total_expected_attendees": expected,
        "estimated_attendance": round_half_up(expected * SHOW_RATE),
        "checked_in_count": checked_in_total,
        "check_in_rate": round_half_up(checked_in_total / expected * 100) if expected > 0 else 0,
        "needs_breakdown": _breakdown(needs),
        "source_breakdown": _breakdown([r.get("source") or "unknown" for r in rsvps]),
        "rsvp_count": event.get("rsvp_count") or expected,
        "checkin_count": event.get("checkin_count") or checked_in_total,
    }
