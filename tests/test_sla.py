"""
Referral SLA countdown, compliance and report
"""
from datetime import datetime, timedelta, timezone

from app.services.sla import sla_countdown, compliance_status, compliance_rate, build_sla_report

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _iso(dt: datetime) -> str:
    return dt.isoformat()


def _referral(status="Pending", created_hours_ago=10, contact_after_hours=None, urgency="Standard"):
    created = NOW - timedelta(hours=created_hours_ago)
    referral = {"status": status, "urgency": urgency, "created_at": _iso(created)}
    if contact_after_hours is not None:
        referral["first_contact_date"] = _iso(created + timedelta(hours=contact_after_hours))
    return referral


def test_countdown_for_fresh_pending_referral():
    countdown = sla_countdown(_referral(created_hours_ago=10), NOW)
    assert countdown["hours_remaining"] == 62.0
    assert countdown["is_overdue"] is False
    assert countdown["deadline"] == _iso(NOW + timedelta(hours=62))


def test_countdown_overdue_only_while_pending():
    overdue = sla_countdown(_referral(created_hours_ago=80), NOW)
    assert overdue["is_overdue"] is True
    assert overdue["hours_remaining"] == 0

    in_progress = sla_countdown(_referral(status="In Progress", created_hours_ago=80), NOW)
    assert in_progress["is_overdue"] is False


def test_countdown_accepts_z_suffix():
    referral = {"status": "Pending", "created_at": "2026-03-10T00:00:00Z"}
    assert sla_countdown(referral, NOW)["hours_remaining"] == 60.0


def test_compliance_status():
    assert compliance_status(_referral(status="Completed", contact_after_hours=24), NOW) == "Compliant"
    assert compliance_status(_referral(status="Completed", created_hours_ago=200,
                                       contact_after_hours=100), NOW) == "Non-Compliant"
    assert compliance_status(_referral(created_hours_ago=5), NOW) == "On Track"
    assert compliance_status(_referral(created_hours_ago=73), NOW) == "Non-Compliant"
    assert compliance_status(_referral(status="Withdrawn", created_hours_ago=100), NOW) == "Excluded"


def test_report_counts():
    referrals = [
        _referral(created_hours_ago=10),                                          # on track
        _referral(created_hours_ago=100, urgency="Urgent"),                       # overdue
        _referral(status="Completed", created_hours_ago=200, contact_after_hours=24),
        _referral(status="In Progress", created_hours_ago=200, contact_after_hours=96,
                  urgency="Emergency"),
        _referral(status="Cancelled", created_hours_ago=50),                      # not measured
    ]
    report = build_sla_report(referrals, NOW)

    assert report["total"] == 5
    assert report["pending"] == 2
    assert report["on_track"] == 1
    assert report["compliant"] == 1
    assert report["non_compliant"] == 2
    assert report["avg_response_time_hours"] == 60.0
    assert report["by_status"] == {"Pending": 2, "Completed": 1, "In Progress": 1, "Cancelled": 1}
    assert report["by_urgency"] == {"Standard": 3, "Urgent": 1, "Emergency": 1}
    assert report["compliance_rate"] == 33


def test_report_on_empty_list():
    report = build_sla_report([], NOW)
    assert report["total"] == 0
    assert report["avg_response_time_hours"] == 0
    assert report["compliance_rate"] is None


def test_report_rounds_ties_up():
    # 2h15m average response and 1 of 8 compliant (12.5%)
    referrals = [_referral(status="Completed", created_hours_ago=100, contact_after_hours=2.25)]
    referrals += [_referral(created_hours_ago=100) for _ in range(7)]
    report = build_sla_report(referrals, NOW)

    assert report["avg_response_time_hours"] == 2.3
    assert report["compliance_rate"] == 13
    assert compliance_rate(1, 7) == 13
