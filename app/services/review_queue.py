"""
Screening review queue and live-feed summaries

Pure functions over screening dicts so routes and tests share them.
"""
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional

from app.core.config import REVIEW_QUEUE_LIMIT
from app.services.utils import parse_iso, utc_now
from app.services.vitals import level_at_least


def _sort_key(screening: Dict[str, Any]) -> str:
    return screening.get("created_at") or screening.get("timestamp") or ""


def _has_any_flag(screening: Dict[str, Any]) -> bool:
    flags = screening.get("flags") or {}
    return any(flags.values())


def _is_critical(screening: Dict[str, Any]) -> bool:
    flags = screening.get("flags") or {}
    return any(f and f.get("level") == "critical" for f in flags.values())


def needs_review(screening: Dict[str, Any]) -> bool:
    return bool(screening.get("follow_up_needed")) and not screening.get("reviewed_at")


def build_review_queue(screenings: List[Dict[str, Any]], limit: int = REVIEW_QUEUE_LIMIT) -> List[Dict[str, Any]]:
    """
    Screenings awaiting clinical review, oldest first

    Ordering compares created_at (falling back to timestamp) as text,
    which matches chronological order for ISO-8601 UTC stamps.
    """
    queue = [s for s in screenings if needs_review(s)]
    queue.sort(key=_sort_key)
    return queue[:limit]


def sort_newest_first(screenings: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(screenings, key=_sort_key, reverse=True)


def summarize_feed(screenings: List[Dict[str, Any]], since: Optional[str] = None) -> Dict[str, Any]:
    """
    Live feed counts for one event

    Args:
        screenings: Screenings for the event
        since: ISO timestamp of the caller's previous poll; critical
            screenings created after it raise has_new_critical

    Returns:
        Dict matching ScreeningFeed (without event_id)
    """
    ordered = sort_newest_first(screenings)
    flagged = [s for s in ordered if s.get("follow_up_needed") or _has_any_flag(s)]

    since_dt = parse_iso(since)
    has_new_critical = False
    for s in ordered:
        if not _is_critical(s):
            continue
        created = parse_iso(_sort_key(s))
        if since_dt is None or (created is not None and created > since_dt):
            has_new_critical = True
            break

    return {
        "screenings": ordered,
        "total": len(ordered),
        "flagged_count": len(flagged),
        "awaiting_review": sum(1 for s in ordered if needs_review(s)),
        "has_new_critical": has_new_critical,
        "latest_created_at": (_sort_key(ordered[0]) or None) if ordered else None,
    }


def _matches_flag_filter(screening: Dict[str, Any], flag_type: str, severity: str) -> bool:
    flags = screening.get("flags") or {}
    if flag_type == "blood_pressure":
        candidates = [flags.get("blood_pressure")]
    elif flag_type == "glucose":
        candidates = [flags.get("glucose")]
    else:
        candidates = [flags.get("blood_pressure"), flags.get("glucose")]
    candidates = [c for c in candidates if c]

    if flag_type != "all" and not candidates:
        return False
    if severity == "critical":
        return any(c.get("level") == "critical" for c in candidates)
    if severity == "high":
        return any(level_at_least(c, "high") for c in candidates)
    return True


def filter_flagged(screenings: List[Dict[str, Any]], flag_type: str = "all", severity: str = "all",
                   days: int = 90, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """
    Flagged screenings (follow-up or abnormal) inside the look-back window

    Args:
        flag_type: all, blood_pressure or glucose
        severity: all, critical or high (high includes critical)
        days: Look-back window in days
        now: Reference time (defaults to current UTC time)

    Returns:
        Matching screenings, newest first
    """
    now = now or utc_now()
    cutoff = now - timedelta(days=days)

    results = []
    for s in screenings:
        if not (s.get("follow_up_needed") or s.get("abnormal_flag") or _has_any_flag(s)):
            continue
        created = parse_iso(_sort_key(s))
        if created is None or created < cutoff:
            continue
        if not _matches_flag_filter(s, flag_type, severity):
            continue
        results.append(s)
    return sort_newest_first(results)
