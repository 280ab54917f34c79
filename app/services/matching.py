"""
Resource matching

Keyword matching of a client need against active referral resources.
Used directly when AI is not configured and as the fallback when an AI
ranking fails.
"""
import re
from typing import Dict, Any, List, Optional

BASE_MEDICAL_KEYWORDS = ["health", "medical", "clinic", "care"]
BLOOD_PRESSURE_KEYWORDS = ["blood pressure", "hypertension", "cardio", "heart", "cardiovascular"]
GLUCOSE_KEYWORDS = ["diabetes", "glucose", "endocrin"]

SEARCH_FIELDS = ["service_category", "key_offerings", "resource_name"]

_STOP_WORDS = {"and", "the", "for", "with", "need", "needs", "help"}


def active_resources(resources: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [r for r in resources if r.get("active", True)]


def medical_keywords_for(flags: Optional[Dict[str, Any]]) -> List[str]:
    """
    Keywords for a flagged screening: base medical terms plus terms for
    whichever vital was flagged
    """
    keywords = list(BASE_MEDICAL_KEYWORDS)
    flags = flags or {}
    if flags.get("blood_pressure"):
        keywords.extend(BLOOD_PRESSURE_KEYWORDS)
    if flags.get("glucose"):
        keywords.extend(GLUCOSE_KEYWORDS)
    return keywords


def need_keywords(service_needed: str) -> List[str]:
    words = re.findall(r"[a-z0-9]+", (service_needed or "").lower())
    return [w for w in words if len(w) > 2 and w not in _STOP_WORDS]


def _search_text(resource: Dict[str, Any]) -> str:
    return " ".join(str(resource.get(field) or "") for field in SEARCH_FIELDS).lower()


def keyword_match(resources: List[Dict[str, Any]], service_needed: str,
                  flags: Optional[Dict[str, Any]] = None, limit: int = 5) -> List[Dict[str, Any]]:
    """
    Rank active resources by keyword hits

    Args:
        resources: Stored resources (inactive ones are skipped)
        service_needed: Free-text client need
        flags: Screening flags; when given, medical keywords are added
        limit: Maximum matches returned

    Returns:
        List of {resource_id, resource_name, match_score, match_reason},
        best first. Scores run from 60 to 95.
    """
    keywords = need_keywords(service_needed)
    if flags is not None:
        keywords.extend(medical_keywords_for(flags))
    keywords = list(dict.fromkeys(keywords))

    scored = []
    for resource in active_resources(resources):
        text = _search_text(resource)
        hits = [k for k in keywords if k in text]
        if not hits:
            continue
        score = min(95, 60 + 10 * (len(hits) - 1))
        category = resource.get("service_category") or "General"
        scored.append({
            "resource_id": resource.get("id"),
            "resource_name": resource.get("resource_name") or "Unnamed resource",
            "match_score": score,
            "match_reason": f"Matched {', '.join(hits[:3])} in service category: {category}",
        })

    scored.sort(key=lambda m: (-m["match_score"], m["resource_name"]))
    return scored[:limit]


def summarize_matches(matches: List[Dict[str, Any]], service_needed: str) -> str:
    if not matches:
        return f"No active resources matched '{service_needed}'."
    top = matches[0]
    return (f"{len(matches)} resource(s) matched '{service_needed}'. "
            f"Best match: {top['resource_name']} ({top['match_score']}).")
