"""
Utility functions shared by services and API routes
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Optional, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Current UTC time as an ISO-8601 string (stored timestamps sort as text)
    """
    return utc_now().isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored ISO timestamp or date

    Accepts a trailing 'Z' and bare YYYY-MM-DD dates. Naive values are
    treated as UTC. Returns None for empty or unparseable input.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def convert_datetime_to_iso(data: Dict[str, Any], fields: list[str]) -> Dict[str, Any]:
    """
    Convert datetime objects to ISO strings for JSON storage

    Args:
        data: Dictionary to convert
        fields: List of field names to convert

    Returns:
        Dictionary with datetime fields converted to ISO strings
    """
    result = data.copy()
    for field in fields:
        if isinstance(result.get(field), datetime):
            result[field] = result[field].isoformat()
    return result


def client_display_name(client: Optional[Dict[str, Any]]) -> str:
    """
    "First Last" for a stored client, "Unknown" when missing
    """
    if not client:
        return "Unknown"
    name = f"{client.get('first_name') or ''} {client.get('last_name') or ''}".strip()
    return name or "Unknown"


def round_half_up(value: float, digits: int = 0) -> Union[int, float]:
    """
    Round with ties away from zero (2.25 -> 2.3, 12.5 -> 13)

    Built-in round() sends ties to the even neighbour, which makes
    reported percentages and averages disagree with the portal.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)
