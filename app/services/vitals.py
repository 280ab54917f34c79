"""
Vitals flagging

Threshold classification for blood pressure and glucose readings taken at
screening stations. Flags are computed on the server when a screening is
created so every client sees the same severity.

Levels, lowest to highest: normal, low (elevated), medium, high, critical
"""
from typing import Dict, Any, Optional

from app.services.utils import round_half_up

LEVEL_ORDER = ["normal", "low", "medium", "high", "critical"]

# (level, label, color) ordered from most to least severe
_BP_CRITICAL = ("critical", "Hypertensive Crisis", "rose")
_BP_HIGH = ("high", "Stage 2 Hypertension", "orange")
_BP_MEDIUM = ("medium", "Stage 1 Hypertension", "amber")
_BP_LOW = ("low", "Elevated", "yellow")
_BP_NORMAL = ("normal", "Normal", "emerald")

_GLUCOSE_CRITICAL = ("critical", "Critical - Seek Care", "rose")
_GLUCOSE_HIGH = ("high", "Diabetes Range", "orange")
_GLUCOSE_MEDIUM = ("medium", "Prediabetes Range", "amber")
_GLUCOSE_NORMAL = ("normal", "Normal", "emerald")

DEFAULT_FOLLOW_UP_REASON = "Abnormal vitals flagged"


def _flag(entry) -> Dict[str, str]:
    level, label, color = entry
    return {"level": level, "label": label, "color": color}


def blood_pressure_flag(systolic: float, diastolic: float) -> Dict[str, str]:
    """
    Classify a blood pressure reading

    Either number crossing a threshold is enough for that level.
    Elevated only looks at systolic.
    """
    if systolic >= 180 or diastolic >= 120:
        return _flag(_BP_CRITICAL)
    if systolic >= 140 or diastolic >= 90:
        return _flag(_BP_HIGH)
    if systolic >= 130 or diastolic >= 80:
        return _flag(_BP_MEDIUM)
    if systolic >= 120:
        return _flag(_BP_LOW)
    return _flag(_BP_NORMAL)


def glucose_flag(mg_dl: float) -> Dict[str, str]:
    """
    Classify a blood glucose reading (mg/dL)
    """
    if mg_dl >= 300:
        return _flag(_GLUCOSE_CRITICAL)
    if mg_dl >= 200:
        return _flag(_GLUCOSE_HIGH)
    if mg_dl >= 140:
        return _flag(_GLUCOSE_MEDIUM)
    return _flag(_GLUCOSE_NORMAL)


def level_at_least(flag: Optional[Dict[str, Any]], level: str) -> bool:
    if not flag:
        return False
    return LEVEL_ORDER.index(flag.get("level", "normal")) >= LEVEL_ORDER.index(level)


def evaluate_vitals(vitals: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compute stored flags for a set of vitals

    Args:
        vitals: Dict with optional systolic, diastolic and glucose

    Returns:
        {
            "flags": {"blood_pressure": flag or None, "glucose": flag or None},
            "has_flags": True if any flag is high or critical,
            "abnormal": True if any flag is above normal,
        }
    """
    systolic = vitals.get("systolic")
    diastolic = vitals.get("diastolic")
    glucose = vitals.get("glucose")

    flags: Dict[str, Optional[Dict[str, str]]] = {"blood_pressure": None, "glucose": None}

    # BP needs both numbers
    if systolic is not None and diastolic is not None:
        bp = blood_pressure_flag(systolic, diastolic)
        if bp["level"] != "normal":
            flags["blood_pressure"] = bp

    if glucose is not None:
        gl = glucose_flag(glucose)
        if gl["level"] != "normal":
            flags["glucose"] = gl

    present = [f for f in flags.values() if f]
    return {
        "flags": flags,
        "has_flags": any(level_at_least(f, "high") for f in present),
        "abnormal": len(present) > 0,
    }


def resolve_follow_up(requested: bool, reason: Optional[str], has_flags: bool) -> Dict[str, Any]:
    """
    Follow-up is needed when the screener asked for it or a high/critical flag exists
    """
    needed = bool(requested) or has_flags
    if not needed:
        return {"follow_up_needed": False, "follow_up_reason": None}
    return {"follow_up_needed": True, "follow_up_reason": reason or DEFAULT_FOLLOW_UP_REASON}


def compute_bmi(weight_kg: Optional[float], height_cm: Optional[float]) -> Optional[float]:
    """
    Body mass index rounded to one decimal, None when either input is missing
    """
    if not weight_kg or not height_cm:
        return None
    height_m = height_cm / 100.0
    return round_half_up(weight_kg / (height_m * height_m), 1)


def suggest_service_needed(flags: Dict[str, Any]) -> str:
    bp = (flags or {}).get("blood_pressure")
    glucose = (flags or {}).get("glucose")
    if bp and bp.get("level") == "critical":
        return "Blood Pressure Management - Hypertensive Crisis"
    if bp and bp.get("level") == "high":
        return "Blood Pressure Management - Elevated"
    if glucose and glucose.get("level") == "critical":
        return "Glucose Management - Critical"
    if glucose and glucose.get("level") == "high":
        return "Glucose Management - Elevated"
    return "Medical Follow-Up Needed"


def suggest_urgency(flags: Dict[str, Any]) -> str:
    """
    critical -> Emergency, high -> Urgent, anything else -> Standard
    """
    present = [f for f in (flags or {}).values() if f]
    if any(f.get("level") == "critical" for f in present):
        return "Emergency"
    if any(f.get("level") == "high" for f in present):
        return "Urgent"
    return "Standard"
