"""
Vitals flag thresholds and derived follow-up
"""
import pytest

from app.services.vitals import (
    blood_pressure_flag,
    glucose_flag,
    evaluate_vitals,
    resolve_follow_up,
    compute_bmi,
    suggest_service_needed,
    suggest_urgency,
)


@pytest.mark.parametrize("systolic,diastolic,level,label", [
    (118, 76, "normal", "Normal"),
    (122, 78, "low", "Elevated"),
    (128, 80, "medium", "Stage 1 Hypertension"),
    (130, 70, "medium", "Stage 1 Hypertension"),
    (139, 89, "medium", "Stage 1 Hypertension"),
    (140, 70, "high", "Stage 2 Hypertension"),
    (120, 90, "high", "Stage 2 Hypertension"),
    (180, 100, "critical", "Hypertensive Crisis"),
    (150, 120, "critical", "Hypertensive Crisis"),
])
def test_blood_pressure_levels(systolic, diastolic, level, label):
    flag = blood_pressure_flag(systolic, diastolic)
    assert flag["level"] == level
    assert flag["label"] == label


def test_elevated_ignores_diastolic():
    # Diastolic alone below 80 never makes a reading "Elevated"
    assert blood_pressure_flag(110, 79)["level"] == "normal"


@pytest.mark.parametrize("value,level", [
    (99, "normal"),
    (139, "normal"),
    (140, "medium"),
    (199, "medium"),
    (200, "high"),
    (299, "high"),
    (300, "critical"),
])
def test_glucose_levels(value, level):
    assert glucose_flag(value)["level"] == level


def test_evaluate_normal_vitals_stores_no_flags():
    result = evaluate_vitals({"systolic": 115, "diastolic": 75, "glucose": 90})
    assert result["flags"] == {"blood_pressure": None, "glucose": None}
    assert result["has_flags"] is False
    assert result["abnormal"] is False


def test_evaluate_requires_both_bp_numbers():
    result = evaluate_vitals({"systolic": 200})
    assert result["flags"]["blood_pressure"] is None
    assert result["abnormal"] is False


def test_stage_one_is_abnormal_but_not_has_flags():
    result = evaluate_vitals({"systolic": 132, "diastolic": 82})
    assert result["flags"]["blood_pressure"]["level"] == "medium"
    assert result["abnormal"] is True
    assert result["has_flags"] is False


def test_high_glucose_sets_has_flags():
    result = evaluate_vitals({"glucose": 250})
    assert result["flags"]["glucose"]["label"] == "Diabetes Range"
    assert result["has_flags"] is True


def test_follow_up_auto_flag_uses_default_reason():
    assert resolve_follow_up(False, None, True) == {
        "follow_up_needed": True,
        "follow_up_reason": "Abnormal vitals flagged",
    }


def test_follow_up_requested_keeps_reason():
    result = resolve_follow_up(True, "Dizziness reported", False)
    assert result["follow_up_needed"] is True
    assert result["follow_up_reason"] == "Dizziness reported"


def test_no_follow_up_clears_reason():
    assert resolve_follow_up(False, "ignored", False) == {"follow_up_needed": False, "follow_up_reason": None}


def test_compute_bmi():
    assert compute_bmi(70, 175) == 22.9
    assert compute_bmi(None, 175) is None
    assert compute_bmi(70, None) is None


def test_suggestions_follow_most_severe_flag():
    critical_bp = {"blood_pressure": blood_pressure_flag(185, 100), "glucose": None}
    assert suggest_service_needed(critical_bp) == "Blood Pressure Management - Hypertensive Crisis"
    assert suggest_urgency(critical_bp) == "Emergency"

    high_glucose = {"blood_pressure": None, "glucose": glucose_flag(220)}
    assert suggest_service_needed(high_glucose) == "Glucose Management - Elevated"
    assert suggest_urgency(high_glucose) == "Urgent"

    mild = {"blood_pressure": blood_pressure_flag(132, 70), "glucose": None}
    assert suggest_service_needed(mild) == "Medical Follow-Up Needed"
    assert suggest_urgency(mild) == "Standard"
