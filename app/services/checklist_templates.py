"""
Checklist template service

Staged station checklists (packet, setup, live ops, breakdown) shown in
event-ops mode. The template is picked from the event category.
"""
from typing import Dict, List, Optional, Tuple

from app.database.schemas import ChecklistTemplate, ChecklistStage, ChecklistItem
from app.services.utils import round_half_up

STAGE_ORDER = ["packet", "setup", "live_ops", "breakdown"]

# template id -> (name, {stage key: (stage title, [(item id, text), ...])})
_TEMPLATES: Dict[str, Tuple[str, Dict[str, Tuple[str, List[Tuple[str, str]]]]]] = {
    "health-fair-ops": ("Health Fair Operations", {
        "packet": ("Volunteer Packet", [
            ("hf-p-1", "Review General Screening Consent Form"),
            ("hf-p-2", "Review Standing Orders"),
            ("hf-p-3", "Acknowledge: I will follow screening protocols and escalate abnormal results to the lead clinician"),
            ("hf-p-4", "Acknowledge: No photos of participants without consent, no PHI on personal devices"),
        ]),
        "setup": ("Pre-Event Setup", [
            ("hf-s-1", "Set up canopy, tables, chairs and signage at venue"),
            ("hf-s-2", "Prepare registration and intake station with consent and release forms"),
            ("hf-s-3", "Set up screening stations: BP cuffs, pulse oximeters, thermometers, scales, glucose monitors"),
            ("hf-s-4", "Test all medical equipment and confirm supplies"),
            ("hf-s-5", "Distribute role assignments, lanyards and PPE"),
        ]),
        "live_ops": ("During Event", [
            ("hf-lo-1", "Greet participants and guide them to the correct line"),
            ("hf-lo-2", "Complete intake and consent for every screened participant"),
            ("hf-lo-3", "Record vitals: height, weight, blood pressure, glucose, temperature, O2 saturation"),
            ("hf-lo-4", "Escalate flagged readings to the clinical reviewer"),
            ("hf-lo-5", "Provide referrals as needed and log them"),
        ]),
        "breakdown": ("Post-Event Breakdown", [
            ("hf-b-1", "Collect all forms and tracking logs"),
            ("hf-b-2", "Log final totals: participants served, screenings, referrals"),
            ("hf-b-3", "Dispose of medical waste"),
            ("hf-b-4", "Pack up equipment and account for inventory"),
            ("hf-b-5", "Debrief with clinical lead and note follow-up referrals"),
        ]),
    }),
    "survey-station-ops": ("Survey Station Operations", {
        "packet": ("Volunteer Packet", [
            ("ss-p-1", "Review approved survey script (English and Spanish)"),
            ("ss-p-2", "Acknowledge: I will use only the approved script language"),
            ("ss-p-3", "Acknowledge: One survey per participant"),
        ]),
        "setup": ("Pre-Event Setup", [
            ("ss-s-1", "Set up tables, chairs and Survey Station signage"),
            ("ss-s-2", "Power on tablets and load the survey in kiosk mode"),
            ("ss-s-3", "Place QR codes for survey access at each station"),
        ]),
        "live_ops": ("During Event", [
            ("ss-lo-1", "Welcome participants using the approved script"),
            ("ss-lo-2", "Enforce one survey per participant using phone or email"),
            ("ss-lo-3", "Refresh the survey form after each submission"),
            ("ss-lo-4", "Track engagement count and giveaway distribution"),
        ]),
        "breakdown": ("Post-Event Breakdown", [
            ("ss-b-1", "Log final total of survey responses collected"),
            ("ss-b-2", "Power down and securely store all tablets"),
            ("ss-b-3", "Debrief with event lead on totals and observations"),
        ]),
    }),
    "workshop-event-ops": ("Workshop / Community Event Operations", {
        "packet": ("Volunteer Packet", [
            ("ww-p-1", "Review facilitation guide and presentation materials"),
            ("ww-p-2", "Acknowledge: I will maintain participant confidentiality"),
        ]),
        "setup": ("Pre-Event Setup", [
            ("ww-s-1", "Set up venue: tables, chairs and presentation equipment"),
            ("ww-s-2", "Prepare registration table with sign-in sheets"),
            ("ww-s-3", "Confirm handouts are ready"),
        ]),
        "live_ops": ("During Event", [
            ("ww-lo-1", "Greet and sign in participants"),
            ("ww-lo-2", "Distribute materials and handouts"),
            ("ww-lo-3", "Track attendance count"),
        ]),
        "breakdown": ("Post-Event Breakdown", [
            ("ww-b-1", "Collect sign-in sheets and feedback forms"),
            ("ww-b-2", "Pack up materials and clean the venue"),
            ("ww-b-3", "Debrief with event lead"),
        ]),
    }),
}

_HEALTH_CATEGORY_WORDS = ("health", "screening", "clinic", "wellness", "street medicine")


def template_id_for_category(category: Optional[str]) -> str:
    """
    Survey -> survey station, health/screening/clinic -> health fair, else workshop
    """
    text = (category or "").lower()
    if "survey" in text:
        return "survey-station-ops"
    if any(word in text for word in _HEALTH_CATEGORY_WORDS):
        return "health-fair-ops"
    return "workshop-event-ops"


def get_template(template_id: str) -> ChecklistTemplate:
    """
    Build a checklist template by id

    Raises:
        KeyError: Unknown template id
    """
    name, stages = _TEMPLATES[template_id]
    built = []
    for key in STAGE_ORDER:
        title, items = stages[key]
        built.append(ChecklistStage(
            key=key,
            title=title,
            items=[ChecklistItem(id=item_id, title=text, order=i) for i, (item_id, text) in enumerate(items, start=1)],
        ))
    return ChecklistTemplate(id=template_id, name=name, stages=built)


def template_for_category(category: Optional[str]) -> ChecklistTemplate:
    return get_template(template_id_for_category(category))


def checklist_progress(template: ChecklistTemplate, completed_items: List[str]) -> Dict[str, int]:
    """
    Count completed items that belong to the template
    """
    item_ids = {item.id for stage in template.stages for item in stage.items}
    completed = len(item_ids.intersection(completed_items or []))
    total = len(item_ids)
    percent = round_half_up(completed / total * 100) if total else 0
    return {"completed": completed, "total": total, "percent": percent}
