"""
Shared role constants

Single source of truth for role-string checks. Callers arrive with an
already-resolved role, these lists only decide what that role may do.
"""

EVENT_MANAGEMENT_ROLES = [
    "Events Lead",
    "Events Coordinator",
    "Program Coordinator",
    "General Operations Coordinator",
    "Operations Coordinator",
    "Outreach & Engagement Lead",
]

BOARD_ROLES = ["Board Member", "Community Advisory Board"]

COORDINATOR_AND_LEAD_ROLES = [
    "Events Lead",
    "Events Coordinator",
    "Program Coordinator",
    "General Operations Coordinator",
    "Operations Coordinator",
    "Development Coordinator",
    "Outreach & Engagement Lead",
    "Volunteer Lead",
]

ORG_CALENDAR_ROLES = COORDINATOR_AND_LEAD_ROLES + ["Board Member"]

# Licensed staff who may clear the screening review queue
CLINICAL_REVIEW_ROLES = [
    "Licensed Medical Professional",
    "Medical Admin",
    "Clinical Lead",
]

# Field staff allowed to look up and register clients
INTAKE_ROLES = COORDINATOR_AND_LEAD_ROLES + CLINICAL_REVIEW_ROLES + [
    "Core Volunteer",
    "Medical Volunteer",
]

# Case management: referrals, resources and the flagged-screenings list
REFERRAL_ROLES = COORDINATOR_AND_LEAD_ROLES + CLINICAL_REVIEW_ROLES
