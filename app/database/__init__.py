"""
Database module

Contains both data models (schemas) and storage operations.
"""

# Export schemas
from app.database.schemas import (
    Client,
    Screening,
    Referral,
    ReferralResource,
    PartnerAgency,
    Feedback,
    Incident,
    AuditLog,
    OpsRun,
    OrgCalendarEvent,
    Opportunity,
)

# Export storage functions for convenience
from app.database.storage import (
    read_json,
    write_json,
    list_records,
    get_record,
    find_records,
    insert_record,
    update_record,
    upsert_record,
    delete_record,
    clear_cache,
)

# Routes import the module as `database`
from app.database import storage

__all__ = [
    # Schemas
    "Client",
    "Screening",
    "Referral",
    "ReferralResource",
    "PartnerAgency",
    "Feedback",
    "Incident",
    "AuditLog",
    "OpsRun",
    "OrgCalendarEvent",
    "Opportunity",
    # Storage functions
    "read_json",
    "write_json",
    "list_records",
    "get_record",
    "find_records",
    "insert_record",
    "update_record",
    "upsert_record",
    "delete_record",
    "clear_cache",
    # Storage module
    "storage",
]
