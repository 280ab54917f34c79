"""
Record models

- Flat records exchanged verbatim with the API and stored as JSON
- Pydantic provides automatic validation at the API boundary
- Timestamps are ISO-8601 strings (UTC) so stored records sort as text
- Optional fields for flexibility; derived fields are filled in by the server
"""
from typing import Optional, Dict, Any, List, Literal
from datetime import datetime, date
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict


def _validate_iso_date(value: Optional[str], field_name: str, allow_future: bool = True) -> Optional[str]:
    if value is None or value == "":
        return value
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"{field_name} must be in YYYY-MM-DD format")
    if not allow_future and parsed > date.today():
        raise ValueError(f"{field_name} cannot be in the future")
    return value


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

HousingStatus = Literal["housed", "unhoused", "transitional", "shelter", "unknown"]
ClientStatus = Literal["Active", "Inactive", "Closed"]


class ClientInput(BaseModel):
    """
    Client intake form (new client registration)
    """
    model_config = ConfigDict(extra="ignore")
    first_name: str                        = Field(..., min_length=1, description="Legal first name")
    last_name: str                         = Field(..., min_length=1, description="Legal last name")
    preferred_name: Optional[str]          = Field(None, description="Name the client prefers to be called")
    dob: Optional[str]                     = Field(None, description="Date of birth (format: YYYY-MM-DD)")
    phone: Optional[str]                   = Field(None, description="Phone number")
    email: Optional[str]                   = Field(None, description="Email address")
    gender: Optional[str]                  = Field(None, description="Gender identity")
    pronouns: Optional[str]                = Field(None, description="Pronouns")
    primary_language: Optional[str]        = Field(None, description="Primary spoken language")
    housing_status: Optional[HousingStatus] = Field(None, description="Housing situation at intake")
    identifying_info: Optional[str]        = Field(None, description="Physical description, known alias or camp location")
    address: Optional[str]                 = Field(None, description="Street address")
    city: Optional[str]                    = Field(None, description="City")
    zip_code: Optional[str]                = Field(None, description="ZIP code")
    spa: Optional[str]                     = Field(None, description="Service Planning Area")
    needs: Dict[str, Any]                  = Field(default_factory=dict, description="Social determinant needs (housing, food, ...)")
    insurance_status: Optional[str]        = Field(None, description="Insurance status")
    consent_to_share: Optional[bool]       = Field(None, description="Consent to share data with partner agencies")

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso_date(value, "dob", allow_future=False)


class ClientUpdate(BaseModel):
    """
    Client update model (all fields optional)
    """
    model_config = ConfigDict(extra="ignore")
    first_name: Optional[str]              = None
    last_name: Optional[str]               = None
    preferred_name: Optional[str]          = None
    dob: Optional[str]                     = None
    phone: Optional[str]                   = None
    email: Optional[str]                   = None
    gender: Optional[str]                  = None
    pronouns: Optional[str]                = None
    primary_language: Optional[str]        = None
    housing_status: Optional[HousingStatus] = None
    identifying_info: Optional[str]        = None
    address: Optional[str]                 = None
    city: Optional[str]                    = None
    zip_code: Optional[str]                = None
    spa: Optional[str]                     = None
    needs: Optional[Dict[str, Any]]        = None
    insurance_status: Optional[str]        = None
    consent_to_share: Optional[bool]       = None
    status: Optional[ClientStatus]         = None

    @field_validator("dob")
    @classmethod
    def validate_dob(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso_date(value, "dob", allow_future=False)


class Client(ClientInput):
    """
    Stored client record
    """
    id: Optional[str]                      = Field(None, description="Client unique identifier (auto-generated)")
    status: ClientStatus                   = Field("Active", description="Client case status")
    intake_by: Optional[str]               = Field(None, description="User ID of the volunteer who registered the client")
    created_at: Optional[str]              = Field(None, description="Creation timestamp (ISO-8601)")
    updated_at: Optional[str]              = Field(None, description="Last update timestamp (ISO-8601)")


class ClientSearchRequest(BaseModel):
    """
    Client lookup by phone, email or name

    shift_id/event_id are only used to attribute the audit entry
    """
    phone: Optional[str]    = Field(None, description="Phone number (digits compared)")
    email: Optional[str]    = Field(None, description="Email address (case-insensitive)")
    name: Optional[str]     = Field(None, description="Full or partial name")
    shift_id: Optional[str] = Field(None, description="Shift the search happened in")
    event_id: Optional[str] = Field(None, description="Event the search happened in")


class ClientSearchMultiple(BaseModel):
    multiple: bool        = True
    results: List[Client] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Health screenings
# ---------------------------------------------------------------------------

FlagLevel = Literal["normal", "low", "medium", "high", "critical"]
ClinicalAction = Literal["Cleared", "Referred to ER", "Follow-up Scheduled", "Additional Testing"]


class Vitals(BaseModel):
    """
    Vitals captured at a screening station
    """
    systolic: Optional[float]    = Field(None, ge=40, le=300, description="Systolic blood pressure (mmHg)")
    diastolic: Optional[float]   = Field(None, ge=20, le=200, description="Diastolic blood pressure (mmHg)")
    heart_rate: Optional[float]  = Field(None, ge=20, le=250, description="Heart rate (bpm)")
    glucose: Optional[float]     = Field(None, ge=10, le=1000, description="Blood glucose (mg/dL)")
    temperature: Optional[float] = Field(None, ge=85, le=110, description="Body temperature (F)")
    weight: Optional[float]      = Field(None, ge=1, le=700, description="Weight (kg)")
    height: Optional[float]      = Field(None, ge=30, le=250, description="Height (cm)")
    oxygen_sat: Optional[float]  = Field(None, ge=50, le=100, description="Oxygen saturation (%)")


class VitalFlag(BaseModel):
    level: FlagLevel = Field(..., description="Severity level")
    label: str       = Field(..., description="Clinical label, e.g. 'Stage 2 Hypertension'")
    color: str       = Field(..., description="Display color hint")


class ScreeningFlags(BaseModel):
    blood_pressure: Optional[VitalFlag] = None
    glucose: Optional[VitalFlag]        = None


class ScreeningInput(BaseModel):
    """
    Screening form submission

    Flags, BMI and follow-up are derived on the server from the vitals
    """
    client_id: str                     = Field(..., description="Client being screened")
    shift_id: Optional[str]            = Field(None, description="Shift the screening happened in")
    event_id: Optional[str]            = Field(None, description="Event the screening happened at")
    vitals: Vitals                     = Field(..., description="Measured vitals")
    notes: Optional[str]               = Field(None, description="Free-text screener notes")
    follow_up_needed: bool             = Field(False, description="Screener requested clinical follow-up")
    follow_up_reason: Optional[str]    = Field(None, description="Why follow-up was requested")

    @model_validator(mode="after")
    def require_primary_reading(self):
        if self.vitals.systolic is None and self.vitals.glucose is None:
            raise ValueError("A blood pressure or glucose reading is required")
        return self


class Screening(BaseModel):
    """
    Stored screening record
    """
    id: Optional[str]                  = None
    client_id: str
    client_name: Optional[str]         = None
    volunteer_id: Optional[str]        = None
    shift_id: Optional[str]            = None
    event_id: Optional[str]            = None
    vitals: Vitals
    flags: ScreeningFlags              = Field(default_factory=ScreeningFlags)
    bmi: Optional[float]               = None
    abnormal_flag: bool                = False
    notes: Optional[str]               = None
    follow_up_needed: bool             = False
    follow_up_reason: Optional[str]    = None
    created_at: Optional[str]          = None
    timestamp: Optional[str]           = None
    reviewed_at: Optional[str]         = None
    reviewed_by: Optional[str]         = None
    reviewed_by_name: Optional[str]    = None
    review_notes: Optional[str]        = None
    clinical_action: Optional[ClinicalAction] = None
    referral_id: Optional[str]         = None


class ScreeningReview(BaseModel):
    """
    Clinical review submitted from the review queue
    """
    review_notes: Optional[str]       = Field(None, description="Reviewer notes")
    clinical_action: ClinicalAction   = Field("Cleared", description="Outcome of the review")


class ScreeningFeed(BaseModel):
    """
    Live feed summary for one event (polled by the station tablets)
    """
    event_id: str
    screenings: List[Screening]        = Field(default_factory=list)
    total: int                         = 0
    flagged_count: int                 = 0
    awaiting_review: int               = 0
    has_new_critical: bool             = False
    latest_created_at: Optional[str]   = None


class FlaggedScreening(BaseModel):
    """
    Flagged screening joined with its client and referral
    """
    id: str
    client_id: Optional[str]
    client_name: str
    date: Optional[str]
    event_id: Optional[str]
    flags: ScreeningFlags
    follow_up_needed: bool
    abnormal_flag: bool
    clinical_action: Optional[str]      = None
    reviewed_by: Optional[str]          = None
    vitals: Dict[str, Optional[float]]
    has_referral: bool                  = False
    referral_status: Optional[str]      = None
    suggested_service: str
    suggested_urgency: str


class ScreeningReferralRequest(BaseModel):
    resource_id: Optional[str] = Field(None, description="Resource to refer the client to")
    notes: Optional[str]       = Field(None, description="Referral notes")


# ---------------------------------------------------------------------------
# Referrals
# ---------------------------------------------------------------------------

ReferralStatus = Literal["Pending", "In Progress", "Completed", "Cancelled", "Withdrawn", "No Show"]
Urgency = Literal["Standard", "Urgent", "Emergency"]
SlaComplianceStatus = Literal["Compliant", "Non-Compliant", "On Track", "Excluded"]
Outcome = Literal["Successful", "Unsuccessful", "Partial", "Pending"]


class ReferralInput(BaseModel):
    """
    New referral for a client
    """
    client_id: str                   = Field(..., description="Client being referred")
    client_name: Optional[str]       = Field(None, description="Denormalized client name (filled from client when omitted)")
    service_needed: str              = Field(..., min_length=1, description="Service the client needs")
    service_category: Optional[str]  = Field(None, description="Service category")
    referred_to: Optional[str]       = Field(None, description="Resource name the client is referred to")
    referred_to_id: Optional[str]    = Field(None, description="Resource ID the client is referred to")
    urgency: Urgency                 = Field("Standard", description="Referral urgency")
    notes: Optional[str]             = Field(None, description="Referral notes")
    event_id: Optional[str]          = Field(None, description="Event the referral originated at")
    screening_id: Optional[str]      = Field(None, description="Screening the referral originated from")


class ReferralUpdate(BaseModel):
    """
    Referral update model (all fields optional)
    """
    model_config = ConfigDict(extra="ignore")
    status: Optional[ReferralStatus]      = None
    urgency: Optional[Urgency]            = None
    service_needed: Optional[str]         = None
    service_category: Optional[str]       = None
    referred_to: Optional[str]            = None
    referred_to_id: Optional[str]         = None
    notes: Optional[str]                  = None
    first_contact_date: Optional[str]     = None
    follow_up_date: Optional[str]         = None
    follow_up_notes: Optional[str]        = None
    outcome: Optional[Outcome]            = None
    outcome_details: Optional[str]        = None
    outcome_date: Optional[str]           = None
    client_satisfaction: Optional[int]    = Field(None, ge=1, le=5)
    client_feedback: Optional[str]        = None
    partner_response_date: Optional[str]  = None
    partner_notes: Optional[str]          = None


class Referral(ReferralInput):
    """
    Stored referral record
    """
    model_config = ConfigDict(extra="ignore")
    id: Optional[str]                           = None
    client_name: str                            = ""
    status: ReferralStatus                      = "Pending"
    referral_date: Optional[str]                = None
    referred_by: Optional[str]                  = None
    referred_by_name: Optional[str]             = None
    created_at: Optional[str]                   = None
    updated_at: Optional[str]                   = None
    sla_deadline: Optional[str]                 = None
    sla_compliance_status: Optional[SlaComplianceStatus] = None
    first_contact_date: Optional[str]           = None
    first_contact_by: Optional[str]             = None
    follow_up_date: Optional[str]               = None
    follow_up_notes: Optional[str]              = None
    outcome: Optional[Outcome]                  = None
    outcome_details: Optional[str]              = None
    outcome_date: Optional[str]                 = None
    client_satisfaction: Optional[int]          = None
    client_feedback: Optional[str]              = None
    partner_response_date: Optional[str]        = None
    partner_notes: Optional[str]                = None


class SlaCountdown(BaseModel):
    deadline: Optional[str]
    hours_remaining: float
    is_overdue: bool


class ReferralDetail(Referral):
    sla: SlaCountdown


class SlaReport(BaseModel):
    total: int                         = 0
    compliant: int                     = 0
    non_compliant: int                 = 0
    on_track: int                      = 0
    pending: int                       = 0
    by_status: Dict[str, int]          = Field(default_factory=dict)
    by_urgency: Dict[str, int]         = Field(default_factory=dict)
    avg_response_time_hours: float     = 0
    compliance_rate: Optional[int]     = None


class ReferralDashboard(BaseModel):
    active_clients: int
    pending_referrals: int
    urgent_referrals: int
    completed_this_month: int
    sla_compliance_rate: Optional[int]
    active_resources: int


# ---------------------------------------------------------------------------
# Resources, partner agencies, feedback
# ---------------------------------------------------------------------------

PartnerType = Literal["Healthcare", "Housing", "Food", "Legal", "Employment", "Mental Health", "Other"]
PartnerStatus = Literal["Active", "Inactive", "Pending"]


class ReferralResource(BaseModel):
    """
    Community resource a client can be referred to
    """
    model_config = ConfigDict(extra="ignore")
    id: Optional[str]                   = None
    resource_name: str                  = Field(..., min_length=1, description="Resource name")
    service_category: Optional[str]     = None
    key_offerings: Optional[str]        = None
    eligibility_criteria: Optional[str] = None
    languages_spoken: Optional[str]     = None
    target_population: Optional[str]    = None
    operation_hours: Optional[str]      = None
    contact_phone: Optional[str]        = None
    contact_email: Optional[str]        = None
    address: Optional[str]              = None
    website: Optional[str]              = None
    spa: Optional[str]                  = None
    active: bool                        = True
    partner_agency_id: Optional[str]    = None
    average_rating: Optional[float]     = None
    total_referrals: Optional[int]      = None
    last_feedback_date: Optional[str]   = None
    created_at: Optional[str]           = None


class BulkImportRequest(BaseModel):
    csv_data: str = Field(..., description="Base64-encoded CSV with a header row")


class BulkImportResult(BaseModel):
    success: bool = True
    imported_count: int
    skipped_count: int


class PartnerAgencyInput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    name: str                            = Field(..., min_length=1)
    type: PartnerType                    = "Other"
    contact_name: Optional[str]          = None
    contact_email: Optional[str]         = None
    contact_phone: Optional[str]         = None
    address: Optional[str]               = None
    website: Optional[str]               = None
    spa: Optional[str]                   = None
    services_provided: List[str]         = Field(default_factory=list)
    languages_supported: List[str]       = Field(default_factory=list)
    target_populations: List[str]        = Field(default_factory=list)
    portal_access: Optional[bool]        = None
    notes: Optional[str]                 = None


class PartnerAgencyUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")
    name: Optional[str]                  = None
    type: Optional[PartnerType]          = None
    contact_name: Optional[str]          = None
    contact_email: Optional[str]         = None
    contact_phone: Optional[str]         = None
    address: Optional[str]               = None
    website: Optional[str]               = None
    spa: Optional[str]                   = None
    services_provided: Optional[List[str]] = None
    languages_supported: Optional[List[str]] = None
    target_populations: Optional[List[str]] = None
    portal_access: Optional[bool]        = None
    status: Optional[PartnerStatus]      = None
    notes: Optional[str]                 = None


class PartnerAgency(PartnerAgencyInput):
    id: Optional[str]                    = None
    status: PartnerStatus                = "Active"
    created_at: Optional[str]            = None
    updated_at: Optional[str]            = None


class FeedbackInput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    type: Literal["service", "event"]    = "service"
    referral_id: Optional[str]           = None
    event_id: Optional[str]              = None
    client_id: Optional[str]             = None
    resource_id: Optional[str]           = None
    resource_name: Optional[str]         = None
    rating: int                          = Field(..., ge=1, le=5, description="Rating from 1 to 5")
    comments: Optional[str]              = None
    would_recommend: Optional[bool]      = None


class Feedback(FeedbackInput):
    id: Optional[str]                    = None
    submitted_at: Optional[str]          = None
    submitted_by: Optional[str]          = None


class MatchRequest(BaseModel):
    service_needed: str            = Field(..., min_length=1, description="Client need in plain words")
    client_id: Optional[str]       = Field(None, description="Client to tailor matches to (language, SPA)")
    screening_id: Optional[str]    = Field(None, description="Flagged screening; adds medical keywords")
    limit: int                     = Field(5, ge=1, le=20)
    use_ai: Optional[bool]         = Field(None, description="True requires AI, False forces keywords, None picks AI when configured")


class ResourceMatch(BaseModel):
    resource_id: Optional[str]
    resource_name: str
    match_score: float
    match_reason: str


class MatchResponse(BaseModel):
    matches: List[ResourceMatch] = Field(default_factory=list)
    summary: str
    source: Literal["ai", "keyword"]


# ---------------------------------------------------------------------------
# Event operations: checklists, incidents, sign-off, audit
# ---------------------------------------------------------------------------

IncidentType = Literal["EMS activation", "Exposure incident", "Safety/security issue", "Other"]


class ChecklistItem(BaseModel):
    """
    Individual task in a station checklist
    """
    id: str                           = Field(..., description="Unique identifier for the checklist item (e.g., 'hf-s-1')")
    title: str                        = Field(..., description="Task text shown to the volunteer")
    order: int                        = Field(..., description="Display order within its stage (1-based)")


class ChecklistStage(BaseModel):
    key: str                          = Field(..., description="Stage key: packet, setup, live_ops, breakdown")
    title: str
    items: List[ChecklistItem]


class ChecklistTemplate(BaseModel):
    id: str
    name: str
    stages: List[ChecklistStage]


class OpsRun(BaseModel):
    """
    One volunteer's run through a shift: completed tasks and sign-off
    """
    id: str
    shift_id: Optional[str]           = None
    volunteer_id: Optional[str]       = None
    completed_items: List[str]        = Field(default_factory=list)
    signoff_signature: Optional[str]  = None
    signoff_timestamp: Optional[str]  = None
    updated_at: Optional[str]         = None


class ChecklistUpdate(BaseModel):
    run_id: str
    shift_id: Optional[str]           = None
    completed_items: List[str]        = Field(default_factory=list)


class SignoffRequest(BaseModel):
    run_id: str
    shift_id: Optional[str]           = None
    event_id: Optional[str]           = None
    signature: str                    = Field(..., description="Captured signature (data URL or typed name)")


class IncidentInput(BaseModel):
    shift_id: str
    event_id: Optional[str]           = None
    type: IncidentType                = "Other"
    description: str                  = Field(..., min_length=1)
    actions_taken: Optional[str]      = ""
    who_notified: Optional[str]       = ""


class Incident(IncidentInput):
    id: Optional[str]                 = None
    volunteer_id: Optional[str]       = None
    timestamp: Optional[str]          = None
    status: Literal["reported", "resolved"] = "reported"
    resolved_at: Optional[str]        = None
    resolved_by: Optional[str]        = None


class AuditEntryInput(BaseModel):
    action_type: str                  = Field(..., min_length=1)
    summary: str
    shift_id: Optional[str]           = None
    event_id: Optional[str]           = None
    target_system: Optional[str]      = None
    target_id: Optional[str]          = None


class AuditLog(AuditEntryInput):
    id: Optional[str]                 = None
    timestamp: str
    actor_user_id: Optional[str]      = None
    actor_role: Optional[str]         = None


class ChecklistProgress(BaseModel):
    completed: int
    total: int
    percent: int


class OpsRunView(BaseModel):
    ops_run: OpsRun
    incidents: List[Incident]         = Field(default_factory=list)
    audit_logs: List[AuditLog]        = Field(default_factory=list)
    checklist: ChecklistTemplate
    progress: ChecklistProgress


# ---------------------------------------------------------------------------
# Organization calendar
# ---------------------------------------------------------------------------

CalendarEventType = Literal[
    "all-hands", "committee", "training", "social", "community-event", "board", "mission", "other"
]
RsvpStatus = Literal["attending", "tentative", "declined"]


class CalendarRsvp(BaseModel):
    user_id: str
    user_name: str
    status: RsvpStatus
    responded_at: Optional[str] = None


class OrgCalendarEventInput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str                          = Field(..., min_length=1)
    date: str                           = Field(..., description="Event date (format: YYYY-MM-DD)")
    start_time: str                     = Field(..., description="Start time, e.g. '10:00 AM'")
    end_time: Optional[str]             = None
    type: CalendarEventType             = "other"
    location: Optional[str]             = None
    meet_link: Optional[str]            = None
    description: Optional[str]          = None
    is_recurring: bool                  = False
    recurrence_note: Optional[str]      = None
    visible_to: Optional[List[str]]     = Field(None, description="Roles that can see the event; empty means everyone")

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _validate_iso_date(value, "date")


class OrgCalendarEventUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: Optional[str]                = None
    date: Optional[str]                 = None
    start_time: Optional[str]           = None
    end_time: Optional[str]             = None
    type: Optional[CalendarEventType]   = None
    location: Optional[str]             = None
    meet_link: Optional[str]            = None
    description: Optional[str]          = None
    is_recurring: Optional[bool]        = None
    recurrence_note: Optional[str]      = None
    visible_to: Optional[List[str]]     = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso_date(value, "date")


class OrgCalendarEvent(BaseModel):
    """
    Calendar entry as returned by the merged calendar feed
    """
    id: str
    title: str
    description: Optional[str]          = None
    date: str
    start_time: Optional[str]           = ""
    end_time: Optional[str]             = None
    type: CalendarEventType             = "other"
    location: Optional[str]             = None
    meet_link: Optional[str]            = None
    visible_to: Optional[List[str]]     = None
    rsvps: List[CalendarRsvp]           = Field(default_factory=list)
    is_recurring: bool                  = False
    recurrence_note: Optional[str]      = None
    created_by: Optional[str]           = None
    created_at: Optional[str]           = None
    updated_at: Optional[str]           = None
    source: Literal["org-calendar", "board-meeting", "event-finder", "mission"] = "org-calendar"


class CalendarRsvpRequest(BaseModel):
    status: str = Field(..., description="attending, tentative or declined")


class CalendarRsvpResponse(BaseModel):
    success: bool = True
    rsvps: List[CalendarRsvp]


class CalendarRsvpSummary(BaseModel):
    event_id: str
    attending: int = 0
    tentative: int = 0
    declined: int = 0
    rsvps: List[CalendarRsvp] = Field(default_factory=list)


class BoardMeetingInput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str                          = "Board Meeting"
    date: str
    time: Optional[str]                 = ""
    type: Literal["board", "committee", "cab"] = "board"
    agenda: List[str]                   = Field(default_factory=list)
    google_meet_link: Optional[str]     = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _validate_iso_date(value, "date")


# ---------------------------------------------------------------------------
# Community events (opportunities) and the public RSVP flow
# ---------------------------------------------------------------------------

ApprovalStatus = Literal["pending", "approved", "rejected"]


class OpportunityInput(BaseModel):
    model_config = ConfigDict(extra="ignore")
    title: str                          = Field(..., min_length=1)
    date: str                           = Field(..., description="Event date (format: YYYY-MM-DD)")
    time: Optional[str]                 = None
    start_time: Optional[str]           = None
    category: Optional[str]             = None
    program: Optional[str]              = None
    description: Optional[str]          = None
    location: Optional[str]             = None
    service_location: Optional[str]     = None
    address: Optional[str]              = None
    city: Optional[str]                 = None
    is_public_facing: bool              = True
    save_the_date: bool                 = False
    flyer_url: Optional[str]            = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return _validate_iso_date(value, "date")


class Opportunity(OpportunityInput):
    id: Optional[str]                   = None
    approval_status: ApprovalStatus     = "pending"
    rsvp_count: int                     = 0
    checkin_count: int                  = 0
    created_by: Optional[str]           = None
    created_at: Optional[str]           = None


class PublicEvent(BaseModel):
    id: str
    title: str
    date: str
    time: str
    location: str
    city: str                           = "Los Angeles"
    address: str                        = ""
    program: str
    description: str                    = ""
    save_the_date: bool                 = False
    flyer_url: Optional[str]            = None


class PublicRsvpRequest(BaseModel):
    event_id: str                       = Field(..., min_length=1)
    event_title: Optional[str]          = ""
    event_date: Optional[str]           = ""
    name: str                           = Field(..., min_length=1)
    email: str                          = Field(..., min_length=3)
    phone: Optional[str]                = ""
    guests: int                         = Field(0, ge=0, le=20)
    needs: Optional[str]                = ""
    source: Optional[str]               = "client-portal"


class PublicRsvpResponse(BaseModel):
    success: bool = True
    rsvp_id: str
    checkin_token: str
    message: str


class CheckinRequest(BaseModel):
    checkin_token: str = Field(..., min_length=1)


class CheckinResponse(BaseModel):
    success: bool = True
    name: str
    event_title: Optional[str]
    checked_in_at: str
    message: str


class RsvpStats(BaseModel):
    event_id: str
    event_title: str
    event_date: Optional[str]
    total_rsvps: int
    total_guests: int
    total_expected_attendees: int
    estimated_attendance: int
    checked_in_count: int
    check_in_rate: int
    needs_breakdown: Dict[str, int]
    source_breakdown: Dict[str, int]
    rsvp_count: int
    checkin_count: int
