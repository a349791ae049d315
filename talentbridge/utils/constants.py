"""
Application-wide constants for TalentBridge.

Enums shared by the data models, the workflow and the CLI live here
so that stored values and UI labels cannot drift apart.
"""

from enum import Enum
from typing import Final


# =============================================================================
# Application Constants
# =============================================================================

APP_NAME: Final[str] = "TalentBridge"
APP_DISPLAY_NAME: Final[str] = "TalentBridge Recruitment Marketplace"
VERSION: Final[str] = "0.1.0"


# =============================================================================
# Enums
# =============================================================================


class ApplicationStatus(str, Enum):
    """
    Review state of a submitted application.

    Declared in typical progression order. The order is not enforced.
    Values equal names so stored strings and enum members hash alike.
    """

    SUBMITTED = "SUBMITTED"
    REVIEWED = "REVIEWED"
    SHORTLISTED = "SHORTLISTED"
    ONHOLD = "ONHOLD"
    INTERVIEW_IN_PROCESS = "INTERVIEW_IN_PROCESS"
    INTERVIEWED = "INTERVIEWED"
    SELECTED_IN_FINAL_INTERVIEW = "SELECTED_IN_FINAL_INTERVIEW"
    OFFERED = "OFFERED"
    OFFER_DECLINED = "OFFER_DECLINED"
    HIRED = "HIRED"
    REJECTED = "REJECTED"
    DUPLICATE = "DUPLICATE"


class CommissionType(str, Enum):
    """How a job's commission is expressed."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"
    HOURLY = "hourly"


class JobStatus(str, Enum):
    """Status of a job posting."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class JobType(str, Enum):
    """Employment type of a job posting."""

    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    FREELANCE = "FREELANCE"
    INTERNSHIP = "INTERNSHIP"


class CompensationType(str, Enum):
    """Period the salary range is quoted in."""

    HOURLY = "HOURLY"
    MONTHLY = "MONTHLY"
    ANNUALLY = "ANNUALLY"


class ValidationCode(str, Enum):
    """Codes carried by submission validation issues."""

    DUPLICATE_FOR_JOB = "DUPLICATE_FOR_JOB"
    MALFORMED_EMAIL = "MALFORMED_EMAIL"
    MALFORMED_PHONE = "MALFORMED_PHONE"


class AuditAction(str, Enum):
    """Types of actions written to the audit log."""

    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_REJECTED_AS_DUPLICATE = "application_rejected_as_duplicate"
    APPLICATION_STATUS_CHANGED = "application_status_changed"
    PAYOUT_RECORDED = "payout_recorded"
    COMMISSION_UPDATED = "commission_updated"
    COMMISSION_ANOMALY = "commission_anomaly"


# =============================================================================
# Status Constants
# =============================================================================

# Conventionally final; the state machine still allows leaving them
CONVENTIONALLY_FINAL_STATUSES: Final[frozenset[ApplicationStatus]] = frozenset(
    {
        ApplicationStatus.HIRED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.DUPLICATE,
    }
)

# Per-status timestamp names used by the timeline UI and older exports
STATUS_TIMESTAMP_FIELDS: Final[dict[ApplicationStatus, str]] = {
    ApplicationStatus.SUBMITTED: "submittedAt",
    ApplicationStatus.REVIEWED: "reviewedAt",
    ApplicationStatus.SHORTLISTED: "shortlistedAt",
    ApplicationStatus.ONHOLD: "onholdAt",
    ApplicationStatus.INTERVIEW_IN_PROCESS: "interviewInProcessAt",
    ApplicationStatus.INTERVIEWED: "interviewedAt",
    ApplicationStatus.SELECTED_IN_FINAL_INTERVIEW: "selectedInFinalInterviewAt",
    ApplicationStatus.OFFERED: "offeredAt",
    ApplicationStatus.OFFER_DECLINED: "offerDeclinedAt",
    ApplicationStatus.HIRED: "hiredAt",
    ApplicationStatus.REJECTED: "rejectedAt",
    ApplicationStatus.DUPLICATE: "duplicateAt",
}

STATUS_LABELS: Final[dict[ApplicationStatus, str]] = {
    ApplicationStatus.SUBMITTED: "Submitted",
    ApplicationStatus.REVIEWED: "Reviewed",
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.ONHOLD: "On Hold",
    ApplicationStatus.INTERVIEW_IN_PROCESS: "Interview in Process",
    ApplicationStatus.INTERVIEWED: "Interviewed",
    ApplicationStatus.SELECTED_IN_FINAL_INTERVIEW: "Selected in Final Interview",
    ApplicationStatus.OFFERED: "Offered",
    ApplicationStatus.OFFER_DECLINED: "Offer Declined",
    ApplicationStatus.HIRED: "Hired",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.DUPLICATE: "Duplicate",
}


# =============================================================================
# Validation Messages
# =============================================================================

VALIDATION_MESSAGES: Final[dict[ValidationCode, str]] = {
    ValidationCode.DUPLICATE_FOR_JOB: (
        "This is a Duplicate application for this job position, please do not submit again"
    ),
    ValidationCode.MALFORMED_EMAIL: "Please enter a valid email address",
    ValidationCode.MALFORMED_PHONE: (
        "Please enter a valid phone number including the country code (e.g. +1 555 123 4567)"
    ),
}
