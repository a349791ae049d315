"""
Pydantic data models and schemas for TalentBridge.

This module provides all data models used throughout the application,
including database documents, embedded models, and request schemas.
"""

# Base models
from .base import BaseDocument, EmbeddedModel, PyObjectId, TimestampMixin, utc_now

# Commission models
from .commission import (
    COMMISSION_BRANCH_FIELDS,
    CommissionBreakdown,
    FixedCommissionSplit,
    JobCommissionTerms,
    PayoutRecord,
    RecruiterCommissionView,
)

# Job models
from .job import Job, JobCreate, SalaryRange, generate_job_code

# Application models
from .application import (
    Application,
    ApplicationNote,
    CandidateProfile,
    FileReference,
    ScreeningAnswer,
    StatusHistoryEntry,
    SubmissionRequest,
)

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    "utc_now",
    # Commission
    "COMMISSION_BRANCH_FIELDS",
    "CommissionBreakdown",
    "FixedCommissionSplit",
    "JobCommissionTerms",
    "PayoutRecord",
    "RecruiterCommissionView",
    # Job
    "Job",
    "JobCreate",
    "SalaryRange",
    "generate_job_code",
    # Application
    "Application",
    "ApplicationNote",
    "CandidateProfile",
    "FileReference",
    "ScreeningAnswer",
    "StatusHistoryEntry",
    "SubmissionRequest",
]
