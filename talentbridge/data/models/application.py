"""
Application (resume submission) data models for TalentBridge.

An application is one candidate's resume submitted by a recruiter
against one job. Its status moves through the review pipeline, and
every status it enters is timestamped for the timeline view.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from talentbridge.utils.constants import (
    CONVENTIONALLY_FINAL_STATUSES,
    STATUS_LABELS,
    STATUS_TIMESTAMP_FIELDS,
    ApplicationStatus,
)

from .base import BaseDocument, EmbeddedModel, utc_now
from .commission import PayoutRecord


class CandidateProfile(EmbeddedModel):
    """Candidate details captured on the submission form."""

    candidate_name: str = Field(..., min_length=1)
    email: str
    phone: str
    alternative_phone: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = None
    current_company: Optional[str] = None
    current_designation: Optional[str] = None
    total_experience: Optional[str] = None
    relevant_experience: Optional[str] = None
    current_ctc: Optional[str] = None
    expected_ctc: Optional[str] = None
    notice_period: Optional[str] = None
    qualification: Optional[str] = None
    remarks: Optional[str] = None


class FileReference(EmbeddedModel):
    """Metadata for an uploaded file. The bytes live in external storage."""

    storage_key: str
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = Field(default=None, ge=0)


class ScreeningAnswer(EmbeddedModel):
    """Answer to one of the job's screening questions."""

    question_id: str
    answer: str


class ApplicationNote(EmbeddedModel):
    """Free-text note left by staff on an application."""

    user_id: str
    note: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)


class StatusHistoryEntry(BaseModel):
    """One step of an application's status timeline."""

    status: ApplicationStatus
    label: str
    timestamp: datetime
    is_current: bool = False


class Application(BaseDocument):
    """
    A candidate's resume submission against one job.

    ``status_timestamps`` is written only by the application state
    machine. ``version`` increases on every stored status change and is
    used to reject stale writes.
    """

    job_id: str
    job_title: Optional[str] = None
    submitted_by: str
    submitted_by_name: Optional[str] = None

    candidate: CandidateProfile

    # Uniqueness key components, see ApplicationStore
    normalized_email: str
    normalized_phone: str
    dedupe_active: bool = True

    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    status_timestamps: dict[ApplicationStatus, datetime] = Field(default_factory=dict)

    screening_answers: list[ScreeningAnswer] = Field(default_factory=list)
    resume_file: Optional[FileReference] = None
    additional_documents: list[FileReference] = Field(default_factory=list)
    notes: list[ApplicationNote] = Field(default_factory=list)

    version: int = 0
    payout: Optional[PayoutRecord] = None

    @property
    def current_status(self) -> ApplicationStatus:
        return ApplicationStatus(self.status)

    @property
    def dedupe_key(self) -> tuple[str, str, str]:
        return (self.job_id, self.normalized_email, self.normalized_phone)

    @property
    def is_conventionally_final(self) -> bool:
        return self.current_status in CONVENTIONALLY_FINAL_STATUSES

    def timestamp_for(self, status: ApplicationStatus) -> Optional[datetime]:
        """Get the last time the application entered ``status``."""
        return self.status_timestamps.get(ApplicationStatus(status))

    @property
    def legacy_timestamps(self) -> dict[str, Optional[datetime]]:
        """Timestamps keyed by their timeline names (``hiredAt`` etc.)."""
        return {
            field_name: self.timestamp_for(status)
            for status, field_name in STATUS_TIMESTAMP_FIELDS.items()
        }

    def status_history(self) -> list[StatusHistoryEntry]:
        """Statuses entered so far in chronological order."""
        current = self.current_status
        entries = [
            StatusHistoryEntry(
                status=ApplicationStatus(status),
                label=STATUS_LABELS[ApplicationStatus(status)],
                timestamp=timestamp,
                is_current=ApplicationStatus(status) == current,
            )
            for status, timestamp in self.status_timestamps.items()
        ]
        return sorted(entries, key=lambda e: e.timestamp)

    class Settings:
        """MongoDB collection settings."""

        name = "resumes"
        indexes = [
            "job_id",
            "status",
            "submitted_by",
            "normalized_email",
            "normalized_phone",
            "created_at",
        ]


class SubmissionRequest(BaseModel):
    """Inbound request to submit a candidate against a job."""

    job_id: str
    job_title: Optional[str] = None
    submitted_by: str
    submitted_by_name: Optional[str] = None
    candidate: CandidateProfile
    resume_file: Optional[FileReference] = None
    additional_documents: list[FileReference] = Field(default_factory=list)
    screening_answers: list[ScreeningAnswer] = Field(default_factory=list)
