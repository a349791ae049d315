"""
Job posting data models for TalentBridge.

Only the parts of a job the marketplace core reads are modelled in
detail: salary, commission terms and status.
"""

import random
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from talentbridge.utils.constants import CompensationType, JobStatus, JobType

from .base import BaseDocument, EmbeddedModel, utc_now
from .commission import JobCommissionTerms


def generate_job_code(now: Optional[datetime] = None) -> str:
    """Build a job code of the form JOB-YYYYMMDD-NNNN."""
    now = now or utc_now()
    return f"JOB-{now:%Y%m%d}-{random.randint(1000, 9999)}"


class SalaryRange(EmbeddedModel):
    """Salary range for the position."""

    min_amount: float = 0.0
    max_amount: float = 0.0
    currency: str = "USD"

    @field_validator("min_amount", "max_amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        """Validate salary amount is non-negative."""
        if v < 0:
            raise ValueError("Salary amount must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_range(self) -> "SalaryRange":
        if self.max_amount and self.min_amount > self.max_amount:
            raise ValueError("Minimum salary cannot exceed maximum salary")
        return self


class Job(BaseDocument):
    """
    Job posting.

    The commission terms are owned by the job and edited only by whoever
    edits the listing.
    """

    title: str = Field(..., min_length=1, max_length=200)
    job_code: str = Field(default_factory=generate_job_code)
    company_name: str
    posted_by: Optional[str] = None
    posted_by_name: Optional[str] = None

    country: Optional[str] = None
    location: Optional[str] = None
    description: str = ""

    status: JobStatus = JobStatus.DRAFT
    job_type: JobType = JobType.FULL_TIME
    positions: int = Field(default=1, ge=1)

    salary: SalaryRange = Field(default_factory=SalaryRange)
    compensation_type: CompensationType = CompensationType.ANNUALLY
    commission: JobCommissionTerms = Field(default_factory=JobCommissionTerms)

    screening_question_ids: list[str] = Field(default_factory=list)
    applicant_count: int = 0

    @property
    def salary_max(self) -> float:
        return self.salary.max_amount

    @property
    def is_open(self) -> bool:
        """Check if the job is accepting submissions."""
        return self.status == JobStatus.ACTIVE

    class Settings:
        """MongoDB collection settings."""

        name = "jobs"
        indexes = [
            "job_code",
            "status",
            "posted_by",
            "created_at",
        ]


class JobCreate(BaseModel):
    """Schema for creating a new job posting."""

    title: str = Field(..., min_length=1, max_length=200)
    company_name: str
    posted_by: Optional[str] = None
    posted_by_name: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = None
    description: str = ""
    job_type: JobType = JobType.FULL_TIME
    positions: int = Field(default=1, ge=1)
    salary: SalaryRange = Field(default_factory=SalaryRange)
    compensation_type: CompensationType = CompensationType.ANNUALLY
    commission: Optional[JobCommissionTerms] = None
    screening_question_ids: list[str] = Field(default_factory=list)
