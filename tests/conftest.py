"""
Shared test fixtures for the TalentBridge test suite.

Sets environment variables before any talentbridge imports so settings
resolve to test values, then provides in-memory stores, engine/service
fixtures and factory fixtures for jobs, applications and submissions.
"""

import os

# === Set environment BEFORE any talentbridge imports ===
os.environ.setdefault("APP_ENVIRONMENT", "testing")
os.environ.setdefault("DB_NAME", "talentbridge_test")
os.environ.setdefault("LOG_FILE_OUTPUT", "false")
os.environ.setdefault("LOG_CONSOLE_OUTPUT", "false")

from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from talentbridge.core.commission import CommissionEngine
from talentbridge.core.workflow import (
    ApplicationStateMachine,
    ApplicationWorkflowService,
    DuplicateValidator,
)
from talentbridge.data.models import (
    Application,
    CandidateProfile,
    Job,
    JobCommissionTerms,
    SalaryRange,
    SubmissionRequest,
)
from talentbridge.data.repositories import InMemoryApplicationStore, InMemoryJobStore
from talentbridge.utils.config import CommissionSettings, WorkflowSettings
from talentbridge.utils.constants import CommissionType, JobStatus


# ---------------------------------------------------------------------------
# Settings and engines
# ---------------------------------------------------------------------------


@pytest.fixture
def commission_settings() -> CommissionSettings:
    return CommissionSettings()


@pytest.fixture
def workflow_settings() -> WorkflowSettings:
    return WorkflowSettings()


@pytest.fixture
def engine(commission_settings) -> CommissionEngine:
    return CommissionEngine(commission_settings)


@pytest.fixture
def state_machine() -> ApplicationStateMachine:
    return ApplicationStateMachine()


@pytest.fixture
def ts():
    """Factory for fixed, timezone-aware timestamps on 2024-03-<day>."""

    def _factory(day: int = 1, hour: int = 9) -> datetime:
        return datetime(2024, 3, day, hour, 0, tzinfo=timezone.utc)

    return _factory


# ---------------------------------------------------------------------------
# Stores and service
# ---------------------------------------------------------------------------


@pytest.fixture
def application_store() -> InMemoryApplicationStore:
    return InMemoryApplicationStore()


@pytest.fixture
def job_store() -> InMemoryJobStore:
    return InMemoryJobStore()


@pytest.fixture
def validator(application_store, workflow_settings) -> DuplicateValidator:
    return DuplicateValidator(application_store, workflow_settings)


@pytest.fixture
def service(application_store, job_store, engine, workflow_settings) -> ApplicationWorkflowService:
    return ApplicationWorkflowService(
        application_store,
        job_store,
        engine=engine,
        settings=workflow_settings,
    )


# ---------------------------------------------------------------------------
# Factory fixtures for models
# ---------------------------------------------------------------------------


@pytest.fixture
def make_job():
    """Factory that returns a callable to build Job models."""

    def _factory(
        salary_max: float = 600_000,
        commission: Optional[JobCommissionTerms] = None,
        currency: str = "USD",
        **kwargs: Any,
    ) -> Job:
        if commission is None:
            commission = JobCommissionTerms(
                type=CommissionType.PERCENTAGE,
                original_percentage=10,
                reduction_percentage=40,
            )
        defaults: dict[str, Any] = {
            "title": "Senior Backend Engineer",
            "company_name": "Northwind Labs",
            "posted_by": "employer-1",
            "status": JobStatus.ACTIVE,
            "salary": SalaryRange(min_amount=0, max_amount=salary_max, currency=currency),
            "commission": commission,
        }
        defaults.update(kwargs)
        return Job(**defaults)

    return _factory


@pytest.fixture
def job_id(job_store, make_job) -> str:
    """Id of a stored job paying 10% of 600,000 with a 40% platform reduction."""
    return job_store.add_job(make_job())


@pytest.fixture
def other_job_id(job_store, make_job) -> str:
    return job_store.add_job(make_job(title="Data Engineer"))


@pytest.fixture
def make_candidate():
    """Factory that returns a callable to build CandidateProfile models."""

    def _factory(
        candidate_name: str = "Priya Raman",
        email: str = "priya.raman@talentmail.com",
        phone: str = "+91 98765 43210",
        **kwargs: Any,
    ) -> CandidateProfile:
        return CandidateProfile(
            candidate_name=candidate_name, email=email, phone=phone, **kwargs
        )

    return _factory


@pytest.fixture
def make_submission(make_candidate):
    """Factory that returns a callable to build SubmissionRequest models."""

    def _factory(
        job_id: str,
        submitted_by: str = "recruiter-1",
        **candidate_kwargs: Any,
    ) -> SubmissionRequest:
        return SubmissionRequest(
            job_id=job_id,
            submitted_by=submitted_by,
            submitted_by_name="Alex Recruiter",
            candidate=make_candidate(**candidate_kwargs),
        )

    return _factory


@pytest.fixture
def make_application(make_candidate):
    """Factory that returns a callable to build unsaved Application models."""

    def _factory(
        job_id: str = "job-1",
        normalized_email: str = "priya.raman@talentmail.com",
        normalized_phone: str = "+919876543210",
        **kwargs: Any,
    ) -> Application:
        return Application(
            job_id=job_id,
            submitted_by=kwargs.pop("submitted_by", "recruiter-1"),
            candidate=kwargs.pop("candidate", make_candidate()),
            normalized_email=normalized_email,
            normalized_phone=normalized_phone,
            **kwargs,
        )

    return _factory


@pytest.fixture
def stored_application(application_store, state_machine, make_application, ts):
    """Factory that opens an application and saves it to the in-memory store."""

    def _factory(job_id: str = "job-1", opened_at: Optional[datetime] = None, **kwargs: Any):
        application = state_machine.open(
            make_application(job_id=job_id, **kwargs), opened_at or ts(1)
        )
        return application_store.create_application(application)

    return _factory
