"""
Storage contracts used by the workflow core.

Any backend (MongoDB repositories, the in-memory stores) that satisfies
these protocols can be handed to the workflow service.
"""

from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from talentbridge.data.models import (
    Application,
    ApplicationNote,
    Job,
    JobCommissionTerms,
    PayoutRecord,
)
from talentbridge.utils.constants import ApplicationStatus


@runtime_checkable
class ApplicationStore(Protocol):
    """
    Read/write access to stored applications.

    Implementations must reject a second application with the same
    ``(job_id, normalized_email, normalized_phone)`` while the first is
    ``dedupe_active`` by raising ``DuplicateApplicationError``, and must
    reject status writes whose ``expected_version`` is stale by raising
    ``ConcurrencyConflictError``. ``record_payout`` writes only when no
    payout is stored yet and otherwise returns the application unchanged.
    """

    def find_applications_by_candidate(
        self,
        normalized_email: str,
        normalized_phone: str,
        job_id: Optional[str] = None,
    ) -> list[Application]:
        ...

    def get_application(self, application_id: str) -> Application:
        ...

    def create_application(self, application: Application) -> Application:
        ...

    def update_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        timestamp: datetime,
        expected_version: int,
        dedupe_active: bool = True,
    ) -> Application:
        ...

    def record_payout(self, application_id: str, payout: PayoutRecord) -> Application:
        ...

    def add_note(self, application_id: str, note: ApplicationNote) -> Application:
        ...

    def has_status_for_job(self, job_id: str, status: ApplicationStatus) -> bool:
        ...


@runtime_checkable
class JobStore(Protocol):
    """Read access to jobs and their commission terms."""

    def get_job(self, job_id: str) -> Job:
        ...

    def get_job_commission_terms(self, job_id: str) -> tuple[JobCommissionTerms, float]:
        """Return the job's commission terms and the top of its salary range."""
        ...

    def update_commission_terms(self, job_id: str, terms: JobCommissionTerms) -> Job:
        ...
