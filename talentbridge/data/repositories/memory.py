"""
In-process application and job stores.

Implement the same contracts as the MongoDB repositories, including
the candidate/job uniqueness guard and optimistic status versioning.
Used by the test suite and for running the workflow without a database.
"""

import threading
from datetime import datetime
from typing import Optional

from bson import ObjectId

from talentbridge.core.exceptions import (
    ApplicationNotFoundError,
    ConcurrencyConflictError,
    DuplicateApplicationError,
    JobNotFoundError,
)
from talentbridge.data.models import (
    Application,
    ApplicationNote,
    Job,
    JobCommissionTerms,
    PayoutRecord,
    utc_now,
)
from talentbridge.utils.constants import ApplicationStatus
from talentbridge.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryApplicationStore:
    """Thread-safe dictionary-backed ``ApplicationStore``."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._applications: dict[str, Application] = {}

    def __len__(self) -> int:
        return len(self._applications)

    def _get(self, application_id: str) -> Application:
        application = self._applications.get(str(application_id))
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return application

    def _conflicting(self, application: Application) -> Optional[Application]:
        return next(
            (
                existing
                for existing in self._applications.values()
                if existing.dedupe_active
                and existing.dedupe_key == application.dedupe_key
                and existing.id != application.id
            ),
            None,
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def find_applications_by_candidate(
        self,
        normalized_email: str,
        normalized_phone: str,
        job_id: Optional[str] = None,
    ) -> list[Application]:
        with self._lock:
            return [
                a.model_copy(deep=True)
                for a in self._applications.values()
                if a.normalized_email == normalized_email
                and a.normalized_phone == normalized_phone
                and (job_id is None or a.job_id == job_id)
            ]

    def get_application(self, application_id: str) -> Application:
        with self._lock:
            return self._get(application_id).model_copy(deep=True)

    def has_status_for_job(self, job_id: str, status: ApplicationStatus) -> bool:
        with self._lock:
            return any(
                a.job_id == job_id and a.current_status == status
                for a in self._applications.values()
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_application(self, application: Application) -> Application:
        with self._lock:
            if application.dedupe_active and self._conflicting(application):
                raise DuplicateApplicationError(*application.dedupe_key)

            now = utc_now()
            stored = application.model_copy(
                update={"id": ObjectId(), "created_at": now, "updated_at": now, "version": 0},
                deep=True,
            )
            self._applications[str(stored.id)] = stored
            logger.debug(f"Created application: {stored.id}")
            return stored.model_copy(deep=True)

    def update_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        timestamp: datetime,
        expected_version: int,
        dedupe_active: bool = True,
    ) -> Application:
        with self._lock:
            current = self._get(application_id)
            if current.version != expected_version:
                raise ConcurrencyConflictError(str(application_id), expected_version)

            status = ApplicationStatus(status)
            timestamps = dict(current.status_timestamps)
            timestamps[status] = timestamp
            updated = current.model_copy(
                update={
                    "status": status,
                    "status_timestamps": timestamps,
                    "dedupe_active": dedupe_active,
                    "version": current.version + 1,
                    "updated_at": utc_now(),
                }
            )
            if updated.dedupe_active and self._conflicting(updated):
                raise DuplicateApplicationError(*updated.dedupe_key)

            self._applications[str(application_id)] = updated
            return updated.model_copy(deep=True)

    def record_payout(self, application_id: str, payout: PayoutRecord) -> Application:
        with self._lock:
            current = self._get(application_id)
            if current.payout is not None:
                return current.model_copy(deep=True)

            updated = current.model_copy(update={"payout": payout, "updated_at": utc_now()})
            self._applications[str(application_id)] = updated
            return updated.model_copy(deep=True)

    def add_note(self, application_id: str, note: ApplicationNote) -> Application:
        with self._lock:
            current = self._get(application_id)
            updated = current.model_copy(
                update={"notes": [*current.notes, note], "updated_at": utc_now()}
            )
            self._applications[str(application_id)] = updated
            return updated.model_copy(deep=True)


class InMemoryJobStore:
    """Dictionary-backed ``JobStore`` keyed by job id string."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._jobs: dict[str, Job] = {}

    def add_job(self, job: Job, job_id: Optional[str] = None) -> str:
        """Store a job and return its id (generated when not given)."""
        with self._lock:
            if job_id is None:
                job = job.model_copy(update={"id": job.id or ObjectId()})
                job_id = str(job.id)
            self._jobs[job_id] = job.model_copy(deep=True)
            return job_id

    def get_job(self, job_id: str) -> Job:
        with self._lock:
            job = self._jobs.get(str(job_id))
            if job is None:
                raise JobNotFoundError(str(job_id))
            return job.model_copy(deep=True)

    def get_job_commission_terms(self, job_id: str) -> tuple[JobCommissionTerms, float]:
        job = self.get_job(job_id)
        return job.commission, job.salary_max

    def update_commission_terms(self, job_id: str, terms: JobCommissionTerms) -> Job:
        with self._lock:
            job = self._jobs.get(str(job_id))
            if job is None:
                raise JobNotFoundError(str(job_id))
            updated = job.model_copy(update={"commission": terms, "updated_at": utc_now()})
            self._jobs[str(job_id)] = updated
            return updated.model_copy(deep=True)
