"""
Job repository for TalentBridge.

MongoDB implementation of ``JobStore``.
"""

from typing import Optional

from talentbridge.core.exceptions import JobNotFoundError
from talentbridge.data.models import Job, JobCommissionTerms, JobCreate
from talentbridge.utils.constants import JobStatus
from talentbridge.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class JobRepository(BaseRepository[Job]):
    """Repository for job posting documents."""

    @property
    def collection_name(self) -> str:
        return self._db_manager.jobs_collection

    @property
    def model_class(self) -> type[Job]:
        return Job

    def create_from_schema(self, data: JobCreate) -> Job:
        """Create a job from a create schema."""
        job = Job(**data.model_dump(exclude_none=True))
        return self.create(job)

    def get_job(self, job_id: str) -> Job:
        job = self.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError(str(job_id))
        return job

    def get_job_commission_terms(self, job_id: str) -> tuple[JobCommissionTerms, float]:
        """Return the job's commission terms and the top of its salary range."""
        job = self.get_job(job_id)
        return job.commission, job.salary_max

    def update_commission_terms(self, job_id: str, terms: JobCommissionTerms) -> Job:
        updated = self.find_one_and_set(
            {"_id": self._to_object_id(job_id)},
            {"commission": terms.model_dump()},
        )
        if updated is None:
            raise JobNotFoundError(str(job_id))
        logger.debug(f"Updated commission terms for job {job_id}")
        return updated

    def get_by_status(self, status: JobStatus, skip: int = 0, limit: int = 100) -> list[Job]:
        """Get jobs by status."""
        return self.find({"status": JobStatus(status).value}, skip=skip, limit=limit)


# Singleton instance
_job_repository: Optional[JobRepository] = None


def get_job_repository() -> JobRepository:
    """Get the job repository singleton instance."""
    global _job_repository
    if _job_repository is None:
        _job_repository = JobRepository()
    return _job_repository
