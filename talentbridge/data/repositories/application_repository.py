"""
Application repository for TalentBridge.

MongoDB implementation of ``ApplicationStore``. Uniqueness of a
candidate per job is enforced by the partial unique index created in
``DatabaseManager.ensure_indexes``; stale status writes are detected
with the ``version`` field.
"""

from datetime import datetime
from typing import Optional

from pymongo.errors import DuplicateKeyError

from talentbridge.core.exceptions import (
    ApplicationNotFoundError,
    ConcurrencyConflictError,
    DuplicateApplicationError,
)
from talentbridge.data.models import Application, ApplicationNote, PayoutRecord
from talentbridge.utils.constants import ApplicationStatus
from talentbridge.utils.logger import get_logger

from .base import BaseRepository

logger = get_logger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for application (resume submission) documents."""

    @property
    def collection_name(self) -> str:
        return self._db_manager.applications_collection

    @property
    def model_class(self) -> type[Application]:
        return Application

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def find_applications_by_candidate(
        self,
        normalized_email: str,
        normalized_phone: str,
        job_id: Optional[str] = None,
    ) -> list[Application]:
        """Find applications for a normalized candidate identity, optionally for one job."""
        query = {
            "normalized_email": normalized_email,
            "normalized_phone": normalized_phone,
        }
        if job_id is not None:
            query["job_id"] = job_id
        return self.find(query, limit=0)

    def get_application(self, application_id: str) -> Application:
        application = self.get_by_id(application_id)
        if application is None:
            raise ApplicationNotFoundError(str(application_id))
        return application

    def has_status_for_job(self, job_id: str, status: ApplicationStatus) -> bool:
        return self.exists({"job_id": job_id, "status": ApplicationStatus(status).value})

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def create_application(self, application: Application) -> Application:
        """
        Insert a new application.

        Raises:
            DuplicateApplicationError: If a live application already exists
                for the same candidate and job
        """
        application.version = 0
        try:
            return self.create(application)
        except DuplicateKeyError as e:
            logger.info(f"Rejected duplicate application for job {application.job_id}")
            raise DuplicateApplicationError(*application.dedupe_key) from e

    def update_application_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        timestamp: datetime,
        expected_version: int,
        dedupe_active: bool = True,
    ) -> Application:
        """
        Write a status change if the stored version still matches.

        Raises:
            ConcurrencyConflictError: If the application changed since
                ``expected_version`` was read
            ApplicationNotFoundError: If the application does not exist
            DuplicateApplicationError: If leaving DUPLICATE would clash
                with another live application
        """
        object_id = self._to_object_id(application_id)
        if object_id is None:
            raise ApplicationNotFoundError(str(application_id))

        status_value = ApplicationStatus(status).value
        try:
            updated = self.find_one_and_set(
                {"_id": object_id, "version": expected_version},
                {
                    "status": status_value,
                    f"status_timestamps.{status_value}": timestamp,
                    "dedupe_active": dedupe_active,
                },
                extra_operators={"$inc": {"version": 1}},
            )
        except DuplicateKeyError as e:
            current = self.get_application(application_id)
            raise DuplicateApplicationError(*current.dedupe_key) from e

        if updated is None:
            if self.exists({"_id": object_id}):
                raise ConcurrencyConflictError(str(application_id), expected_version)
            raise ApplicationNotFoundError(str(application_id))
        return updated

    def record_payout(self, application_id: str, payout: PayoutRecord) -> Application:
        """
        Store the payout snapshot unless one is already recorded.

        Returns the application as stored, carrying whichever payout won.
        """
        updated = self.find_one_and_set(
            {"_id": self._to_object_id(application_id), "payout": None},
            {"payout": payout.model_dump()},
        )
        if updated is None:
            return self.get_application(application_id)
        return updated

    def add_note(self, application_id: str, note: ApplicationNote) -> Application:
        updated = self.find_one_and_set(
            {"_id": self._to_object_id(application_id)},
            {},
            extra_operators={"$push": {"notes": note.model_dump()}},
        )
        if updated is None:
            raise ApplicationNotFoundError(str(application_id))
        return updated


# Singleton instance
_application_repository: Optional[ApplicationRepository] = None


def get_application_repository() -> ApplicationRepository:
    """Get the application repository singleton instance."""
    global _application_repository
    if _application_repository is None:
        _application_repository = ApplicationRepository()
    return _application_repository
