"""
Application workflow service.

Entry point for the surrounding application layer: submits candidates
after duplicate validation, applies status changes through the state
machine with optimistic concurrency, and snapshots the commission
payout when a candidate is hired.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from talentbridge.core.commission import CommissionEngine, get_commission_engine
from talentbridge.core.exceptions import (
    CommissionLockedError,
    ConcurrencyConflictError,
    DuplicateApplicationError,
    JobNotFoundError,
)
from talentbridge.data.models import (
    Application,
    ApplicationNote,
    CommissionBreakdown,
    JobCommissionTerms,
    PayoutRecord,
    RecruiterCommissionView,
    SubmissionRequest,
)
from talentbridge.data.repositories.interfaces import ApplicationStore, JobStore
from talentbridge.utils.config import WorkflowSettings, get_settings
from talentbridge.utils.constants import ApplicationStatus, AuditAction, CommissionType
from talentbridge.utils.logger import audit_log, get_logger

from .duplicate_validator import (
    DuplicateValidator,
    ValidationResult,
    normalize_email,
    normalize_phone,
)
from .state_machine import ApplicationStateMachine

logger = get_logger(__name__)


@dataclass
class SubmissionResult:
    """Outcome of a submission: the created application, or why there is none."""

    validation: ValidationResult
    application: Optional[Application] = None

    @property
    def success(self) -> bool:
        return self.application is not None


class ApplicationWorkflowService:
    """
    Orchestrates submission, status changes and payouts.

    Authorization is the caller's concern; ``actor`` is recorded for
    the audit trail only.
    """

    def __init__(
        self,
        applications: ApplicationStore,
        jobs: JobStore,
        engine: Optional[CommissionEngine] = None,
        validator: Optional[DuplicateValidator] = None,
        state_machine: Optional[ApplicationStateMachine] = None,
        settings: Optional[WorkflowSettings] = None,
    ):
        self.applications = applications
        self.jobs = jobs
        self.settings = settings or get_settings().workflow
        self.engine = engine or get_commission_engine()
        self.validator = validator or DuplicateValidator(applications, self.settings)
        self.state_machine = state_machine or ApplicationStateMachine()

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_application(self, request: SubmissionRequest) -> SubmissionResult:
        """
        Submit a candidate against a job.

        Nothing is stored when validation fails. A duplicate detected by
        storage at write time is reported the same way as one found by
        the validator.

        Args:
            request: Candidate profile, job and file metadata

        Returns:
            SubmissionResult with the created application on success
        """
        candidate = request.candidate
        validation = self.validator.validate_candidate(
            candidate.email, candidate.phone, request.job_id
        )
        if not validation.is_valid:
            logger.info(
                f"Submission for job {request.job_id} rejected: {', '.join(validation.codes)}"
            )
            self._audit_rejection(request, validation)
            return SubmissionResult(validation=validation)

        application = Application(
            job_id=request.job_id,
            job_title=request.job_title,
            submitted_by=request.submitted_by,
            submitted_by_name=request.submitted_by_name,
            candidate=candidate,
            normalized_email=normalize_email(candidate.email),
            normalized_phone=normalize_phone(candidate.phone, self.settings),
            screening_answers=request.screening_answers,
            resume_file=request.resume_file,
            additional_documents=request.additional_documents,
        )
        application = self.state_machine.open(application)

        try:
            created = self.applications.create_application(application)
        except DuplicateApplicationError:
            logger.info(f"Concurrent duplicate submission for job {request.job_id}")
            validation.errors.append(DuplicateValidator.duplicate_issue())
            self._audit_rejection(request, validation)
            return SubmissionResult(validation=validation)

        audit_log(
            AuditAction.APPLICATION_SUBMITTED.value,
            {
                "application_id": str(created.id),
                "job_id": created.job_id,
                "submitted_by": created.submitted_by,
            },
            audit_type="SUBMISSION",
        )
        return SubmissionResult(validation=validation, application=created)

    def _audit_rejection(self, request: SubmissionRequest, validation: ValidationResult) -> None:
        audit_log(
            AuditAction.APPLICATION_REJECTED_AS_DUPLICATE.value,
            {
                "job_id": request.job_id,
                "submitted_by": request.submitted_by,
                "codes": validation.codes,
            },
            audit_type="SUBMISSION",
        )

    # -------------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------------

    def change_status(
        self,
        application_id: str,
        new_status: ApplicationStatus,
        actor: str,
        occurred_at: Optional[datetime] = None,
    ) -> Application:
        """
        Move an application to a new status.

        A write based on a stale version is retried with fresh state up
        to ``transition_retry_attempts`` times before the conflict is
        raised to the caller.

        Raises:
            ApplicationNotFoundError: If the application does not exist
            ConcurrencyConflictError: If retries are exhausted
            InvalidTransitionError: If the state machine's policy forbids it
            DuplicateApplicationError: If leaving DUPLICATE would clash with
                another live application for the same candidate and job
        """
        new_status = ApplicationStatus(new_status)
        attempts = self.settings.transition_retry_attempts + 1

        for attempt in range(1, attempts + 1):
            current = self.applications.get_application(application_id)
            updated = self.state_machine.transition(current, new_status, occurred_at)
            try:
                stored = self.applications.update_application_status(
                    application_id,
                    new_status,
                    updated.timestamp_for(new_status),
                    expected_version=current.version,
                    dedupe_active=updated.dedupe_active,
                )
                break
            except ConcurrencyConflictError:
                if attempt >= attempts:
                    raise
                logger.warning(
                    f"Stale write on application {application_id}, retrying "
                    f"({attempt}/{attempts - 1})"
                )

        audit_log(
            AuditAction.APPLICATION_STATUS_CHANGED.value,
            {
                "application_id": str(application_id),
                "from_status": current.current_status.value,
                "to_status": new_status.value,
                "actor": actor,
            },
        )

        if new_status == ApplicationStatus.HIRED and stored.payout is None:
            stored = self._record_payout(stored, actor)
        return stored

    def _record_payout(self, application: Application, actor: str) -> Application:
        """Snapshot the job's commission for a hire. Later term edits never change it."""
        try:
            job = self.jobs.get_job(application.job_id)
        except JobNotFoundError:
            logger.error(
                f"Cannot record payout for application {application.id}: "
                f"job {application.job_id} not found"
            )
            return application

        breakdown = self.engine.recompute_on_change(job.commission, job.salary_max)
        payout = PayoutRecord(
            job_id=application.job_id,
            recruiter_id=application.submitted_by,
            currency=job.salary.currency,
            breakdown=breakdown,
            computed_by=actor,
        )
        stored = self.applications.record_payout(str(application.id), payout)
        if stored.payout is None or stored.payout.payout_id != payout.payout_id:
            logger.debug(f"Payout for application {application.id} already recorded")
            return stored

        audit_log(
            AuditAction.PAYOUT_RECORDED.value,
            {
                "application_id": str(application.id),
                "job_id": application.job_id,
                "recruiter_id": application.submitted_by,
                "recruiter_amount": breakdown.recruiter_amount,
                "platform_fee_amount": breakdown.platform_fee_amount,
                "currency": payout.currency,
            },
            audit_type="PAYOUT",
        )
        return stored

    def add_note(self, application_id: str, user_id: str, note: str) -> Application:
        """Attach a staff note to an application."""
        return self.applications.add_note(
            application_id, ApplicationNote(user_id=user_id, note=note)
        )

    # -------------------------------------------------------------------------
    # Commission
    # -------------------------------------------------------------------------

    def commission_for_job(self, job_id: str) -> CommissionBreakdown:
        """Current commission breakdown for a job."""
        terms, salary_max = self.jobs.get_job_commission_terms(job_id)
        return self.engine.recompute_on_change(terms, salary_max)

    def recruiter_commission_for_job(self, job_id: str) -> RecruiterCommissionView:
        """Commission as shown to recruiters browsing a job."""
        job = self.jobs.get_job(job_id)
        breakdown = self.engine.recompute_on_change(job.commission, job.salary_max)
        return self.engine.recruiter_view(breakdown, job.salary.currency)

    def update_job_commission(
        self,
        job_id: str,
        terms: JobCommissionTerms,
        actor: Optional[str] = None,
    ) -> CommissionBreakdown:
        """
        Replace a job's commission terms and return the new breakdown.

        Inputs are clamped to the configured bounds and branches not
        matching ``terms.type`` are reset to zero.

        Raises:
            CommissionLockedError: If a candidate is already HIRED for the job
            JobNotFoundError: If the job does not exist
        """
        if self.applications.has_status_for_job(job_id, ApplicationStatus.HIRED):
            raise CommissionLockedError(job_id)

        terms = terms.with_type(terms.commission_type)
        update = {
            "reduction_percentage": self.engine.clamp_reduction_percentage(
                terms.reduction_percentage
            )
        }
        if terms.commission_type == CommissionType.PERCENTAGE and terms.original_percentage > 0:
            update["original_percentage"] = self.engine.clamp_commission_percentage(
                terms.original_percentage
            )
        terms = terms.model_copy(update=update)

        job = self.jobs.update_commission_terms(job_id, terms)
        breakdown = self.engine.recompute_on_change(job.commission, job.salary_max)

        audit_log(
            AuditAction.COMMISSION_UPDATED.value,
            {
                "job_id": job_id,
                "type": terms.commission_type.value,
                "original_amount": breakdown.original_amount,
                "actor": actor,
            },
            audit_type="COMMISSION",
        )
        return breakdown
