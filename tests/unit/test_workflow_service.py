"""
Tests for ApplicationWorkflowService: submission, status changes,
payout snapshots and commission edits.
"""

import threading

import pytest

from talentbridge.core.exceptions import (
    ApplicationNotFoundError,
    CommissionLockedError,
    ConcurrencyConflictError,
    DuplicateApplicationError,
    JobNotFoundError,
)
from talentbridge.core.workflow import ApplicationWorkflowService
from talentbridge.core.workflow import workflow_service
from talentbridge.data.models import JobCommissionTerms, utc_now
from talentbridge.data.repositories import InMemoryApplicationStore
from talentbridge.utils.config import WorkflowSettings
from talentbridge.utils.constants import ApplicationStatus, CommissionType, ValidationCode


class BarrierStore(InMemoryApplicationStore):
    """Holds the first two candidate lookups until both have started."""

    def __init__(self):
        super().__init__()
        self.barrier = threading.Barrier(2, timeout=5)

    def find_applications_by_candidate(self, normalized_email, normalized_phone, job_id=None):
        found = super().find_applications_by_candidate(normalized_email, normalized_phone, job_id)
        self.barrier.wait()
        return found


class InterferingStore(InMemoryApplicationStore):
    """Lets another writer change the application just before each of the first N writes."""

    def __init__(self, interferences: int = 1):
        super().__init__()
        self.interferences = interferences

    def update_application_status(
        self, application_id, status, timestamp, expected_version, dedupe_active=True
    ):
        if self.interferences:
            self.interferences -= 1
            super().update_application_status(
                application_id, ApplicationStatus.ONHOLD, utc_now(), expected_version
            )
        return super().update_application_status(
            application_id, status, timestamp, expected_version, dedupe_active
        )


class PayoutGateStore(InMemoryApplicationStore):
    """Holds each payout write until two hires have both reached it."""

    def __init__(self):
        super().__init__()
        self.barrier = threading.Barrier(2, timeout=5)

    def record_payout(self, application_id, payout):
        self.barrier.wait()
        return super().record_payout(application_id, payout)


# ═══════════════════════════════════════════════════════════════════════════
#  Submission
# ═══════════════════════════════════════════════════════════════════════════


class TestSubmitApplication:
    def test_creates_submitted_application(self, service, application_store, make_submission, job_id):
        result = service.submit_application(make_submission(job_id))

        assert result.success
        application = result.application
        assert application.id is not None
        assert application.current_status == ApplicationStatus.SUBMITTED
        assert list(application.status_timestamps) == [ApplicationStatus.SUBMITTED]
        assert application.normalized_email == "priya.raman@talentmail.com"
        assert application.normalized_phone == "+919876543210"
        assert application.version == 0
        assert len(application_store) == 1

    def test_resubmission_is_rejected(self, service, application_store, make_submission, job_id):
        service.submit_application(make_submission(job_id))
        result = service.submit_application(
            make_submission(job_id, submitted_by="recruiter-2", email="PRIYA.RAMAN@talentmail.com")
        )

        assert not result.success
        assert result.application is None
        assert result.validation.codes == [ValidationCode.DUPLICATE_FOR_JOB.value]
        assert len(application_store) == 1

    def test_same_candidate_other_job(self, service, make_submission, job_id, other_job_id):
        assert service.submit_application(make_submission(job_id)).success
        assert service.submit_application(make_submission(other_job_id)).success

    def test_malformed_contact_stores_nothing(self, service, application_store, make_submission, job_id):
        result = service.submit_application(make_submission(job_id, phone="12345"))

        assert not result.success
        assert result.validation.codes == [ValidationCode.MALFORMED_PHONE.value]
        assert len(application_store) == 0

    def test_resubmission_allowed_after_marked_duplicate(self, service, make_submission, job_id):
        first = service.submit_application(make_submission(job_id)).application
        service.change_status(str(first.id), ApplicationStatus.DUPLICATE, actor="admin-1")

        result = service.submit_application(make_submission(job_id))
        assert result.success
        assert result.application.id != first.id

    def test_concurrent_submissions_create_one_application(
        self, job_store, engine, workflow_settings, make_submission, job_id
    ):
        store = BarrierStore()
        service = ApplicationWorkflowService(
            store, job_store, engine=engine, settings=workflow_settings
        )
        results = []

        def submit(recruiter):
            results.append(service.submit_application(make_submission(job_id, submitted_by=recruiter)))

        threads = [threading.Thread(target=submit, args=(r,)) for r in ("recruiter-1", "recruiter-2")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(results) == 2
        assert sum(r.success for r in results) == 1
        rejected = next(r for r in results if not r.success)
        assert rejected.validation.codes == [ValidationCode.DUPLICATE_FOR_JOB.value]
        assert len(store) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  Status changes
# ═══════════════════════════════════════════════════════════════════════════


class TestChangeStatus:
    def test_applies_transition(self, service, make_submission, job_id, ts):
        created = service.submit_application(make_submission(job_id)).application
        updated = service.change_status(
            str(created.id), ApplicationStatus.SHORTLISTED, actor="admin-1", occurred_at=ts(4)
        )

        assert updated.current_status == ApplicationStatus.SHORTLISTED
        assert updated.timestamp_for(ApplicationStatus.SHORTLISTED) == ts(4)
        assert updated.timestamp_for(ApplicationStatus.SUBMITTED) is not None
        assert updated.version == 1

    def test_unknown_application(self, service):
        with pytest.raises(ApplicationNotFoundError):
            service.change_status("65f000000000000000000000", ApplicationStatus.REVIEWED, "admin-1")

    def test_retries_after_stale_write(self, job_store, engine, make_submission, job_id, ts):
        store = InterferingStore(interferences=1)
        service = ApplicationWorkflowService(
            store, job_store, engine=engine, settings=WorkflowSettings(transition_retry_attempts=1)
        )
        created = service.submit_application(make_submission(job_id)).application

        updated = service.change_status(
            str(created.id), ApplicationStatus.INTERVIEWED, actor="admin-1", occurred_at=ts(5)
        )

        assert updated.current_status == ApplicationStatus.INTERVIEWED
        assert updated.timestamp_for(ApplicationStatus.ONHOLD) is not None
        assert updated.timestamp_for(ApplicationStatus.INTERVIEWED) == ts(5)
        assert updated.version == 2

    def test_conflict_surfaces_when_retries_exhausted(self, job_store, engine, make_submission, job_id):
        store = InterferingStore(interferences=2)
        service = ApplicationWorkflowService(
            store, job_store, engine=engine, settings=WorkflowSettings(transition_retry_attempts=1)
        )
        created = service.submit_application(make_submission(job_id)).application

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            service.change_status(str(created.id), ApplicationStatus.REVIEWED, actor="admin-1")
        assert exc_info.value.retryable

    def test_reviving_duplicate_clashes_with_live_application(
        self, service, application_store, make_submission, job_id
    ):
        first = service.submit_application(make_submission(job_id)).application
        service.change_status(str(first.id), ApplicationStatus.DUPLICATE, actor="admin-1")
        assert service.submit_application(make_submission(job_id)).success

        with pytest.raises(DuplicateApplicationError) as exc_info:
            service.change_status(str(first.id), ApplicationStatus.REVIEWED, actor="admin-1")

        assert exc_info.value.job_id == job_id
        unchanged = application_store.get_application(str(first.id))
        assert unchanged.current_status == ApplicationStatus.DUPLICATE
        assert not unchanged.dedupe_active

    def test_add_note(self, service, make_submission, job_id):
        created = service.submit_application(make_submission(job_id)).application
        updated = service.add_note(str(created.id), "admin-1", "Strong systems background")

        assert len(updated.notes) == 1
        assert updated.notes[0].note == "Strong systems background"
        assert updated.notes[0].user_id == "admin-1"


# ═══════════════════════════════════════════════════════════════════════════
#  Payouts
# ═══════════════════════════════════════════════════════════════════════════


class TestPayout:
    def test_hire_records_payout(self, service, make_submission, job_id):
        created = service.submit_application(make_submission(job_id)).application
        hired = service.change_status(str(created.id), ApplicationStatus.HIRED, actor="admin-1")

        payout = hired.payout
        assert payout is not None
        assert payout.recruiter_id == "recruiter-1"
        assert payout.job_id == job_id
        assert payout.currency == "USD"
        assert payout.computed_by == "admin-1"
        assert payout.breakdown.recruiter_amount == pytest.approx(36_000)
        assert payout.breakdown.platform_fee_amount == pytest.approx(24_000)

    def test_payout_is_not_recomputed(self, service, job_store, make_submission, job_id):
        created = service.submit_application(make_submission(job_id)).application
        first = service.change_status(str(created.id), ApplicationStatus.HIRED, actor="admin-1")

        # Terms edited behind the service's back
        job_store.update_commission_terms(
            job_id, JobCommissionTerms(original_percentage=20, reduction_percentage=10)
        )
        service.change_status(str(created.id), ApplicationStatus.REJECTED, actor="admin-1")
        rehired = service.change_status(str(created.id), ApplicationStatus.HIRED, actor="admin-2")

        assert rehired.payout == first.payout

    def test_concurrent_hires_record_one_payout(
        self, monkeypatch, job_store, engine, workflow_settings, make_submission, job_id
    ):
        store = PayoutGateStore()
        service = ApplicationWorkflowService(
            store, job_store, engine=engine, settings=workflow_settings
        )
        created = service.submit_application(make_submission(job_id)).application
        audited = []
        monkeypatch.setattr(
            workflow_service,
            "audit_log",
            lambda action, details, audit_type="STATUS": audited.append(action),
        )
        results = []

        def hire(actor):
            results.append(service.change_status(str(created.id), ApplicationStatus.HIRED, actor))

        threads = [threading.Thread(target=hire, args=(a,)) for a in ("admin-1", "admin-2")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert len(results) == 2
        assert results[0].payout == results[1].payout
        assert store.get_application(str(created.id)).payout == results[0].payout
        assert audited.count("payout_recorded") == 1

    def test_no_payout_before_hire(self, service, make_submission, job_id):
        created = service.submit_application(make_submission(job_id)).application
        offered = service.change_status(str(created.id), ApplicationStatus.OFFERED, actor="admin-1")
        assert offered.payout is None

    def test_missing_job_skips_payout(self, service, make_submission):
        created = service.submit_application(make_submission("missing-job")).application
        hired = service.change_status(str(created.id), ApplicationStatus.HIRED, actor="admin-1")

        assert hired.current_status == ApplicationStatus.HIRED
        assert hired.payout is None


# ═══════════════════════════════════════════════════════════════════════════
#  Commission
# ═══════════════════════════════════════════════════════════════════════════


class TestJobCommission:
    def test_commission_for_job(self, service, job_id):
        breakdown = service.commission_for_job(job_id)
        assert breakdown.original_amount == pytest.approx(60_000)
        assert breakdown.recruiter_amount == pytest.approx(36_000)

    def test_recruiter_commission_for_job(self, service, job_store, make_job):
        job_id = job_store.add_job(make_job(currency="INR"))
        view = service.recruiter_commission_for_job(job_id)

        assert view.recruiter_amount == pytest.approx(36_000)
        assert view.currency == "INR"

    def test_unknown_job(self, service):
        with pytest.raises(JobNotFoundError):
            service.commission_for_job("missing-job")

    def test_update_clamps_inputs(self, service, job_store, job_id):
        breakdown = service.update_job_commission(
            job_id, JobCommissionTerms(original_percentage=80, reduction_percentage=40)
        )

        assert breakdown.original_percentage == 50
        assert breakdown.original_amount == pytest.approx(300_000)
        stored, _ = job_store.get_job_commission_terms(job_id)
        assert stored.original_percentage == 50

    def test_update_switching_type_zeroes_other_branch(self, service, job_store, job_id):
        breakdown = service.update_job_commission(
            job_id,
            JobCommissionTerms(
                type=CommissionType.FIXED,
                original_percentage=10,
                fixed_amount=50_000,
                reduction_percentage=40,
            ),
        )

        assert breakdown.recruiter_amount == pytest.approx(30_000)
        stored, _ = job_store.get_job_commission_terms(job_id)
        assert stored.original_percentage == 0
        assert stored.fixed_amount == 50_000

    def test_update_locked_after_hire(self, service, make_submission, job_id):
        created = service.submit_application(make_submission(job_id)).application
        service.change_status(str(created.id), ApplicationStatus.HIRED, actor="admin-1")

        with pytest.raises(CommissionLockedError):
            service.update_job_commission(
                job_id, JobCommissionTerms(original_percentage=20, reduction_percentage=40)
            )
