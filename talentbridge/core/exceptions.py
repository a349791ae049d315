"""
Error types raised by the TalentBridge core.

Submission validation problems are not exceptions: they are returned
as ``ValidationResult`` objects. The types here cover malformed input,
storage conflicts and caller bugs.
"""

from typing import Any, Optional


class TalentBridgeError(Exception):
    """Base class for all TalentBridge errors."""

    retryable: bool = False


class MalformedContactError(TalentBridgeError, ValueError):
    """An email address or phone number cannot be normalized."""

    def __init__(self, field: str, value: str, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed {field}: {reason}")


class InvariantViolation(TalentBridgeError):
    """
    Inputs that break a data invariant, e.g. a negative salary.

    The commission engine logs these and returns zeroed output instead
    of raising them.
    """

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self.context = context or {}
        super().__init__(message)


class ConcurrencyConflictError(TalentBridgeError):
    """A status write was based on a stale version of the application."""

    retryable = True

    def __init__(self, application_id: str, expected_version: int) -> None:
        self.application_id = application_id
        self.expected_version = expected_version
        super().__init__(
            f"Application {application_id} changed since version {expected_version}"
        )


class DuplicateApplicationError(TalentBridgeError):
    """Storage refused a write that would duplicate a candidate for a job."""

    def __init__(self, job_id: str, normalized_email: str, normalized_phone: str) -> None:
        self.job_id = job_id
        self.normalized_email = normalized_email
        self.normalized_phone = normalized_phone
        super().__init__(f"Candidate already has an application for job {job_id}")


class ApplicationNotFoundError(TalentBridgeError, LookupError):
    """No application exists with the given id."""

    def __init__(self, application_id: str) -> None:
        self.application_id = application_id
        super().__init__(f"Application not found: {application_id}")


class JobNotFoundError(TalentBridgeError, LookupError):
    """No job exists with the given id."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Job not found: {job_id}")


class InvalidTransitionError(TalentBridgeError):
    """A status change is not allowed by the configured transition policy."""


class CommissionLockedError(TalentBridgeError):
    """Commission terms cannot change once a candidate was hired against the job."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"Commission terms for job {job_id} are locked by a hire")
