"""
Duplicate candidate validator.

Decides at submission time whether a candidate is already represented
for a job. Only an existing, non-DUPLICATE application for the same
candidate and job blocks a submission.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from talentbridge.core.exceptions import MalformedContactError
from talentbridge.data.models import Application
from talentbridge.data.repositories.interfaces import ApplicationStore
from talentbridge.utils.config import WorkflowSettings, get_settings
from talentbridge.utils.constants import (
    VALIDATION_MESSAGES,
    ApplicationStatus,
    ValidationCode,
)
from talentbridge.utils.logger import get_logger

logger = get_logger(__name__)

_email_adapter = TypeAdapter(EmailStr)
_NON_DIGITS = re.compile(r"\D")


@dataclass
class ValidationIssue:
    """A single problem (or warning) found while validating a submission."""

    field: str
    message: str  # ValidationCode value
    description: str = ""
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_code(
        cls,
        field_name: str,
        code: ValidationCode,
        details: Optional[dict[str, Any]] = None,
    ) -> "ValidationIssue":
        return cls(
            field=field_name,
            message=code.value,
            description=VALIDATION_MESSAGES[code],
            details=details or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationResult:
    """Outcome of validating a candidate for a job."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def codes(self) -> list[str]:
        return [e.message for e in self.errors]

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def normalize_email(email: str) -> str:
    """
    Trim and lowercase an email address.

    Raises:
        MalformedContactError: If the address is not a valid email
    """
    candidate = (email or "").strip().lower()
    try:
        return _email_adapter.validate_python(candidate).lower()
    except ValidationError as e:
        raise MalformedContactError("email", email, "not a valid email address") from e


def normalize_phone(
    phone: str,
    settings: Optional[WorkflowSettings] = None,
) -> str:
    """
    Normalize a phone number to ``+<country code><number>``.

    The number must start with ``+`` or ``00`` followed by the country
    code. All other non-digit characters are dropped.

    Raises:
        MalformedContactError: If no country code is present or the
            digit count is outside the configured range
    """
    settings = settings or get_settings().workflow
    raw = (phone or "").strip()

    if raw.startswith("+"):
        digits = _NON_DIGITS.sub("", raw[1:])
    elif raw.startswith("00"):
        digits = _NON_DIGITS.sub("", raw[2:])
    else:
        raise MalformedContactError("phone", phone, "missing leading country code")

    if not digits or digits[0] == "0":
        raise MalformedContactError("phone", phone, "invalid country code")
    if not settings.min_phone_digits <= len(digits) <= settings.max_phone_digits:
        raise MalformedContactError(
            "phone",
            phone,
            f"expected {settings.min_phone_digits}-{settings.max_phone_digits} digits",
        )
    return f"+{digits}"


class DuplicateValidator:
    """
    Checks a candidate against existing applications.

    The check is advisory: validation and creation are not atomic, so
    stores also enforce uniqueness on write.
    """

    def __init__(
        self,
        store: ApplicationStore,
        settings: Optional[WorkflowSettings] = None,
    ):
        self.store = store
        self.settings = settings or get_settings().workflow

    def validate_candidate(self, email: str, phone: str, job_id: str) -> ValidationResult:
        """
        Validate a candidate's email/phone for a job.

        Args:
            email: Candidate email as entered
            phone: Candidate phone as entered, with country code
            job_id: Job the candidate is being submitted to

        Returns:
            ValidationResult; ``warnings`` is always empty
        """
        result = ValidationResult()

        normalized_email = normalized_phone = None
        try:
            normalized_email = normalize_email(email)
        except MalformedContactError:
            result.errors.append(ValidationIssue.from_code("email", ValidationCode.MALFORMED_EMAIL))
        try:
            normalized_phone = normalize_phone(phone, self.settings)
        except MalformedContactError:
            result.errors.append(ValidationIssue.from_code("phone", ValidationCode.MALFORMED_PHONE))

        if not result.is_valid:
            return result

        existing = self.store.find_applications_by_candidate(
            normalized_email, normalized_phone
        )
        same_job = [a for a in existing if a.job_id == job_id]
        blocking = [a for a in same_job if a.current_status != ApplicationStatus.DUPLICATE]

        if blocking:
            result.errors.append(self.duplicate_issue(blocking[0]))

        other_jobs = len(existing) - len(same_job)
        if other_jobs:
            # Cross-job matches are informational and not reported
            logger.debug(f"Candidate has {other_jobs} application(s) for other jobs")

        return result

    @staticmethod
    def duplicate_issue(existing: Optional[Application] = None) -> ValidationIssue:
        """Build the DUPLICATE_FOR_JOB error, with details when the prior record is known."""
        details: dict[str, Any] = {}
        if existing is not None:
            details = {
                "application_id": str(existing.id) if existing.id else None,
                "candidate_name": existing.candidate.candidate_name,
                "submitted_at": existing.timestamp_for(ApplicationStatus.SUBMITTED)
                or existing.created_at,
            }
        return ValidationIssue.from_code("email", ValidationCode.DUPLICATE_FOR_JOB, details)
