"""Application lifecycle, duplicate validation and workflow orchestration."""

from .duplicate_validator import (
    DuplicateValidator,
    ValidationIssue,
    ValidationResult,
    normalize_email,
    normalize_phone,
)
from .state_machine import ApplicationStateMachine, TransitionPolicy
from .workflow_service import ApplicationWorkflowService, SubmissionResult

__all__ = [
    "ApplicationStateMachine",
    "ApplicationWorkflowService",
    "DuplicateValidator",
    "SubmissionResult",
    "TransitionPolicy",
    "ValidationIssue",
    "ValidationResult",
    "normalize_email",
    "normalize_phone",
]
