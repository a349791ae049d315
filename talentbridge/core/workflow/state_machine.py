"""
Application lifecycle state machine.

Owns the application's status and its per-status timestamp ledger.
Any status may follow any other by default, so staff can fast-track or
correct an application; a ``TransitionPolicy`` can narrow that.
"""

from datetime import datetime
from typing import Iterable, Optional

from talentbridge.core.exceptions import InvalidTransitionError
from talentbridge.data.models import Application, utc_now
from talentbridge.utils.constants import ApplicationStatus
from talentbridge.utils.logger import get_logger

logger = get_logger(__name__)

StatusPair = tuple[ApplicationStatus, ApplicationStatus]


class TransitionPolicy:
    """
    Allowed ``(from, to)`` status pairs.

    ``None`` means every pair is allowed, which is the default.
    """

    def __init__(self, allowed: Optional[Iterable[StatusPair]] = None):
        self._allowed: Optional[frozenset[StatusPair]] = (
            frozenset(
                (ApplicationStatus(src), ApplicationStatus(dst)) for src, dst in allowed
            )
            if allowed is not None
            else None
        )

    @classmethod
    def allow_all(cls) -> "TransitionPolicy":
        return cls()

    @property
    def is_permissive(self) -> bool:
        return self._allowed is None

    def is_allowed(self, current: ApplicationStatus, new: ApplicationStatus) -> bool:
        if self._allowed is None:
            return True
        return (ApplicationStatus(current), ApplicationStatus(new)) in self._allowed


class ApplicationStateMachine:
    """
    Applies status changes to applications.

    This is the only writer of ``Application.status_timestamps``.
    Methods return updated copies and never touch storage.
    """

    def __init__(self, policy: Optional[TransitionPolicy] = None):
        self.policy = policy or TransitionPolicy.allow_all()

    def open(
        self,
        application: Application,
        occurred_at: Optional[datetime] = None,
    ) -> Application:
        """
        Put a new application into its initial SUBMITTED state.

        Raises:
            InvalidTransitionError: If the application was already opened
        """
        if application.status_timestamps:
            raise InvalidTransitionError(
                "Application already has a status history and cannot be opened again"
            )

        timestamp = occurred_at or utc_now()
        return application.model_copy(
            update={
                "status": ApplicationStatus.SUBMITTED,
                "status_timestamps": {ApplicationStatus.SUBMITTED: timestamp},
                "dedupe_active": True,
            }
        )

    def transition(
        self,
        application: Application,
        new_status: ApplicationStatus,
        occurred_at: Optional[datetime] = None,
    ) -> Application:
        """
        Move an application to ``new_status``.

        Records ``occurred_at`` (default now) as the latest timestamp for
        the new status. Timestamps of other statuses are kept, so the
        audit trail survives moves back to an earlier status.

        Args:
            application: Current application state
            new_status: Status to move to
            occurred_at: When the change happened

        Returns:
            Updated copy of the application

        Raises:
            InvalidTransitionError: If the configured policy forbids the move
        """
        new_status = ApplicationStatus(new_status)
        current = application.current_status

        if not self.policy.is_allowed(current, new_status):
            raise InvalidTransitionError(
                f"Transition {current.value} -> {new_status.value} is not allowed"
            )

        timestamps = dict(application.status_timestamps)
        timestamps[new_status] = occurred_at or utc_now()

        logger.debug(
            f"Application {application.id}: {current.value} -> {new_status.value}"
        )

        return application.model_copy(
            update={
                "status": new_status,
                "status_timestamps": timestamps,
                # A DUPLICATE record must not block later submissions
                "dedupe_active": new_status != ApplicationStatus.DUPLICATE,
            }
        )
