"""
Commission data models for TalentBridge.

Defines a job's commission terms, the derived platform/recruiter split,
and the payout snapshot taken when a candidate is hired.
"""

from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import Field

from talentbridge.utils.config import get_settings
from talentbridge.utils.constants import CommissionType

from .base import EmbeddedModel, utc_now


def _default_reduction_percentage() -> float:
    return get_settings().commission.default_reduction_percentage


# Terms field that carries the amount for each commission type
COMMISSION_BRANCH_FIELDS: dict[CommissionType, str] = {
    CommissionType.PERCENTAGE: "original_percentage",
    CommissionType.FIXED: "fixed_amount",
    CommissionType.HOURLY: "hourly_rate",
}


class JobCommissionTerms(EmbeddedModel):
    """
    Commission terms attached to a job.

    Only the branch matching ``type`` should be non-zero. Use
    ``with_type`` to switch types; it resets the other branches.
    """

    type: CommissionType = CommissionType.PERCENTAGE
    original_percentage: float = Field(default=0, ge=0, le=100)
    fixed_amount: float = Field(default=0, ge=0)
    hourly_rate: float = Field(default=0, ge=0)
    reduction_percentage: float = Field(
        default_factory=_default_reduction_percentage, ge=0, le=100
    )

    @property
    def commission_type(self) -> CommissionType:
        return CommissionType(self.type)

    @property
    def active_branches(self) -> list[CommissionType]:
        """Commission types whose amount field is non-zero."""
        return [
            commission_type
            for commission_type, field_name in COMMISSION_BRANCH_FIELDS.items()
            if getattr(self, field_name) > 0
        ]

    @property
    def has_conflicting_branches(self) -> bool:
        """True when a branch other than ``type`` carries a value."""
        return any(b != self.commission_type for b in self.active_branches)

    def with_type(self, new_type: CommissionType) -> "JobCommissionTerms":
        """Return a copy switched to ``new_type`` with the other branches zeroed."""
        new_type = CommissionType(new_type)
        update = {"type": new_type.value}
        for commission_type, field_name in COMMISSION_BRANCH_FIELDS.items():
            if commission_type != new_type:
                update[field_name] = 0.0
        return self.model_copy(update=update)


class CommissionBreakdown(EmbeddedModel):
    """
    Platform/recruiter split derived from a job's commission terms.

    Recomputed on demand. Percentages and currency amounts are tracked
    separately.
    """

    type: CommissionType = CommissionType.PERCENTAGE

    # Percentages (percentage-based commission only)
    original_percentage: float = 0.0
    recruiter_percentage: float = 0.0
    platform_fee_percentage: float = 0.0

    # Inputs for the amount-based types
    fixed_amount: float = 0.0
    hourly_rate: float = 0.0
    reduction_percentage: float = 0.0

    # Currency amounts
    original_amount: float = 0.0
    recruiter_amount: float = 0.0
    platform_fee_amount: float = 0.0

    @classmethod
    def zero(
        cls,
        commission_type: CommissionType = CommissionType.PERCENTAGE,
        reduction_percentage: float = 0.0,
    ) -> "CommissionBreakdown":
        """Breakdown with every derived value at zero."""
        return cls(type=commission_type, reduction_percentage=reduction_percentage)

    def is_balanced(self, tolerance: float = 1e-6) -> bool:
        """Check recruiter + platform amounts add up to the original amount."""
        total = self.recruiter_amount + self.platform_fee_amount
        return abs(total - self.original_amount) <= tolerance * max(1.0, abs(self.original_amount))


class FixedCommissionSplit(EmbeddedModel):
    """Recruiter and platform amounts for a fixed (or hourly) commission."""

    recruiter_amount: float = 0.0
    platform_fee_amount: float = 0.0


class RecruiterCommissionView(EmbeddedModel):
    """The part of a commission a recruiter is shown. Platform cut is hidden."""

    type: CommissionType
    recruiter_percentage: float = 0.0
    recruiter_amount: float = 0.0
    currency: str = "USD"


class PayoutRecord(EmbeddedModel):
    """Commission snapshot taken when an application first becomes HIRED."""

    payout_id: str = Field(default_factory=lambda: str(ObjectId()))
    job_id: str
    recruiter_id: str
    currency: str = "USD"
    breakdown: CommissionBreakdown
    computed_at: datetime = Field(default_factory=utc_now)
    computed_by: Optional[str] = None
