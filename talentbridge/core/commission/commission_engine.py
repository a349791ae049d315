"""
Commission engine.

Turns a job's commission terms into the split between the platform
and the submitting recruiter. Every calculation is a pure function of
its inputs and the injected ``CommissionSettings``; inputs that break
an invariant are logged and produce a zeroed breakdown.
"""

from typing import Optional

from talentbridge.core.exceptions import InvariantViolation
from talentbridge.data.models import (
    CommissionBreakdown,
    FixedCommissionSplit,
    JobCommissionTerms,
    RecruiterCommissionView,
)
from talentbridge.utils.config import CommissionSettings, get_settings
from talentbridge.utils.constants import AuditAction, CommissionType
from talentbridge.utils.logger import audit_log, get_logger

logger = get_logger(__name__)


class CommissionEngine:
    """
    Computes commission breakdowns.

    Callers are expected to clamp percentages with
    ``clamp_commission_percentage`` / ``clamp_reduction_percentage``
    before calling; the engine trusts its inputs apart from rejecting
    negative salaries.
    """

    def __init__(self, settings: Optional[CommissionSettings] = None):
        """
        Initialize the commission engine.

        Args:
            settings: Commission bounds and defaults. Defaults to the
                application settings.
        """
        self.settings = settings or get_settings().commission

    # -------------------------------------------------------------------------
    # Caller-side input clamping
    # -------------------------------------------------------------------------

    def clamp_commission_percentage(self, value: float) -> float:
        """Clamp a commission percentage to the configured bounds."""
        return min(
            max(value, self.settings.min_commission_percentage),
            self.settings.max_commission_percentage,
        )

    def clamp_reduction_percentage(self, value: float) -> float:
        """Clamp a platform reduction percentage to the configured bounds."""
        return min(
            max(value, self.settings.min_reduction_percentage),
            self.settings.max_reduction_percentage,
        )

    # -------------------------------------------------------------------------
    # Calculations
    # -------------------------------------------------------------------------

    def compute_percentage_commission(
        self,
        salary_max: float,
        original_percentage: float,
        reduction_percentage: float,
    ) -> CommissionBreakdown:
        """
        Split a percentage-of-salary commission.

        The recruiter's amount is floored at ``min_commission_percentage``,
        a percentage value applied to a currency amount. The floor is kept
        as-is for parity with amounts already shown to recruiters.

        Args:
            salary_max: Top of the job's salary range
            original_percentage: Commission percentage set on the job
            reduction_percentage: Platform's cut of the commission

        Returns:
            CommissionBreakdown of type PERCENTAGE
        """
        if salary_max < 0:
            self._report_anomaly(
                InvariantViolation(
                    "Negative salary passed to percentage commission",
                    {"salary_max": salary_max},
                )
            )
            return CommissionBreakdown.zero(CommissionType.PERCENTAGE, reduction_percentage)

        if original_percentage <= 0 or salary_max <= 0:
            # Not computable yet, e.g. salary still missing on a draft job
            breakdown = CommissionBreakdown.zero(CommissionType.PERCENTAGE, reduction_percentage)
            if original_percentage > 0:
                breakdown.original_percentage = original_percentage
            return breakdown

        floor = self.settings.min_commission_percentage

        original_amount = salary_max * original_percentage / 100
        reduction = original_amount * reduction_percentage / 100
        recruiter_amount = max(original_amount - reduction, floor)

        recruiter_percentage = max(
            original_percentage - original_percentage * reduction_percentage / 100,
            floor,
        )

        return CommissionBreakdown(
            type=CommissionType.PERCENTAGE,
            original_percentage=original_percentage,
            recruiter_percentage=recruiter_percentage,
            platform_fee_percentage=max(0.0, original_percentage - recruiter_percentage),
            reduction_percentage=reduction_percentage,
            original_amount=original_amount,
            recruiter_amount=recruiter_amount,
            platform_fee_amount=original_amount - recruiter_amount,
        )

    def compute_fixed_commission_breakdown(
        self,
        fixed_amount: float,
        reduction_percentage: float,
    ) -> FixedCommissionSplit:
        """
        Split a fixed commission amount.

        Unlike the percentage path, the recruiter amount is floored at 0.
        """
        if fixed_amount <= 0:
            return FixedCommissionSplit()

        platform_fee_amount = fixed_amount * reduction_percentage / 100
        return FixedCommissionSplit(
            recruiter_amount=max(fixed_amount - platform_fee_amount, 0.0),
            platform_fee_amount=platform_fee_amount,
        )

    def recompute_on_change(
        self,
        terms: JobCommissionTerms,
        salary_max: float,
    ) -> CommissionBreakdown:
        """
        Rebuild the full breakdown for the given terms and salary.

        Call whenever salary, type, percentage, fixed amount, hourly rate
        or reduction changes. The result replaces any previous breakdown;
        fields of inactive branches are always zero.
        """
        commission_type = terms.commission_type
        reduction = terms.reduction_percentage

        if terms.has_conflicting_branches:
            self._report_anomaly(
                InvariantViolation(
                    "Commission terms have more than one active branch",
                    {
                        "type": commission_type.value,
                        "active_branches": [b.value for b in terms.active_branches],
                    },
                )
            )
            return CommissionBreakdown.zero(commission_type, reduction)

        if commission_type == CommissionType.PERCENTAGE:
            return self.compute_percentage_commission(
                salary_max, terms.original_percentage, reduction
            )

        amount = (
            terms.fixed_amount
            if commission_type == CommissionType.FIXED
            else terms.hourly_rate
        )
        split = self.compute_fixed_commission_breakdown(amount, reduction)

        return CommissionBreakdown(
            type=commission_type,
            fixed_amount=terms.fixed_amount if commission_type == CommissionType.FIXED else 0.0,
            hourly_rate=terms.hourly_rate if commission_type == CommissionType.HOURLY else 0.0,
            reduction_percentage=reduction,
            original_amount=max(amount, 0.0),
            recruiter_amount=split.recruiter_amount,
            platform_fee_amount=split.platform_fee_amount,
        )

    def recruiter_view(
        self,
        breakdown: CommissionBreakdown,
        currency: Optional[str] = None,
    ) -> RecruiterCommissionView:
        """Reduce a breakdown to what the submitting recruiter is shown."""
        return RecruiterCommissionView(
            type=breakdown.type,
            recruiter_percentage=breakdown.recruiter_percentage,
            recruiter_amount=breakdown.recruiter_amount,
            currency=currency or self.settings.default_currency,
        )

    def _report_anomaly(self, violation: InvariantViolation) -> None:
        logger.warning(f"Commission invariant violated: {violation} {violation.context}")
        audit_log(
            AuditAction.COMMISSION_ANOMALY.value,
            {"message": str(violation), **violation.context},
            audit_type="COMMISSION",
        )


# Singleton instance
_commission_engine: Optional[CommissionEngine] = None


def get_commission_engine() -> CommissionEngine:
    """Get the commission engine singleton instance."""
    global _commission_engine
    if _commission_engine is None:
        _commission_engine = CommissionEngine()
    return _commission_engine
