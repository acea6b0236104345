# ============================================================================
# src/clinical_provenance/analysis/review.py
# ============================================================================
"""
Review Workflow

Clinician actions on an analyzed letter:
- Confirm extracted values
- Dismiss hallucination flags
- Check whether the letter can be approved

Every operation returns new records; inputs are left unchanged.
"""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence
import logging

from ..config.thresholds_config import threshold_settings
from ..core.context.clinical_value import ClinicalValue
from ..core.context.enums import FlagSeverity, ValueType
from ..core.context.hallucination_flag import HallucinationFlag
from ..core.context.summaries import ApprovalStatus
from ..utils.exceptions import UnknownValueError
from .hallucination import calculate_hallucination_risk
from .verification import calculate_verification_rate

logger = logging.getLogger(__name__)


# Value types that must be confirmed before approval
CRITICAL_VALUE_TYPES = (ValueType.MEASUREMENT, ValueType.DIAGNOSIS)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def apply_verification(
    values: Sequence[ClinicalValue],
    verified_ids: Iterable[str],
    verified_by: str,
    verified_at: Optional[datetime] = None,
) -> List[ClinicalValue]:
    """
    Mark values as clinician-verified.

    Raises:
        UnknownValueError: an id does not belong to the value set
    """
    ids = set(verified_ids)
    unknown = ids - {v.id for v in values}
    if unknown:
        raise UnknownValueError(
            f"Cannot verify unknown values: {', '.join(sorted(unknown))}",
            unknown_ids=sorted(unknown),
        )

    stamp = verified_at or _now()
    updated = [
        replace(v, verified=True, verified_at=stamp, verified_by=verified_by) if v.id in ids else v
        for v in values
    ]

    logger.info(f"Verified {len(ids)} clinical values")
    return updated


def dismiss_flags(
    flags: Sequence[HallucinationFlag],
    flag_ids: Iterable[str],
    dismissed_by: str,
    reason: str = "Reviewed by clinician",
    dismissed_at: Optional[datetime] = None,
) -> List[HallucinationFlag]:
    """Mark flags as dismissed; ids not in the list are ignored."""
    ids = set(flag_ids)
    stamp = dismissed_at or _now()

    updated = [
        replace(f, dismissed=True, dismissed_at=stamp, dismissed_by=dismissed_by, dismiss_reason=reason)
        if f.id in ids else f
        for f in flags
    ]

    logger.info(f"Dismissed {sum(1 for f in flags if f.id in ids)} hallucination flags")
    return updated


def evaluate_approval_requirements(
    values: Sequence[ClinicalValue],
    flags: Sequence[HallucinationFlag],
) -> ApprovalStatus:
    """
    Check the approval gates.

    Errors block approval: unverified measurements or diagnoses, and
    undismissed critical flags. Warnings do not: remaining warning flags,
    a low verification rate, a high hallucination risk score.
    """
    errors = []
    warnings = []

    unverified_critical = [v for v in values if v.type in CRITICAL_VALUE_TYPES and not v.verified]
    if unverified_critical:
        names = ", ".join(v.name for v in unverified_critical)
        errors.append(f"{len(unverified_critical)} critical clinical values not verified: {names}")

    open_critical = [f for f in flags if f.severity == FlagSeverity.CRITICAL and not f.dismissed]
    if open_critical:
        errors.append(f"{len(open_critical)} critical hallucination flags not addressed")

    open_warnings = [f for f in flags if f.severity == FlagSeverity.WARNING and not f.dismissed]
    if open_warnings:
        warnings.append(f"{len(open_warnings)} warning-level hallucination flags remain")

    stats = calculate_verification_rate(values)
    rate_ok = stats.rate >= threshold_settings.APPROVAL_MIN_VERIFICATION_RATE
    if not rate_ok:
        warnings.append(
            f"Low verification rate: {stats.rate:.1f}% "
            f"(recommended: >{threshold_settings.APPROVAL_MIN_VERIFICATION_RATE:.0f}%)"
        )

    risk = calculate_hallucination_risk(flags)
    if risk.score > threshold_settings.HALLUCINATION_RISK_WARNING_SCORE:
        warnings.append(
            f"High hallucination risk score: {risk.score}/100 "
            f"(recommended: <{threshold_settings.HALLUCINATION_RISK_WARNING_SCORE})"
        )

    status = ApprovalStatus(
        can_approve=not errors,
        critical_values_verified=not unverified_critical,
        critical_flags_addressed=not open_critical,
        verification_rate_sufficient=rate_ok,
        errors=errors,
        warnings=warnings,
    )

    logger.info(
        f"Approval requirements: can_approve={status.can_approve} "
        f"errors={len(errors)} warnings={len(warnings)}"
    )
    return status
