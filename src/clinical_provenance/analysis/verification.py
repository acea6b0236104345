# ============================================================================
# src/clinical_provenance/analysis/verification.py
# ============================================================================
"""
Verification Tracker

Read-only views over the current value set for the verification panel:
- Values grouped by type
- Values lacking a source anchor
- Verification rate
"""

from typing import Dict, List, Sequence

from ..config.thresholds_config import threshold_settings
from ..core.context.clinical_value import ClinicalValue
from ..core.context.enums import ValueType
from ..core.context.summaries import VerificationStats

# Group key per value type, in panel order
VALUE_GROUPS = {
    ValueType.MEASUREMENT: "measurements",
    ValueType.DIAGNOSIS: "diagnoses",
    ValueType.MEDICATION: "medications",
    ValueType.PROCEDURE: "procedures",
}


def group_values_by_type(values: Sequence[ClinicalValue]) -> Dict[str, List[ClinicalValue]]:
    """Partition values into measurements, diagnoses, medications and procedures; other types are dropped."""
    grouped: Dict[str, List[ClinicalValue]] = {key: [] for key in VALUE_GROUPS.values()}
    for value in values:
        key = VALUE_GROUPS.get(value.type)
        if key is not None:
            grouped[key].append(value)
    return grouped


def get_unverified_values(values: Sequence[ClinicalValue]) -> List[ClinicalValue]:
    """Values with no source anchor."""
    return [v for v in values if v.source_anchor_id is None]


def get_clinician_unverified_values(values: Sequence[ClinicalValue]) -> List[ClinicalValue]:
    """Values a clinician has not confirmed yet."""
    return [v for v in values if not v.verified]


def get_values_requiring_attention(values: Sequence[ClinicalValue]) -> List[ClinicalValue]:
    """Values neither confirmed by a clinician nor backed by a source anchor."""
    return [v for v in values if v.requires_attention]


def calculate_verification_rate(values: Sequence[ClinicalValue]) -> VerificationStats:
    """
    Share of values carrying a source anchor, as a percentage.

    An empty value set counts as fully verified: (0, 0, 100.0).
    """
    total = len(values)
    if total == 0:
        return VerificationStats(total_values=0, verified_values=0, rate=100.0)

    anchored = sum(1 for v in values if v.source_anchor_id is not None)
    rate = round(anchored / total * 100, threshold_settings.VERIFICATION_RATE_PRECISION)
    return VerificationStats(total_values=total, verified_values=anchored, rate=rate)
