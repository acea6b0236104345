# src/clinical_provenance/analysis/__init__.py
"""
Derived Views & Review

- Verification tracking and rate
- Cardiovascular risk profile
- ICD-10 / MBS coding
- Hallucination flags and risk
- Clinician review and approval gates
"""

from .verification import (
    group_values_by_type,
    get_unverified_values,
    get_clinician_unverified_values,
    get_values_requiring_attention,
    calculate_verification_rate,
)
from .risk_profile import calculate_risk_profile, risk_level_for_score
from .coding import get_icd10_codes, get_mbs_items
from .hallucination import (
    HallucinationDetector,
    detect_hallucinations,
    group_flags_by_severity,
    calculate_hallucination_risk,
    generate_hallucination_report,
    recommend_approval,
)
from .review import apply_verification, dismiss_flags, evaluate_approval_requirements
