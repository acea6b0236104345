# ============================================================================
# src/clinical_provenance/core/context/summaries.py
# ============================================================================
"""
Derived views
- Verification statistics
- Risk profile
- Source coverage
- Approval status
Computed from the current value set on every call, never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .enums import RiskLevel

@dataclass(frozen=True)
class VerificationStats:
    total_values: int
    verified_values: int          # Values carrying a source anchor id
    rate: float                   # Percentage, 100.0 when there are no values

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalValues": self.total_values,
            "verifiedValues": self.verified_values,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class RiskProfile:
    score: int
    level: RiskLevel
    factors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "level": self.level.value, "factors": list(self.factors)}


@dataclass(frozen=True)
class SourceCoverage:
    is_valid: bool
    unsourced_statements: List[str]
    coverage: float               # Percentage of clinical statements with a nearby anchor
    total_statements: int = 0
    sourced_statements: int = 0


@dataclass(frozen=True)
class ApprovalStatus:
    can_approve: bool
    critical_values_verified: bool
    critical_flags_addressed: bool
    verification_rate_sufficient: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
