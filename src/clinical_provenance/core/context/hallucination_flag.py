# ============================================================================
# src/clinical_provenance/core/context/hallucination_flag.py
# ============================================================================
"""
Hallucination flag
- Letter span lacking support in the source material
- Dismissed by a clinician during review
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .enums import FlagSeverity, HallucinationRiskLevel

@dataclass(frozen=True)
class HallucinationFlag:
    id: str
    segment_text: str
    start_index: int
    end_index: int
    reason: str
    severity: FlagSeverity
    dismissed: bool = False
    dismissed_at: Optional[datetime] = None
    dismissed_by: Optional[str] = None
    dismiss_reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "segmentText": self.segment_text,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "reason": self.reason,
            "severity": self.severity.value,
            "dismissed": self.dismissed,
        }
        if self.dismissed_at is not None:
            data["dismissedAt"] = self.dismissed_at.isoformat()
            data["dismissedBy"] = self.dismissed_by
            data["dismissReason"] = self.dismiss_reason
        return data


@dataclass(frozen=True)
class HallucinationRisk:
    score: int                    # 0-100
    level: HallucinationRiskLevel
    flag_count: int
    critical_count: int


@dataclass(frozen=True)
class ApprovalRecommendation:
    should_approve: bool
    reason: str
    action_required: str
