# ============================================================================
# src/clinical_provenance/core/context/clinical_value.py
# ============================================================================
"""
Single extracted clinical fact
- Measurement, diagnosis, medication dose or procedure
- Weak provenance link (anchor id only) and clinician verification state
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .enums import ValueType

@dataclass
class ClinicalValue:
    id: str
    type: ValueType
    name: str                      # Display label, e.g. "LVEF", "Blood Pressure"
    value: str                     # Canonical string, e.g. "45", "120/80"
    unit: Optional[str] = None

    # Provenance: lookup key into the caller's anchor list, never the anchor itself
    source_anchor_id: Optional[str] = None

    # Clinician-asserted, independent of source_anchor_id
    verified: bool = False
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None

    # Offset of the match in the letter text
    start_index: Optional[int] = None

    @property
    def has_source(self) -> bool:
        return self.source_anchor_id is not None

    @property
    def requires_attention(self) -> bool:
        """Neither confirmed by a clinician nor backed by a source anchor."""
        return not self.verified and self.source_anchor_id is None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase rendering for the verification panel"""
        data: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "value": self.value,
            "verified": self.verified,
        }
        if self.unit is not None:
            data["unit"] = self.unit
        if self.source_anchor_id is not None:
            data["sourceAnchorId"] = self.source_anchor_id
        if self.start_index is not None:
            data["startIndex"] = self.start_index
        if self.verified_at is not None:
            data["verifiedAt"] = self.verified_at.isoformat()
        if self.verified_by is not None:
            data["verifiedBy"] = self.verified_by
        return data
