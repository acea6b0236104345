# ============================================================================
# src/clinical_provenance/core/context/concepts.py
# ============================================================================
"""
Concept matches
- One taxonomy hit in the letter text, normalized and coded
- ClinicalConcepts groups hits by category
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .enums import ConceptCategory

@dataclass(frozen=True)
class ConceptMatch:
    category: ConceptCategory
    raw_term: str                     # Surface text as written in the letter
    normalized_term: str              # Canonical term, e.g. "Atrial Fibrillation"
    code: Optional[str] = None        # ICD-10 for diagnoses, MBS item for procedures
    code_system: Optional[str] = None
    group: Optional[str] = None       # e.g. "Arrhythmia", "Antiplatelet"
    confidence: float = 0.0
    start_index: int = 0
    end_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "category": self.category.value,
            "term": self.raw_term,
            "normalizedTerm": self.normalized_term,
            "confidence": self.confidence,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
        }
        if self.code is not None:
            data["code"] = self.code
            data["codeSystem"] = self.code_system
        if self.group is not None:
            data["group"] = self.group
        return data


@dataclass
class ClinicalConcepts:
    diagnoses: List[ConceptMatch] = field(default_factory=list)
    procedures: List[ConceptMatch] = field(default_factory=list)
    medications: List[ConceptMatch] = field(default_factory=list)
    findings: List[ConceptMatch] = field(default_factory=list)
    risk_factors: List[ConceptMatch] = field(default_factory=list)

    def for_category(self, category: ConceptCategory) -> List[ConceptMatch]:
        return {
            ConceptCategory.DIAGNOSIS: self.diagnoses,
            ConceptCategory.PROCEDURE: self.procedures,
            ConceptCategory.MEDICATION: self.medications,
            ConceptCategory.FINDING: self.findings,
            ConceptCategory.RISK_FACTOR: self.risk_factors,
        }[category]

    def __iter__(self) -> Iterator[ConceptMatch]:
        for category in ConceptCategory:
            yield from self.for_category(category)

    def is_empty(self) -> bool:
        return not any(True for _ in self)

    def counts(self) -> Dict[str, int]:
        return {
            "diagnoses": len(self.diagnoses),
            "procedures": len(self.procedures),
            "medications": len(self.medications),
            "findings": len(self.findings),
            "riskFactors": len(self.risk_factors),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "diagnoses": [c.to_dict() for c in self.diagnoses],
            "procedures": [c.to_dict() for c in self.procedures],
            "medications": [c.to_dict() for c in self.medications],
            "findings": [c.to_dict() for c in self.findings],
            "riskFactors": [c.to_dict() for c in self.risk_factors],
        }
