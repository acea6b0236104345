# ============================================================================
# src/clinical_provenance/core/context/enums.py
# ============================================================================
"""
Closed categories
- Clinical value types
- Concept categories
- Source types
- Risk and flag levels
"""

from enum import Enum

class ValueType(str, Enum):
    MEASUREMENT = "measurement"
    DIAGNOSIS = "diagnosis"
    MEDICATION = "medication"
    PROCEDURE = "procedure"

class ConceptCategory(str, Enum):
    DIAGNOSIS = "diagnosis"
    PROCEDURE = "procedure"
    MEDICATION = "medication"
    FINDING = "finding"
    RISK_FACTOR = "riskFactor"

class SourceType(str, Enum):
    TRANSCRIPT = "transcript"
    DOCUMENT = "document"
    USER_INPUT = "userInput"

    @classmethod
    def parse(cls, raw: str) -> "SourceType":
        """Accept enum values plus the hyphenated 'user-input' spelling."""
        if isinstance(raw, SourceType):
            return raw
        if raw == "user-input":
            return cls.USER_INPUT
        return cls(raw)

class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very high"

class FlagSeverity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"

class HallucinationRiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"
