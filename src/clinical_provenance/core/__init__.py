# ============================================================================
# src/clinical_provenance/core/__init__.py
# ============================================================================
"""
Core data model for the clinical provenance engine.

The engine itself lives in core.engine and is imported from the package
root; importing it here would make every analysis module depend on it.
"""

from .context import (
    ValueType,
    ConceptCategory,
    SourceType,
    RiskLevel,
    FlagSeverity,
    HallucinationRiskLevel,
    ClinicalValue,
    SourceAnchor,
    ConceptMatch,
    ClinicalConcepts,
    VerificationStats,
    RiskProfile,
    SourceCoverage,
    ApprovalStatus,
    HallucinationFlag,
    HallucinationRisk,
    ApprovalRecommendation,
    LetterSources,
)
