# src/clinical_provenance/core/context/__init__.py

from .enums import (
    ValueType,
    ConceptCategory,
    SourceType,
    RiskLevel,
    FlagSeverity,
    HallucinationRiskLevel,
)
from .clinical_value import ClinicalValue
from .source_anchor import SourceAnchor
from .concepts import ConceptMatch, ClinicalConcepts
from .summaries import VerificationStats, RiskProfile, SourceCoverage, ApprovalStatus
from .hallucination_flag import HallucinationFlag, HallucinationRisk, ApprovalRecommendation
from .sources import (
    LetterSources,
    TranscriptSource,
    SpeakerSegment,
    DocumentSource,
    UserInputSource,
)

__all__ = [
    "ValueType",
    "ConceptCategory",
    "SourceType",
    "RiskLevel",
    "FlagSeverity",
    "HallucinationRiskLevel",
    "ClinicalValue",
    "SourceAnchor",
    "ConceptMatch",
    "ClinicalConcepts",
    "VerificationStats",
    "RiskProfile",
    "SourceCoverage",
    "ApprovalStatus",
    "HallucinationFlag",
    "HallucinationRisk",
    "ApprovalRecommendation",
    "LetterSources",
    "TranscriptSource",
    "SpeakerSegment",
    "DocumentSource",
    "UserInputSource",
]
