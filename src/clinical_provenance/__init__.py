# ============================================================================
# src/clinical_provenance/__init__.py
# ============================================================================
"""
Clinical Value Extraction & Provenance-Linking Engine

Pulls typed clinical facts out of generated cardiology letters, normalizes
them against a versioned concept taxonomy, ties each fact to the source
material it came from and derives the views that drive clinician review.
"""

__version__ = "0.1.0"

from .core.context import (
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
    TranscriptSource,
    SpeakerSegment,
    DocumentSource,
    UserInputSource,
)
from .core.engine import LetterAnalysis, extract_clinical_values, analyze_letter
from .constants.taxonomy import ConceptTaxonomy, load_taxonomy, get_default_taxonomy
from .extractors import extract_measurements, extract_clinical_concepts, generate_concept_summary
from .anchoring import (
    link_anchor,
    link_values,
    coerce_anchors,
    parse_source_anchors,
    AnchorParseResult,
    count_anchors_by_type,
    generate_source_summary,
    get_anchors_for_section,
    validate_clinical_sources,
)
from .analysis import (
    group_values_by_type,
    get_unverified_values,
    get_clinician_unverified_values,
    get_values_requiring_attention,
    calculate_verification_rate,
    calculate_risk_profile,
    get_icd10_codes,
    get_mbs_items,
    detect_hallucinations,
    group_flags_by_severity,
    calculate_hallucination_risk,
    generate_hallucination_report,
    recommend_approval,
    apply_verification,
    dismiss_flags,
    evaluate_approval_requirements,
)
from .utils.exceptions import (
    ClinicalProvenanceError,
    ConfigurationError,
    TaxonomyLoadError,
    ValidationError,
    InvalidLetterTextError,
    MalformedAnchorError,
    ReviewError,
    UnknownValueError,
)
