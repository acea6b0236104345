# ============================================================================
# src/clinical_provenance/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the clinical provenance engine.

Extraction itself never raises on well-formed text: a missing match is an
empty result. These exceptions cover configuration, caller input and the
clinician review workflow.
"""


class ClinicalProvenanceError(Exception):
    """Base exception for all clinical provenance errors."""
    pass


class ConfigurationError(ClinicalProvenanceError):
    """Invalid configuration."""
    pass


class TaxonomyLoadError(ConfigurationError):
    """Concept taxonomy file missing or invalid."""
    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class ValidationError(ClinicalProvenanceError):
    """Caller input failed validation."""
    pass


class InvalidLetterTextError(ValidationError):
    """Letter text is not a string."""
    pass


class MalformedAnchorError(ValidationError):
    """Source anchor record is missing required fields."""
    def __init__(self, message: str, field_name: str = ""):
        super().__init__(message)
        self.field_name = field_name


class ReviewError(ClinicalProvenanceError):
    """Error applying a clinician review action."""
    pass


class UnknownValueError(ReviewError):
    """Review action references ids that are not in the value set."""
    def __init__(self, message: str, unknown_ids: list):
        super().__init__(message)
        self.unknown_ids = unknown_ids
