# ============================================================================
# src/clinical_provenance/constants/__init__.py
# ============================================================================
"""
Convenient imports for all constants
"""

from .taxonomy import (
    ConceptRule,
    ConceptTaxonomy,
    build_alternation,
    parse_taxonomy,
    load_taxonomy,
    get_default_taxonomy,
)
from .measurement_patterns import (
    MEASUREMENT_PATTERNS,
    MeasurementPattern,
    DOSE_UNITS,
    DOSE_UNIT_CANONICAL,
    build_dose_pattern,
)
