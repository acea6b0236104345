# src/clinical_provenance/extractors/__init__.py
"""
Letter Text Extractors

- Quantitative measurements and medication doses (regex patterns)
- Taxonomy concepts: diagnoses, procedures, medications, findings, risk factors
"""

from .value_extractor import ValueExtractor, extract_measurements, ensure_text
from .concept_extractor import (
    ConceptExtractor,
    extract_clinical_concepts,
    generate_concept_summary,
)
