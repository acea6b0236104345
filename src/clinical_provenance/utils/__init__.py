# src/clinical_provenance/utils/__init__.py
"""
Shared utilities: exceptions, logging, metrics, text matching
"""

from .exceptions import (
    ClinicalProvenanceError,
    ConfigurationError,
    TaxonomyLoadError,
    ValidationError,
    InvalidLetterTextError,
    MalformedAnchorError,
    ReviewError,
    UnknownValueError,
)
from .logging import setup_logging, setup_logging_from_settings, LogContext, log_performance
from .metrics import MetricsCollector, get_metrics, time_operation
