# src/clinical_provenance/anchoring/__init__.py
"""
Source Anchoring

- Inline citation marker parsing and excerpt verification
- Value -> anchor linking within a proximity window
- Citation counts and clinical statement coverage
"""

from .anchor_linker import coerce_anchors, anchor_spans, link_anchor, link_values
from .anchor_parser import (
    SourceAnchorParser,
    AnchorParseResult,
    AnchorVerification,
    SOURCE_MARKER_PATTERN,
    parse_source_anchors,
    mask_source_markers,
)
from .source_coverage import (
    count_anchors_by_type,
    generate_source_summary,
    get_anchors_for_section,
    validate_clinical_sources,
)
