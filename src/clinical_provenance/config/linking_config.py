# ============================================================================
# src/clinical_provenance/config/linking_config.py
# ============================================================================
"""
Source Anchor Linking Settings
- Proximity window for value -> anchor links
- Excerpt similarity needed to accept a cited anchor
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class LinkingSettings(BaseSettings):
    ANCHOR_PROXIMITY_WINDOW: int = Field(
        default=200,
        ge=0,
        description="Maximum character distance between a value and an anchor for the anchor to be attached. Larger windows link more values but risk wrong provenance."
    )
    ANCHOR_SIMILARITY_THRESHOLD: float = Field(
        default=0.7,
        ge=0.0, le=1.0,
        description="Word-level similarity above which a cited excerpt counts as found in its source"
    )

linking_settings = LinkingSettings()
