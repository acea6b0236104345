# ============================================================================
# src/clinical_provenance/config/base_config.py
# ============================================================================
"""
Base Configuration
- Knowledge directory holding the versioned concept taxonomy
- Taxonomy file name
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

class BaseSettingsConfig(BaseSettings):
    # Knowledge bases shipped with the package
    KNOWLEDGE_DIR: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent / "knowledge",
        description="Directory containing the concept taxonomy JSON"
    )

    TAXONOMY_FILE: str = Field(
        default="concept_taxonomy.json",
        description="Concept taxonomy file name inside KNOWLEDGE_DIR"
    )

    def get_taxonomy_path(self) -> Path:
        """Full path of the active concept taxonomy"""
        return self.KNOWLEDGE_DIR / self.TAXONOMY_FILE

# Global instance
base_settings = BaseSettingsConfig()
