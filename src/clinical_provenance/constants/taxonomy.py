# ============================================================================
# src/clinical_provenance/constants/taxonomy.py
# ============================================================================
"""
Concept Taxonomy
- Diagnoses (ICD-10), procedures (MBS items), medication classes,
  echo/angio findings, cardiovascular risk factors

Loads the versioned knowledge/concept_taxonomy.json into immutable rule
tables. The taxonomy is built once per file and passed into the
extractors; nothing mutates it at runtime.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple

from ..config.base_config import base_settings
from ..core.context.enums import ConceptCategory
from ..utils.exceptions import TaxonomyLoadError
from ..utils.logging import log_performance

logger = logging.getLogger(__name__)


def build_alternation(triggers) -> str:
    """
    Join trigger regexes into one word-bounded alternation.

    Longer triggers are tried first so "coronary angiogram" wins over
    "angiogram" at the same position.
    """
    ordered = sorted(triggers, key=len, reverse=True)
    return r"\b(?:" + "|".join(ordered) + r")\b"


@dataclass(frozen=True)
class ConceptRule:
    category: ConceptCategory
    normalized_term: str
    triggers: Tuple[str, ...]
    code: Optional[str] = None
    code_system: Optional[str] = None
    group: Optional[str] = None
    confidence: float = 0.9
    risk_weight: int = 0

    @cached_property
    def pattern(self) -> Pattern:
        return re.compile(build_alternation(self.triggers), re.IGNORECASE)


@dataclass(frozen=True)
class ConceptTaxonomy:
    version: str
    rules: Tuple[ConceptRule, ...]
    description: str = ""
    _by_category: Mapping[ConceptCategory, Tuple[ConceptRule, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        grouped = {
            category: tuple(r for r in self.rules if r.category == category)
            for category in ConceptCategory
        }
        object.__setattr__(self, "_by_category", grouped)

    def rules_for(self, category: ConceptCategory) -> Tuple[ConceptRule, ...]:
        return self._by_category[category]

    def find_rule(self, category: ConceptCategory, normalized_term: str) -> Optional[ConceptRule]:
        for rule in self.rules_for(category):
            if rule.normalized_term == normalized_term:
                return rule
        return None

    def risk_weight(self, category: ConceptCategory, normalized_term: str) -> int:
        """Weight of a term in the risk profile; 0 for unknown terms."""
        rule = self.find_rule(category, normalized_term)
        return rule.risk_weight if rule else 0

    @cached_property
    def medication_names(self) -> Tuple[str, ...]:
        """Drug names recognized in front of a dose (e.g. "aspirin 100 mg")."""
        names = []
        for rule in self.rules_for(ConceptCategory.MEDICATION):
            names.extend(rule.triggers)
        return tuple(names)

    def __len__(self) -> int:
        return len(self.rules)


def parse_taxonomy(data: Dict[str, Any]) -> ConceptTaxonomy:
    """
    Build a taxonomy from its JSON structure.

    Raises:
        TaxonomyLoadError: missing keys, unknown category or invalid trigger regex
    """
    try:
        version = str(data["version"])
        categories = data["categories"]
    except (KeyError, TypeError) as e:
        raise TaxonomyLoadError(f"Taxonomy missing required key: {e}")

    rules = []
    for category_key, table in categories.items():
        try:
            category = ConceptCategory(category_key)
        except ValueError:
            raise TaxonomyLoadError(f"Unknown taxonomy category '{category_key}'")

        code_system = table.get("code_system")
        default_confidence = float(table.get("confidence", 0.9))

        for entry in table.get("rules", []):
            try:
                rule = ConceptRule(
                    category=category,
                    normalized_term=entry["normalized_term"],
                    triggers=tuple(entry["triggers"]),
                    code=entry.get("code"),
                    code_system=code_system if entry.get("code") else None,
                    group=entry.get("group"),
                    confidence=float(entry.get("confidence", default_confidence)),
                    risk_weight=int(entry.get("risk_weight", 0)),
                )
            except KeyError as e:
                raise TaxonomyLoadError(f"Taxonomy rule in '{category_key}' missing {e}")

            if not rule.triggers:
                raise TaxonomyLoadError(f"Rule '{rule.normalized_term}' has no triggers")
            try:
                rule.pattern
            except re.error as e:
                raise TaxonomyLoadError(f"Invalid trigger for '{rule.normalized_term}': {e}")

            rules.append(rule)

    return ConceptTaxonomy(
        version=version,
        rules=tuple(rules),
        description=data.get("description", ""),
    )


@lru_cache(maxsize=8)
@log_performance(logger, "Taxonomy load")
def load_taxonomy(path: Optional[Path] = None) -> ConceptTaxonomy:
    """
    Load and memoize a taxonomy file.

    Args:
        path: JSON file; defaults to the configured knowledge taxonomy

    Raises:
        TaxonomyLoadError: file missing or not valid JSON
    """
    path = Path(path) if path else base_settings.get_taxonomy_path()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise TaxonomyLoadError(f"Taxonomy file not found: {path}", path=str(path))
    except json.JSONDecodeError as e:
        raise TaxonomyLoadError(f"Taxonomy file is not valid JSON: {e}", path=str(path))

    taxonomy = parse_taxonomy(data)
    logger.info(f"Loaded concept taxonomy v{taxonomy.version} ({len(taxonomy)} rules) from {path.name}")
    return taxonomy


def get_default_taxonomy() -> ConceptTaxonomy:
    """Packaged taxonomy, loaded on first use."""
    return load_taxonomy(base_settings.get_taxonomy_path())
