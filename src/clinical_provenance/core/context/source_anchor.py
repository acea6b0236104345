# ============================================================================
# src/clinical_provenance/core/context/source_anchor.py
# ============================================================================
"""
Source anchor
- Span of original transcript/document/user text backing a letter statement
- Produced upstream, read-only here
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .enums import SourceType
from ...utils.exceptions import MalformedAnchorError

# (snake_case field, camelCase key)
_REQUIRED_FIELDS = (
    ("id", "id"),
    ("segment_text", "segmentText"),
    ("start_index", "startIndex"),
    ("end_index", "endIndex"),
    ("source_type", "sourceType"),
    ("source_id", "sourceId"),
)

@dataclass(frozen=True)
class SourceAnchor:
    id: str
    segment_text: str
    start_index: int
    end_index: int
    source_type: SourceType
    source_id: str
    source_excerpt: str = ""
    confidence: float = 1.0             # 0-1
    timestamp: Optional[float] = None    # Transcript sources
    page_number: Optional[int] = None    # Document sources

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SourceAnchor":
        """
        Build an anchor from a JSON-like mapping.

        Accepts camelCase (upstream JSON) or snake_case keys.

        Raises:
            MalformedAnchorError: required field missing or of the wrong type
        """
        if not isinstance(data, Mapping):
            raise MalformedAnchorError(f"Anchor must be a mapping, got {type(data).__name__}")

        fields: Dict[str, Any] = {}
        for snake, camel in _REQUIRED_FIELDS:
            if snake in data:
                fields[snake] = data[snake]
            elif camel in data:
                fields[snake] = data[camel]
            else:
                raise MalformedAnchorError(f"Anchor missing '{camel}'", field_name=camel)

        for text_field in ("id", "segment_text", "source_id"):
            if not isinstance(fields[text_field], str):
                raise MalformedAnchorError(
                    f"Anchor '{text_field}' must be a string", field_name=text_field
                )

        for index_field in ("start_index", "end_index"):
            value = fields[index_field]
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedAnchorError(
                    f"Anchor '{index_field}' must be an integer", field_name=index_field
                )

        try:
            fields["source_type"] = SourceType.parse(fields["source_type"])
        except ValueError:
            raise MalformedAnchorError(
                f"Unknown anchor source type '{fields['source_type']}'", field_name="sourceType"
            )

        excerpt = data.get("source_excerpt", data.get("sourceExcerpt", ""))
        try:
            confidence = float(data.get("confidence", 1.0))
        except (TypeError, ValueError):
            raise MalformedAnchorError("Anchor 'confidence' must be numeric", field_name="confidence")
        page_number = data.get("page_number", data.get("pageNumber"))

        return cls(
            id=fields["id"],
            segment_text=fields["segment_text"],
            start_index=fields["start_index"],
            end_index=fields["end_index"],
            source_type=fields["source_type"],
            source_id=fields["source_id"],
            source_excerpt=str(excerpt or ""),
            confidence=confidence,
            timestamp=data.get("timestamp"),
            page_number=page_number,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "segmentText": self.segment_text,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "sourceType": self.source_type.value,
            "sourceId": self.source_id,
            "sourceExcerpt": self.source_excerpt,
            "confidence": self.confidence,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.page_number is not None:
            data["pageNumber"] = self.page_number
        return data
