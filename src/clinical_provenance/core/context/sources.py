# ============================================================================
# src/clinical_provenance/core/context/sources.py
# ============================================================================
"""
Letter source material
- Transcript (with speaker segments), referral documents, clinician notes
- Used to verify cited excerpts and to check letter details
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SpeakerSegment(BaseModel):
    speaker: Optional[str] = None
    text: str


class TranscriptSource(BaseModel):
    id: str
    text: str
    speakers: List[SpeakerSegment] = Field(default_factory=list)

    def searchable_texts(self) -> List[str]:
        return [self.text] + [segment.text for segment in self.speakers]


class DocumentSource(BaseModel):
    id: str
    name: str = ""
    extracted_data: Dict[str, Any] = Field(default_factory=dict)
    raw_text: Optional[str] = None

    def searchable_texts(self) -> List[str]:
        texts = [json.dumps(self.extracted_data, default=str)]
        if self.raw_text:
            texts.append(self.raw_text)
        return texts


class UserInputSource(BaseModel):
    id: str
    text: str

    def searchable_texts(self) -> List[str]:
        return [self.text]


class LetterSources(BaseModel):
    transcript: Optional[TranscriptSource] = None
    documents: List[DocumentSource] = Field(default_factory=list)
    user_input: Optional[UserInputSource] = None

    def searchable_texts(self) -> List[str]:
        """Every text a letter statement could legitimately come from."""
        texts: List[str] = []
        if self.transcript:
            texts.extend(self.transcript.searchable_texts())
        for document in self.documents:
            texts.extend(document.searchable_texts())
        if self.user_input:
            texts.extend(self.user_input.searchable_texts())
        return texts
