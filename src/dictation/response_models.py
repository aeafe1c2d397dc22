"""Request and response models for the dictation API."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from dictation.domain import Segment, SessionStatus, TranscriptKind, UncertainWord, Word


class CreateSessionRequest(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)


class CreateSessionResponse(BaseModel):
    session_id: UUID


class SessionSummary(BaseModel):
    """Session data with a short preview of its latest final transcript."""

    session_id: UUID
    title: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    preview: Optional[str] = None


class UploadChunkResponse(BaseModel):
    """Response returned after a chunk is accepted for transcription."""

    message: str
    chunk_id: int


class FinalizeResponse(BaseModel):
    message: str
    session_id: UUID


class AcceptWordRequest(BaseModel):
    transcript_id: int
    word_index: int
    accepted_text: str = Field(..., min_length=1)


class TranscriptResponse(BaseModel):
    """One partial or final transcript with its review hints."""

    transcript_id: int
    kind: TranscriptKind
    text: str
    words: List[Word]
    low_confidence_words: List[Word]
    created_at: datetime
    language: Optional[str] = None
    duration: Optional[float] = None
    chunk_id: Optional[int] = None
    chunk_start_time: Optional[float] = None
    chunk_end_time: Optional[float] = None
    segments: List[Segment] = Field(default_factory=list)
    uncertain_words: List[UncertainWord] = Field(default_factory=list)
    partial_count: Optional[int] = None


class SessionTranscriptResponse(BaseModel):
    """Everything a client needs to render a session's transcripts."""

    session_id: UUID
    status: SessionStatus
    partials: List[TranscriptResponse]
    final: Optional[TranscriptResponse] = None


class UpdateApiKeysRequest(BaseModel):
    assemblyai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None


class ApiKeysStatus(BaseModel):
    """Which of the owner's own API keys are stored. Keys are never echoed back."""

    assemblyai_configured: bool
    gemini_configured: bool
