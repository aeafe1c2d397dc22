"""Domain models for the dictation pipeline."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

DEFAULT_WORD_CONFIDENCE = 0.9


class SessionStatus(str, Enum):
    RECORDING = "recording"
    PROCESSING = "processing"
    READY = "ready"


class TranscriptKind(str, Enum):
    PARTIAL = "partial"
    FINAL = "final"


class Word(BaseModel):
    """A single recognized word with timing and confidence."""

    text: str
    start: float = 0.0
    end: float = 0.0
    confidence: float = DEFAULT_WORD_CONFIDENCE
    alternatives: list[str] = Field(default_factory=list)
    user_edited: bool = False


class Segment(BaseModel):
    """A time-stamped span of polished text."""

    start: float = 0.0
    end: float = 0.0
    text: str


class UncertainWord(BaseModel):
    """A word the polishing step could not settle, surfaced for manual review."""

    word: str
    position: int | None = None
    confidence: float | None = None
    alternatives: list[str] = Field(default_factory=list)


class TranscriptionResult(BaseModel, frozen=True):
    """Result of transcribing one audio chunk."""

    text: str
    language: str
    duration: float = 0.0
    words: list[Word] = Field(default_factory=list)


class PolishMetadata(BaseModel, frozen=True):
    """Word-level context sent alongside the merged text for polishing."""

    words: list[Word] = Field(default_factory=list)
    partial_count: int


class PolishResult(BaseModel, frozen=True):
    """Result of the LLM polishing pass."""

    text: str
    segments: list[Segment] = Field(default_factory=list)
    uncertain_words: list[UncertainWord] = Field(default_factory=list)

    @field_validator("segments", "uncertain_words", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value


class MergedTranscript(BaseModel, frozen=True):
    """All partial transcripts of a session stitched together in merge order."""

    text: str
    words: list[Word]
    partial_count: int


class ChunkTask(BaseModel, frozen=True):
    """Queue message asking for one chunk to be transcribed."""

    chunk_id: int
    attempt: int = 1


class FinalizeTask(BaseModel, frozen=True):
    """Queue message asking for one session to be finalized."""

    session_id: UUID
    attempt: int = 1
