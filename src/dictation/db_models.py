from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Text
from sqlmodel import Field, Relationship, SQLModel

from dictation.domain.models import (
    Segment,
    SessionStatus,
    TranscriptKind,
    UncertainWord,
    Word,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DictationSession(SQLModel, table=True):
    __tablename__ = "dictation_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: str = Field(max_length=255, index=True)
    title: str = Field(default="Untitled Session", max_length=255)
    status: SessionStatus = Field(default=SessionStatus.RECORDING)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    chunks: List["AudioChunk"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    transcripts: List["Transcript"] = Relationship(
        back_populates="session",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class AudioChunk(SQLModel, table=True):
    __tablename__ = "audio_chunks"

    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: UUID = Field(
        foreign_key="dictation_sessions.id", index=True, ondelete="CASCADE"
    )
    filename: str = Field(max_length=512)
    start_time: float
    end_time: float
    uploaded_at: datetime = Field(default_factory=utc_now)

    session: DictationSession = Relationship(back_populates="chunks")


class Transcript(SQLModel, table=True):
    __tablename__ = "transcripts"

    # Autoincrement id doubles as the creation-order tie-break.
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: UUID = Field(
        foreign_key="dictation_sessions.id", index=True, ondelete="CASCADE"
    )
    kind: TranscriptKind = Field(index=True)
    text: str = Field(sa_column=Column(Text, nullable=False))
    words: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now)

    # partial only
    language: Optional[str] = None
    duration: Optional[float] = None
    chunk_id: Optional[int] = None
    chunk_start_time: Optional[float] = None
    chunk_end_time: Optional[float] = None

    # final only
    segments: List[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    uncertain_words: List[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    partial_count: Optional[int] = None

    session: DictationSession = Relationship(back_populates="transcripts")

    def word_list(self) -> list[Word]:
        return [Word.model_validate(w) for w in self.words or []]

    def segment_list(self) -> list[Segment]:
        return [Segment.model_validate(s) for s in self.segments or []]

    def uncertain_word_list(self) -> list[UncertainWord]:
        return [UncertainWord.model_validate(u) for u in self.uncertain_words or []]


class ApiCredential(SQLModel, table=True):
    """Per-owner API keys for the external speech and LLM services."""

    __tablename__ = "api_credentials"

    owner_id: str = Field(primary_key=True, max_length=255)
    assemblyai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    updated_at: datetime = Field(default_factory=utc_now)
