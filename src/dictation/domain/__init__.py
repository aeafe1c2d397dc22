"""Domain layer exports."""

from dictation.domain.models import (
    DEFAULT_WORD_CONFIDENCE,
    ChunkTask,
    FinalizeTask,
    MergedTranscript,
    PolishMetadata,
    PolishResult,
    Segment,
    SessionStatus,
    TranscriptionResult,
    TranscriptKind,
    UncertainWord,
    Word,
)
from dictation.domain.transcript_merger import TranscriptMerger
from dictation.domain.word_editor import accept_alternative, low_confidence_words

__all__ = [
    "DEFAULT_WORD_CONFIDENCE",
    "ChunkTask",
    "FinalizeTask",
    "MergedTranscript",
    "PolishMetadata",
    "PolishResult",
    "Segment",
    "SessionStatus",
    "TranscriptionResult",
    "TranscriptKind",
    "UncertainWord",
    "Word",
    "TranscriptMerger",
    "accept_alternative",
    "low_confidence_words",
]
