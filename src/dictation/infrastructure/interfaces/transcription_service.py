"""Abstract interface for speech-to-text operations."""

from abc import ABC, abstractmethod

from dictation.domain.models import TranscriptionResult


class TranscriptionService(ABC):
    """Abstract base class for speech-to-text backends."""

    @abstractmethod
    def transcribe(self, audio_data: bytes, language: str) -> TranscriptionResult:
        """
        Transcribes one audio chunk.

        Args:
            audio_data: Raw audio file bytes.
            language: Language hint, e.g. "es".

        Returns:
            TranscriptionResult with text, language, duration and words.

        Raises:
            TranscriptionError: If the remote call does not succeed.
        """
        pass

    @abstractmethod
    def validate_api_key(self) -> bool:
        """Returns whether the backend accepts the configured API key."""
