"""Abstract interface for LLM polishing operations."""

from abc import ABC, abstractmethod

from dictation.domain.models import PolishMetadata, PolishResult


class PolishingService(ABC):
    """Abstract base class for LLM polishing backends."""

    @abstractmethod
    def polish(self, text: str, metadata: PolishMetadata) -> PolishResult:
        """
        Polishes a merged raw transcript.

        Args:
            text: The merged raw transcript text.
            metadata: Merged word list and the number of partials merged.

        Returns:
            PolishResult with polished text, segments and uncertain words.

        Raises:
            PolishingError: If the remote call does not succeed.
        """
        pass

    @abstractmethod
    def validate_api_key(self) -> bool:
        """Returns whether the backend accepts the configured API key."""
