"""Abstract interfaces for resolving API credentials and per-owner adapters."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from .polishing_service import PolishingService
from .transcription_service import TranscriptionService


class ApiKeys(BaseModel, frozen=True):
    """API keys for the two external services."""

    assemblyai_api_key: str
    gemini_api_key: str


class CredentialsProvider(ABC):
    """Yields the API keys to use on behalf of a session owner."""

    @abstractmethod
    def for_owner(self, owner_id: str) -> ApiKeys:
        """Returns the owner's keys, falling back to process-wide keys."""


class AdapterProvider(ABC):
    """Builds the external service adapters for a session owner."""

    @abstractmethod
    def transcription_service(self, owner_id: str) -> TranscriptionService:
        """Returns the speech-to-text adapter for the owner."""

    @abstractmethod
    def polishing_service(self, owner_id: str) -> PolishingService:
        """Returns the LLM polishing adapter for the owner."""

    @abstractmethod
    def validate_transcription_key(self, api_key: str) -> bool:
        """Returns whether the speech-to-text service accepts the key."""

    @abstractmethod
    def validate_polishing_key(self, api_key: str) -> bool:
        """Returns whether the LLM polishing service accepts the key."""
