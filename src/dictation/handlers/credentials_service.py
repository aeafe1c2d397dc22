"""Per-owner API key management."""

from dictation.exceptions import InputValidationError
from dictation.infrastructure.interfaces import AdapterProvider
from dictation.logging import setup_logging
from dictation.repositories import CredentialsRepository
from dictation.response_models import ApiKeysStatus

logger = setup_logging()


class CredentialsService:
    """Validates and stores the API keys an owner brings for the external services."""

    def __init__(self, repository: CredentialsRepository, adapters: AdapterProvider):
        self._repository = repository
        self._adapters = adapters

    def get_status(self, owner_id: str) -> ApiKeysStatus:
        return self._status(owner_id)

    def update_api_keys(
        self,
        owner_id: str,
        assemblyai_api_key: str | None = None,
        gemini_api_key: str | None = None,
    ) -> ApiKeysStatus:
        """
        Stores the given keys after checking each one against its service.

        Omitted or blank keys keep the currently stored value. Nothing is
        stored unless every given key is accepted.

        Raises:
            InputValidationError: If no key is given or a service rejects its key.
        """
        assemblyai_api_key = (assemblyai_api_key or "").strip() or None
        gemini_api_key = (gemini_api_key or "").strip() or None

        if not assemblyai_api_key and not gemini_api_key:
            raise InputValidationError("At least one API key must be provided")

        if assemblyai_api_key and not self._adapters.validate_transcription_key(
            assemblyai_api_key
        ):
            raise InputValidationError("AssemblyAI rejected the API key")
        if gemini_api_key and not self._adapters.validate_polishing_key(gemini_api_key):
            raise InputValidationError("Gemini rejected the API key")

        self._repository.upsert(owner_id, assemblyai_api_key, gemini_api_key)
        return self._status(owner_id)

    def _status(self, owner_id: str) -> ApiKeysStatus:
        credential = self._repository.get(owner_id)
        return ApiKeysStatus(
            assemblyai_configured=bool(credential and credential.assemblyai_api_key),
            gemini_configured=bool(credential and credential.gemini_api_key),
        )
