"""Credential resolution and per-owner adapter construction."""

import threading

import assemblyai as aai
from google import genai

from dictation.config import GeminiConfig
from dictation.logging import setup_logging
from dictation.repositories import CredentialsRepository

from .assemblyai_transcriber import AssemblyAITranscriber
from .gemini_polisher import GeminiPolisher
from .interfaces import (
    AdapterProvider,
    ApiKeys,
    CredentialsProvider,
    PolishingService,
    TranscriptionService,
)

logger = setup_logging()


class DatabaseCredentialsProvider(CredentialsProvider):
    """
    Reads per-owner API keys from the api_credentials table.

    Any key an owner has not configured falls back to the process-wide key.
    """

    def __init__(self, repository: CredentialsRepository, fallback: ApiKeys):
        """
        Args:
            repository: Store of per-owner keys.
            fallback: Process-wide keys from configuration.
        """
        self._repository = repository
        self._fallback = fallback

    def for_owner(self, owner_id: str) -> ApiKeys:
        credential = self._repository.get(owner_id)

        if credential is None:
            return self._fallback

        return ApiKeys(
            assemblyai_api_key=credential.assemblyai_api_key
            or self._fallback.assemblyai_api_key,
            gemini_api_key=credential.gemini_api_key or self._fallback.gemini_api_key,
        )


class SdkAdapterProvider(AdapterProvider):
    """Builds AssemblyAI and Gemini adapters, one SDK client per API key."""

    def __init__(
        self,
        credentials: CredentialsProvider,
        gemini_config: GeminiConfig,
        system_prompt: str,
    ):
        self._credentials = credentials
        self._gemini_config = gemini_config
        self._system_prompt = system_prompt
        self._transcribers: dict[str, AssemblyAITranscriber] = {}
        self._polishers: dict[str, GeminiPolisher] = {}
        self._lock = threading.Lock()

    def transcription_service(self, owner_id: str) -> TranscriptionService:
        api_key = self._credentials.for_owner(owner_id).assemblyai_api_key
        with self._lock:
            if api_key not in self._transcribers:
                self._transcribers[api_key] = self._build_transcriber(api_key)
                logger.info("AssemblyAI client created", extra={"owner_id": owner_id})
            return self._transcribers[api_key]

    def polishing_service(self, owner_id: str) -> PolishingService:
        api_key = self._credentials.for_owner(owner_id).gemini_api_key
        with self._lock:
            if api_key not in self._polishers:
                self._polishers[api_key] = self._build_polisher(api_key)
                logger.info("Gemini client created", extra={"owner_id": owner_id})
            return self._polishers[api_key]

    def validate_transcription_key(self, api_key: str) -> bool:
        return self._build_transcriber(api_key).validate_api_key()

    def validate_polishing_key(self, api_key: str) -> bool:
        return self._build_polisher(api_key).validate_api_key()

    def _build_transcriber(self, api_key: str) -> AssemblyAITranscriber:
        client = aai.Client(aai.Settings(api_key=api_key))
        return AssemblyAITranscriber(aai.Transcriber(client=client))

    def _build_polisher(self, api_key: str) -> GeminiPolisher:
        return GeminiPolisher(
            genai.Client(api_key=api_key),
            self._gemini_config.model_name,
            self._system_prompt,
            self._gemini_config.max_output_tokens,
        )
