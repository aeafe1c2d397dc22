"""Repository for per-owner API credentials."""

from dictation.db_models import ApiCredential, utc_now
from dictation.logging import setup_logging

logger = setup_logging()


class CredentialsRepository:
    """Stores the API keys each owner configured for the external services."""

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def get(self, owner_id: str) -> ApiCredential | None:
        with self._session_factory() as db_session:
            return db_session.get(ApiCredential, owner_id)

    def upsert(
        self,
        owner_id: str,
        assemblyai_api_key: str | None = None,
        gemini_api_key: str | None = None,
    ) -> ApiCredential:
        """
        Stores the given keys for the owner.

        A key that is None or empty leaves the stored key unchanged.
        """
        with self._session_factory() as db_session:
            credential = db_session.get(ApiCredential, owner_id)
            if credential is None:
                credential = ApiCredential(owner_id=owner_id)

            if assemblyai_api_key:
                credential.assemblyai_api_key = assemblyai_api_key
            if gemini_api_key:
                credential.gemini_api_key = gemini_api_key
            credential.updated_at = utc_now()

            db_session.add(credential)
            db_session.commit()
            db_session.refresh(credential)

        logger.info(
            "API credentials updated",
            extra={
                "owner_id": owner_id,
                "assemblyai_updated": bool(assemblyai_api_key),
                "gemini_updated": bool(gemini_api_key),
            },
        )
        return credential
