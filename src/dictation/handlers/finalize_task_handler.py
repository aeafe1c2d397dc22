"""Handler for merging and polishing a session's partial transcripts."""

from dictation.domain import FinalizeTask, PolishMetadata, SessionStatus, TranscriptMerger
from dictation.exceptions import FinalizeInProgressError, SessionNotFoundError
from dictation.infrastructure.interfaces import AdapterProvider, SessionLock
from dictation.logging import setup_logging
from dictation.repositories import SessionRepository

from .base import TaskHandler

logger = setup_logging()


class FinalizeTaskHandler(TaskHandler):
    """Produces the final, polished transcript of a session."""

    message_model = FinalizeTask

    def __init__(
        self,
        repository: SessionRepository,
        adapters: AdapterProvider,
        merger: TranscriptMerger,
        session_lock: SessionLock,
    ):
        self._repository = repository
        self._adapters = adapters
        self._merger = merger
        self._session_lock = session_lock

    def process(self, message: FinalizeTask) -> None:
        """
        Merges all partial transcripts, polishes them once and stores the result.

        Partials are only read, so a failed or repeated run can always be
        re-invoked; each successful run appends one more final transcript.

        Args:
            message: The finalize task.

        Raises:
            FinalizeInProgressError: If another run holds the session's lock.
            PolishingError: If the polishing call fails.
        """
        session_id = message.session_id

        with self._session_lock.hold(session_id):
            try:
                session_entity = self._repository.get_session(session_id)
            except SessionNotFoundError:
                logger.warning(
                    "Session no longer exists", extra={"session_id": str(session_id)}
                )
                return

            if session_entity.status != SessionStatus.PROCESSING:
                # retries after a reverted attempt signal in-flight again
                self._repository.set_status(session_id, SessionStatus.PROCESSING)

            try:
                self._finalize(session_entity.id, session_entity.owner_id, message.attempt)
            except Exception:
                logger.exception(
                    "Failed to finalize transcript",
                    extra={"session_id": str(session_id), "attempt": message.attempt},
                )
                self._repository.set_status(session_id, SessionStatus.RECORDING)
                raise

    def _finalize(self, session_id, owner_id: str, attempt: int) -> None:
        partials = self._repository.list_partials(session_id)

        if not partials:
            logger.warning(
                "No partial transcripts to finalize",
                extra={"session_id": str(session_id)},
            )
            self._repository.set_status(session_id, SessionStatus.READY)
            return

        merged = self._merger.merge(partials)

        polisher = self._adapters.polishing_service(owner_id)
        polished = polisher.polish(
            merged.text,
            PolishMetadata(words=merged.words, partial_count=merged.partial_count),
        )

        self._repository.add_final_transcript(session_id, polished, merged)
        self._repository.set_status(session_id, SessionStatus.READY)

        logger.info(
            "Transcript finalized successfully",
            extra={
                "session_id": str(session_id),
                "partial_count": merged.partial_count,
                "original_length": len(merged.text),
                "polished_length": len(polished.text),
                "attempt": attempt,
            },
        )

    def on_failure(self, message: FinalizeTask, error: Exception) -> None:
        if isinstance(error, FinalizeInProgressError):
            # the run holding the lock owns the session status
            logger.warning(
                "Finalization skipped, another run holds the session",
                extra={"session_id": str(message.session_id)},
            )
            return

        logger.error(
            "Finalization failed permanently",
            extra={"session_id": str(message.session_id), "error": str(error)},
        )
        self._repository.set_status(message.session_id, SessionStatus.RECORDING)
