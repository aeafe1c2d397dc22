"""Synchronous operations behind the dictation API."""

import os
import uuid
from uuid import UUID

from dictation.config import PipelineConfig
from dictation.db_models import DictationSession, Transcript
from dictation.domain import accept_alternative, low_confidence_words
from dictation.exceptions import (
    FinalizeInProgressError,
    InputValidationError,
    InvalidWordIndexError,
    StorageDeleteError,
)
from dictation.infrastructure.interfaces import StorageClient, TaskDispatcher
from dictation.logging import setup_logging
from dictation.repositories import SessionRepository
from dictation.response_models import (
    SessionSummary,
    SessionTranscriptResponse,
    TranscriptResponse,
)

logger = setup_logging()

PREVIEW_LENGTH = 100


class DictationService:
    """
    Session lifecycle, chunk intake and transcript review.

    Nothing here waits on the external speech or LLM services; slow work is
    handed to the pipeline stages through the task dispatcher.
    """

    def __init__(
        self,
        repository: SessionRepository,
        storage: StorageClient,
        dispatcher: TaskDispatcher,
        config: PipelineConfig,
    ):
        self._repository = repository
        self._storage = storage
        self._dispatcher = dispatcher
        self._config = config

    def create_session(self, owner_id: str, title: str | None = None) -> UUID:
        return self._repository.create_session(owner_id, title).id

    def list_sessions(self, owner_id: str) -> list[SessionSummary]:
        return [self._summary(s) for s in self._repository.list_sessions(owner_id)]

    def get_session(self, session_id: UUID) -> SessionSummary:
        return self._summary(self._repository.get_session(session_id))

    def upload_chunk(
        self,
        session_id: UUID,
        audio_data: bytes,
        filename: str,
        start_time: float,
        end_time: float,
        content_type: str | None = None,
    ) -> int:
        """
        Stores one audio chunk and schedules its transcription.

        The audio is durably stored before the chunk row exists, and the row
        exists before the task is dispatched, so a worker never sees a chunk
        without its audio.

        Args:
            session_id: The session the chunk belongs to.
            audio_data: Raw audio file bytes.
            filename: Client-side file name, used for its extension.
            start_time: Chunk start offset within the session, in seconds.
            end_time: Chunk end offset within the session, in seconds.
            content_type: MIME type reported by the client.

        Returns:
            The new chunk id.

        Raises:
            InputValidationError: If the chunk is rejected.
            SessionNotFoundError: If the session does not exist.
            StorageUploadError: If storing the audio fails.
            EventPublishError: If dispatching the task fails.
        """
        extension = self._validate_chunk(audio_data, filename, start_time, end_time)
        self._repository.get_session(session_id)

        object_name = f"{self._config.chunk_prefix}/{session_id}/{uuid.uuid4()}.{extension}"
        self._storage.upload(
            object_name, audio_data, content_type or f"audio/{extension}"
        )

        chunk = self._repository.add_chunk(session_id, object_name, start_time, end_time)
        self._dispatcher.dispatch_chunk(chunk.id)

        logger.info(
            "Chunk accepted",
            extra={
                "session_id": str(session_id),
                "chunk_id": chunk.id,
                "object_name": object_name,
                "size": len(audio_data),
            },
        )
        return chunk.id

    def get_transcript(self, session_id: UUID) -> SessionTranscriptResponse:
        session_entity = self._repository.get_session(session_id)
        partials = self._repository.list_partials(session_id, newest_first=True)
        final = self._repository.latest_final(session_id)

        return SessionTranscriptResponse(
            session_id=session_entity.id,
            status=session_entity.status,
            partials=[self._transcript_view(p) for p in partials],
            final=self._transcript_view(final) if final else None,
        )

    def request_finalize(self, session_id: UUID) -> None:
        """
        Moves the session to `processing` and schedules its finalization.

        Raises:
            SessionNotFoundError: If the session does not exist.
            FinalizeInProgressError: If the session is already processing.
            EventPublishError: If dispatching the task fails.
        """
        self._repository.get_session(session_id)

        if not self._repository.try_begin_finalize(session_id):
            raise FinalizeInProgressError(session_id)

        self._dispatcher.dispatch_finalize(session_id)
        logger.info("Finalization requested", extra={"session_id": str(session_id)})

    def accept_word_alternative(
        self,
        session_id: UUID,
        transcript_id: int,
        word_index: int,
        accepted_text: str,
    ) -> TranscriptResponse:
        """
        Replaces one word with the reading the user accepted.

        The transcript text is rebuilt by joining all words with single
        spaces; on a final transcript this replaces the polished text.

        Raises:
            InputValidationError: If the accepted text is blank.
            InvalidWordIndexError: If the index does not address a word.
            TranscriptNotFoundError: If the transcript is not in the session.
        """
        accepted_text = accepted_text.strip()
        if not accepted_text:
            raise InputValidationError("Accepted text must not be empty")

        transcript = self._repository.get_transcript(session_id, transcript_id)
        words = transcript.word_list()

        try:
            updated_words, text = accept_alternative(words, word_index, accepted_text)
        except IndexError as e:
            raise InvalidWordIndexError(transcript_id, word_index, len(words)) from e

        updated = self._repository.update_transcript_words(transcript_id, updated_words, text)

        logger.info(
            "Word alternative accepted",
            extra={
                "session_id": str(session_id),
                "transcript_id": transcript_id,
                "word_index": word_index,
            },
        )
        return self._transcript_view(updated)

    def delete_session(self, session_id: UUID) -> None:
        """
        Deletes the session, its transcripts, its chunks and their audio.

        Raises:
            SessionNotFoundError: If the session does not exist.
            StorageDeleteError: If removing any chunk's audio fails. The
                session rows are kept so the delete can be retried.
        """
        removed = self._repository.list_chunk_filenames(session_id)
        failed: list[StorageDeleteError] = []
        for object_name in removed:
            try:
                self._storage.delete(object_name)
            except StorageDeleteError as e:
                logger.exception(
                    "Failed to delete chunk audio",
                    extra={"session_id": str(session_id), "object_name": object_name},
                )
                failed.append(e)
        if failed:
            raise failed[0]

        # chunks uploaded while the audio was being removed
        for object_name in self._repository.delete_session(session_id):
            if object_name in removed:
                continue
            try:
                self._storage.delete(object_name)
            except StorageDeleteError:
                logger.exception(
                    "Failed to delete chunk audio after session removal",
                    extra={"session_id": str(session_id), "object_name": object_name},
                )

    def _validate_chunk(
        self, audio_data: bytes, filename: str, start_time: float, end_time: float
    ) -> str:
        extension = os.path.splitext(filename or "")[1].lstrip(".").lower()
        if extension not in self._config.allowed_extensions:
            raise InputValidationError(
                f"Unsupported audio format '{extension or filename}'. "
                f"Allowed: {', '.join(sorted(self._config.allowed_extensions))}"
            )
        if not audio_data:
            raise InputValidationError("Audio chunk is empty")
        if len(audio_data) > self._config.max_chunk_bytes:
            raise InputValidationError(
                f"Audio chunk exceeds {self._config.max_chunk_bytes} bytes"
            )
        if start_time < 0 or end_time < start_time:
            raise InputValidationError(
                "Chunk times must satisfy 0 <= start_time <= end_time"
            )
        return extension

    def _summary(self, session_entity: DictationSession) -> SessionSummary:
        final = self._repository.latest_final(session_entity.id)
        return SessionSummary(
            session_id=session_entity.id,
            title=session_entity.title,
            status=session_entity.status,
            created_at=session_entity.created_at,
            updated_at=session_entity.updated_at,
            preview=final.text[:PREVIEW_LENGTH] if final else None,
        )

    def _transcript_view(self, transcript: Transcript) -> TranscriptResponse:
        words = transcript.word_list()
        return TranscriptResponse(
            transcript_id=transcript.id,
            kind=transcript.kind,
            text=transcript.text,
            words=words,
            low_confidence_words=low_confidence_words(
                words, self._config.low_confidence_threshold
            ),
            created_at=transcript.created_at,
            language=transcript.language,
            duration=transcript.duration,
            chunk_id=transcript.chunk_id,
            chunk_start_time=transcript.chunk_start_time,
            chunk_end_time=transcript.chunk_end_time,
            segments=transcript.segment_list(),
            uncertain_words=transcript.uncertain_word_list(),
            partial_count=transcript.partial_count,
        )
