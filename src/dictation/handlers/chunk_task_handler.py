"""Handler for transcribing uploaded audio chunks."""

from dictation.domain import ChunkTask
from dictation.exceptions import MissingAudioError, SessionNotFoundError
from dictation.infrastructure.interfaces import AdapterProvider, StorageClient
from dictation.logging import setup_logging
from dictation.repositories import SessionRepository

from .base import TaskHandler

logger = setup_logging()


class ChunkTaskHandler(TaskHandler):
    """Transcribes one chunk and appends one partial transcript to its session."""

    message_model = ChunkTask

    def __init__(
        self,
        repository: SessionRepository,
        storage: StorageClient,
        adapters: AdapterProvider,
        language: str,
    ):
        self._repository = repository
        self._storage = storage
        self._adapters = adapters
        self._language = language

    def process(self, message: ChunkTask) -> None:
        """
        Processes one audio chunk.

        Args:
            message: The chunk task.

        Raises:
            MissingAudioError: If the chunk's audio is not in storage.
            StorageDownloadError: If the audio download fails.
            TranscriptionError: If the speech-to-text call fails.
        """
        chunk = self._repository.get_chunk(message.chunk_id)
        if chunk is None:
            # session deleted while the task was queued
            logger.warning("Chunk no longer exists", extra={"chunk_id": message.chunk_id})
            return

        try:
            session_entity = self._repository.get_session(chunk.session_id)
        except SessionNotFoundError:
            logger.warning(
                "Session no longer exists",
                extra={"chunk_id": chunk.id, "session_id": str(chunk.session_id)},
            )
            return

        if not self._storage.exists(chunk.filename):
            raise MissingAudioError(chunk.id, chunk.filename)

        logger.info(
            "Processing audio chunk",
            extra={
                "chunk_id": chunk.id,
                "session_id": str(chunk.session_id),
                "attempt": message.attempt,
            },
        )

        audio_data = self._storage.download(chunk.filename)

        transcriber = self._adapters.transcription_service(session_entity.owner_id)
        result = transcriber.transcribe(audio_data, self._language)

        self._repository.add_partial_transcript(chunk, result)

        logger.info(
            "Audio chunk processed successfully",
            extra={
                "chunk_id": chunk.id,
                "session_id": str(chunk.session_id),
                "word_count": len(result.words),
            },
        )

    def on_failure(self, message: ChunkTask, error: Exception) -> None:
        logger.error(
            "Chunk transcription failed permanently",
            extra={"chunk_id": message.chunk_id, "error": str(error)},
        )
