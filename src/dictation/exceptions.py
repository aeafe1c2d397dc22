"""Custom exceptions for the dictation pipeline."""

from uuid import UUID


class AdapterError(Exception):
    """Raised when a remote transcription or polishing call does not succeed."""

    def __init__(self, service: str, message: str, cause: Exception | None = None):
        self.service = service
        self.cause = cause
        super().__init__(f"{service} request failed: {message}")


class TranscriptionError(AdapterError):
    """Raised when the speech-to-text service fails to transcribe a chunk."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__("Transcription", message, cause)


class PolishingError(AdapterError):
    """Raised when the LLM polishing call fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__("Polishing", message, cause)


class MissingAudioError(Exception):
    """Raised when a chunk's backing audio is not in storage at processing time."""

    def __init__(self, chunk_id: int, locator: str):
        self.chunk_id = chunk_id
        self.locator = locator
        super().__init__(f"Audio for chunk {chunk_id} not found at '{locator}'")


class InputValidationError(Exception):
    """Raised when caller input is rejected at the boundary."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidWordIndexError(InputValidationError):
    """Raised when a word index does not address a word of the transcript."""

    def __init__(self, transcript_id: int, word_index: int, word_count: int):
        self.transcript_id = transcript_id
        self.word_index = word_index
        super().__init__(
            f"Word index {word_index} out of range for transcript "
            f"{transcript_id} with {word_count} words"
        )


class SessionNotFoundError(Exception):
    """Raised when a requested session does not exist."""

    def __init__(self, session_id: UUID):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class TranscriptNotFoundError(Exception):
    """Raised when a requested transcript does not exist in the session."""

    def __init__(self, transcript_id: int):
        self.transcript_id = transcript_id
        super().__init__(f"Transcript {transcript_id} not found")


class FinalizeInProgressError(Exception):
    """Raised when a finalize run for the session is already in flight."""

    def __init__(self, session_id: UUID):
        self.session_id = session_id
        super().__init__(f"Finalization already in progress for session {session_id}")


class StorageDownloadError(Exception):
    """Raised when downloading a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to download '{object_name}' from storage")


class StorageUploadError(Exception):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to upload '{object_name}' to storage")


class StorageDeleteError(Exception):
    """Raised when removing a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to delete '{object_name}' from storage")


class EventPublishError(Exception):
    """Raised when publishing a task to the message broker fails."""

    def __init__(self, routing_key: str, cause: Exception | None = None):
        self.routing_key = routing_key
        self.cause = cause
        super().__init__(f"Failed to publish event with routing key '{routing_key}'")
