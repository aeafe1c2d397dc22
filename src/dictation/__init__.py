from dictation.exceptions import (
    AdapterError,
    EventPublishError,
    InputValidationError,
    MissingAudioError,
    PolishingError,
    StorageDeleteError,
    StorageDownloadError,
    StorageUploadError,
    TranscriptionError,
)
from dictation.logging import setup_logging

__all__ = [
    "setup_logging",
    "AdapterError",
    "TranscriptionError",
    "PolishingError",
    "MissingAudioError",
    "InputValidationError",
    "StorageDownloadError",
    "StorageUploadError",
    "StorageDeleteError",
    "EventPublishError",
]
