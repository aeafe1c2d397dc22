"""Infrastructure interface exports."""

from .credentials import AdapterProvider, ApiKeys, CredentialsProvider
from .message_broker import MessageBroker, TaskDispatcher
from .polishing_service import PolishingService
from .session_lock import SessionLock
from .storage import StorageClient
from .transcription_service import TranscriptionService

__all__ = [
    "AdapterProvider",
    "ApiKeys",
    "CredentialsProvider",
    "MessageBroker",
    "TaskDispatcher",
    "PolishingService",
    "SessionLock",
    "StorageClient",
    "TranscriptionService",
]
