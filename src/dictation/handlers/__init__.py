"""Handlers for the API and the pipeline stages."""

from .base import TaskHandler
from .chunk_task_handler import ChunkTaskHandler
from .credentials_service import CredentialsService
from .dictation_service import DictationService
from .finalize_task_handler import FinalizeTaskHandler

__all__ = [
    "TaskHandler",
    "ChunkTaskHandler",
    "CredentialsService",
    "DictationService",
    "FinalizeTaskHandler",
]
