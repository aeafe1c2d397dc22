"""
Dictation pipeline entry points.

One console script per process: the HTTP API, the chunk transcription
worker and the transcript finalization worker.
"""

import os

import uvicorn
from ddtrace import patch_all

from dictation.dependencies import get_chunk_worker, get_finalize_worker

patch_all()


def run_api():
    """Serves the HTTP API."""
    uvicorn.run(
        "dictation.api:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        log_config=None,
    )


def run_chunk_worker():
    """Starts the chunk transcription worker."""
    get_chunk_worker().start()


def run_finalize_worker():
    """Starts the transcript finalization worker."""
    get_finalize_worker().start()
