"""Redis implementation of the SessionLock interface."""

from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

import redis

from dictation.exceptions import FinalizeInProgressError
from dictation.logging import setup_logging

from .interfaces import SessionLock

logger = setup_logging()


class RedisSessionLock(SessionLock):
    """Per-session finalize lock backed by a Redis lock with expiry."""

    def __init__(self, client: redis.Redis, timeout_seconds: int):
        self._client = client
        self._timeout_seconds = timeout_seconds

    @contextmanager
    def hold(self, session_id: UUID) -> Iterator[None]:
        key = f"finalize:{session_id}"
        lock = self._client.lock(key, timeout=self._timeout_seconds)

        if not lock.acquire(blocking=False):
            logger.warning("Finalize lock busy", extra={"session_id": str(session_id)})
            raise FinalizeInProgressError(session_id)

        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # expired while running; another run may own it now
                logger.warning(
                    "Finalize lock expired before release",
                    extra={"session_id": str(session_id)},
                )
