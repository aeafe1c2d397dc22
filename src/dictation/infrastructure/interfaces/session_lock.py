"""Abstract interface for per-session mutual exclusion."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from uuid import UUID


class SessionLock(ABC):
    """Advisory lock guarding one finalize run per session."""

    @abstractmethod
    def hold(self, session_id: UUID) -> AbstractContextManager[None]:
        """
        Returns a context manager holding the session's lock while entered.

        Raises:
            FinalizeInProgressError: On enter, if another run holds the lock.
        """
