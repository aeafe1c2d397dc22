"""Repository layer exports."""

from .credentials_repository import CredentialsRepository
from .session_repository import SessionRepository

__all__ = ["CredentialsRepository", "SessionRepository"]
