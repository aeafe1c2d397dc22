"""Abstract interface for audio storage operations."""

from abc import ABC, abstractmethod


class StorageClient(ABC):
    """Abstract base class for durable keyed audio storage."""

    @abstractmethod
    def upload(self, object_name: str, data: bytes, content_type: str) -> None:
        """
        Stores bytes under the given locator.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def download(self, object_name: str) -> bytes:
        """
        Downloads the bytes stored under the given locator.

        Raises:
            StorageDownloadError: If the download fails.
        """

    @abstractmethod
    def exists(self, object_name: str) -> bool:
        """Returns whether an object is stored under the given locator."""

    @abstractmethod
    def delete(self, object_name: str) -> None:
        """
        Removes the object stored under the given locator.

        Raises:
            StorageDeleteError: If the removal fails.
        """

    @abstractmethod
    def ensure_bucket_exists(self) -> None:
        """Ensures the backing bucket exists, creating it if necessary."""
