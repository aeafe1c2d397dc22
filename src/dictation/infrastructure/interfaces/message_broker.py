"""Abstract interfaces for task dispatch and consumption."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any
from uuid import UUID


class TaskDispatcher(ABC):
    """Schedules pipeline work outside the request path."""

    @abstractmethod
    def dispatch_chunk(self, chunk_id: int) -> None:
        """
        Schedules transcription of one uploaded chunk.

        Raises:
            EventPublishError: If publishing fails.
        """

    @abstractmethod
    def dispatch_finalize(self, session_id: UUID) -> None:
        """
        Schedules finalization of one session.

        Raises:
            EventPublishError: If publishing fails.
        """


class MessageBroker(ABC):
    """Consumer-side broker operations for a single stage queue."""

    @abstractmethod
    def publish_retry(self, payload: dict, delay_seconds: int) -> None:
        """
        Re-queues a task payload after the given delay.

        Args:
            payload: The task message, already carrying its next attempt number.
            delay_seconds: How long the task waits before redelivery.

        Raises:
            EventPublishError: If publishing fails.
        """

    @abstractmethod
    def acknowledge(self, delivery_tag: int) -> None:
        """
        Acknowledges processing of a message.

        Args:
            delivery_tag: The message delivery tag.
        """

    @abstractmethod
    def reject(self, delivery_tag: int, requeue: bool = False) -> None:
        """
        Rejects a message. Without requeue the message is dead-lettered.

        Args:
            delivery_tag: The message delivery tag.
            requeue: Whether the broker should redeliver the message.
        """

    @abstractmethod
    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Starts consuming messages from the configured queue.

        Args:
            callback: Function called for each message with (body, delivery_tag, headers).
        """

    @abstractmethod
    def setup(self) -> None:
        """Sets up the required infrastructure (exchanges, queues, bindings)."""
