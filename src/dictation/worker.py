"""Worker that handles queue message consumption and orchestration."""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from dictation.config import RetryPolicy
from dictation.exceptions import EventPublishError, MissingAudioError
from dictation.handlers import TaskHandler
from dictation.infrastructure.interfaces import MessageBroker
from dictation.logging import setup_logging

logger = setup_logging()


class Worker:
    """Consumes messages from one stage queue and applies the retry policy."""

    def __init__(
        self,
        broker: MessageBroker,
        handler: TaskHandler,
        retry_policy: RetryPolicy,
    ):
        self._broker = broker
        self._handler = handler
        self._retry_policy = retry_policy

    def start(self) -> None:
        """Starts consuming messages from the queue."""
        logger.info(
            "Worker initialized, starting message consumption",
            extra={"handler": type(self._handler).__name__},
        )
        self._broker.consume(self._on_message)

    def _on_message(
        self, body: bytes, delivery_tag: int, headers: dict[str, Any] | None
    ) -> None:
        """Callback for each received message."""
        try:
            message = self._handler.message_model.model_validate(json.loads(body))
        except (ValueError, ValidationError) as e:
            logger.exception("Invalid message format", extra={"error": str(e)})
            self._broker.reject(delivery_tag)
            return

        logger.info(
            "Message received",
            extra={
                "task": message.model_dump(mode="json"),
                "max_attempts": self._retry_policy.max_attempts,
            },
        )

        try:
            self._handler.process(message)
        except MissingAudioError as e:
            # retrying cannot bring the audio back
            logger.warning(
                "Chunk audio missing, skipping",
                extra={"chunk_id": e.chunk_id, "locator": e.locator},
            )
            self._broker.acknowledge(delivery_tag)
            return
        except Exception as e:
            logger.exception(
                "Message processing failed",
                extra={"task": message.model_dump(mode="json")},
            )
            self._handle_failure(message, delivery_tag, e)
            return

        self._broker.acknowledge(delivery_tag)
        logger.info(
            "Message processed successfully",
            extra={"task": message.model_dump(mode="json")},
        )

    def _handle_failure(
        self, message: BaseModel, delivery_tag: int, error: Exception
    ) -> None:
        attempt = message.attempt

        if attempt >= self._retry_policy.max_attempts:
            logger.error(
                "Retries exhausted, dead-lettering message",
                extra={"task": message.model_dump(mode="json"), "attempt": attempt},
            )
            try:
                self._handler.on_failure(message, error)
            finally:
                self._broker.reject(delivery_tag)
            return

        delay = self._retry_policy.delay_for(attempt)
        retry_message = message.model_copy(update={"attempt": attempt + 1})

        try:
            self._broker.publish_retry(retry_message.model_dump(mode="json"), delay)
        except EventPublishError:
            logger.exception(
                "Failed to schedule retry, requeueing message",
                extra={"task": message.model_dump(mode="json")},
            )
            self._broker.reject(delivery_tag, requeue=True)
            return

        self._broker.acknowledge(delivery_tag)
        logger.info(
            "Retry scheduled",
            extra={
                "task": retry_message.model_dump(mode="json"),
                "delay_seconds": delay,
            },
        )
