"""RabbitMQ implementation of the TaskDispatcher interface."""

import json
import threading
from uuid import UUID

import pika
from pika.adapters.blocking_connection import BlockingChannel

from dictation.config import RabbitMQConfig
from dictation.domain.models import ChunkTask, FinalizeTask
from dictation.exceptions import EventPublishError
from dictation.logging import setup_logging

from .interfaces import TaskDispatcher

logger = setup_logging()


class RabbitMQTaskDispatcher(TaskDispatcher):
    """Publishes pipeline tasks to the RabbitMQ exchange."""

    def __init__(self, channel: BlockingChannel, config: RabbitMQConfig):
        self._channel = channel
        self._config = config
        # BlockingChannel is not thread-safe; FastAPI runs sync routes in a threadpool
        self._lock = threading.Lock()

    def dispatch_chunk(self, chunk_id: int) -> None:
        self._publish(
            self._config.chunk_queue.routing_key,
            ChunkTask(chunk_id=chunk_id).model_dump(mode="json"),
        )

    def dispatch_finalize(self, session_id: UUID) -> None:
        self._publish(
            self._config.finalize_queue.routing_key,
            FinalizeTask(session_id=session_id).model_dump(mode="json"),
        )

    def _publish(self, routing_key: str, payload: dict) -> None:
        try:
            with self._lock:
                self._channel.basic_publish(
                    exchange=self._config.exchange_name,
                    routing_key=routing_key,
                    body=json.dumps(payload),
                    properties=pika.BasicProperties(
                        delivery_mode=pika.DeliveryMode.Persistent
                    ),
                )
            logger.info(
                "Event published to RabbitMQ",
                extra={
                    "exchange": self._config.exchange_name,
                    "routing_key": routing_key,
                },
            )
        except Exception as e:
            logger.exception(
                "RabbitMQ publish failed",
                extra={"routing_key": routing_key},
            )
            raise EventPublishError(routing_key, e) from e
