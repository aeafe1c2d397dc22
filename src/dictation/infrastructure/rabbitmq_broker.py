"""RabbitMQ message broker implementation."""

import json
from collections.abc import Callable
from typing import Any

import pika
from pika.channel import Channel

from dictation.config import QueueConfig, RabbitMQConfig
from dictation.exceptions import EventPublishError
from dictation.logging import setup_logging

from .interfaces import MessageBroker

logger = setup_logging()


class RabbitMQBroker(MessageBroker):
    """Consumes one stage queue and schedules delayed retries through a TTL queue."""

    def __init__(self, channel: Channel, config: RabbitMQConfig, queue_config: QueueConfig):
        self._channel = channel
        self._config = config
        self._queue_config = queue_config

    def publish_retry(self, payload: dict, delay_seconds: int) -> None:
        """
        Parks a task in the retry queue until its per-message TTL expires.

        The retry queue has no consumers and dead-letters expired messages back
        into the stage's work queue through the main exchange.

        Raises:
            EventPublishError: If publishing fails.
        """
        retry_queue = self._queue_config.retry_queue_name
        try:
            self._channel.basic_publish(
                exchange="",
                routing_key=retry_queue,
                body=json.dumps(payload),
                properties=pika.BasicProperties(
                    delivery_mode=pika.DeliveryMode.Persistent,
                    expiration=str(delay_seconds * 1000),
                ),
            )
            logger.info(
                "Task scheduled for retry",
                extra={"queue": retry_queue, "delay_seconds": delay_seconds},
            )
        except Exception as e:
            logger.exception("Failed to schedule retry", extra={"queue": retry_queue})
            raise EventPublishError(retry_queue, cause=e) from e

    def acknowledge(self, delivery_tag: int) -> None:
        """Acknowledges processing of a message."""
        self._channel.basic_ack(delivery_tag=delivery_tag)

    def reject(self, delivery_tag: int, requeue: bool = False) -> None:
        """Rejects a message; without requeue it goes to the dead letter queue."""
        self._channel.basic_nack(delivery_tag=delivery_tag, requeue=requeue)

    def consume(
        self, callback: Callable[[bytes, int, dict[str, Any] | None], None]
    ) -> None:
        """
        Starts consuming messages from the stage queue, one at a time.

        Args:
            callback: Function called for each message with (body, delivery_tag, headers).
        """

        def on_message(ch, method, properties, body):
            headers = properties.headers if properties else None
            callback(body, method.delivery_tag, headers)

        self._channel.basic_qos(prefetch_count=1)
        self._channel.basic_consume(
            queue=self._queue_config.name,
            on_message_callback=on_message,
        )
        logger.info("Started consuming", extra={"queue": self._queue_config.name})
        self._channel.start_consuming()

    def setup(self) -> None:
        """Sets up exchanges, the work queue, its retry queue and its DLQ."""
        queue_config = self._queue_config

        # Dead letter exchange and queue
        self._channel.exchange_declare(
            exchange=queue_config.dlq_exchange_name,
            exchange_type="direct",
            durable=True,
        )
        self._channel.queue_declare(queue=queue_config.dlq_name, durable=True)
        self._channel.queue_bind(
            queue=queue_config.dlq_name,
            exchange=queue_config.dlq_exchange_name,
            routing_key=queue_config.dlq_routing_key,
        )

        # Main exchange
        self._channel.exchange_declare(
            exchange=self._config.exchange_name,
            exchange_type="topic",
            durable=True,
        )

        # Work queue; rejected messages are dead-lettered
        self._channel.queue_declare(
            queue=queue_config.name,
            durable=True,
            arguments={
                "x-queue-type": queue_config.queue_type,
                "x-dead-letter-exchange": queue_config.dlq_exchange_name,
                "x-dead-letter-routing-key": queue_config.dlq_routing_key,
            },
        )
        self._channel.queue_bind(
            queue=queue_config.name,
            exchange=self._config.exchange_name,
            routing_key=queue_config.routing_key,
        )

        # Retry queue: expired messages flow back to the work queue
        self._channel.queue_declare(
            queue=queue_config.retry_queue_name,
            durable=True,
            arguments={
                "x-dead-letter-exchange": self._config.exchange_name,
                "x-dead-letter-routing-key": queue_config.routing_key,
            },
        )

        logger.info(
            "Queue infrastructure ready",
            extra={"queue": queue_config.name, "exchange": self._config.exchange_name},
        )
