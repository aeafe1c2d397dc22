"""Dependency injection configuration for the API and the workers."""

from functools import lru_cache
from pathlib import Path

import pika
import redis
from minio import Minio
from pika.adapters.blocking_connection import BlockingChannel

from dictation.config import AppConfig, load_config
from dictation.database import get_engine, init_db, make_session_factory
from dictation.domain import TranscriptMerger
from dictation.handlers import (
    ChunkTaskHandler,
    CredentialsService,
    DictationService,
    FinalizeTaskHandler,
)
from dictation.infrastructure import (
    DatabaseCredentialsProvider,
    MinioStorageClient,
    RabbitMQBroker,
    RabbitMQTaskDispatcher,
    RedisSessionLock,
    SdkAdapterProvider,
)
from dictation.infrastructure.interfaces import (
    AdapterProvider,
    ApiKeys,
    SessionLock,
    StorageClient,
    TaskDispatcher,
)
from dictation.logging import setup_logging
from dictation.repositories import CredentialsRepository, SessionRepository
from dictation.worker import Worker

logger = setup_logging()

_PACKAGE_DIR = Path(__file__).parent


@lru_cache
def get_config() -> AppConfig:
    """Returns the application configuration."""
    return load_config()


@lru_cache
def get_session_factory():
    """Returns the database session factory, creating tables on first use."""
    engine = get_engine(get_config().postgres.url)
    init_db(engine)
    return make_session_factory(engine)


@lru_cache
def get_repository() -> SessionRepository:
    """Returns the configured session repository."""
    return SessionRepository(get_session_factory())


@lru_cache
def get_credentials_repository() -> CredentialsRepository:
    """Returns the configured per-owner credentials repository."""
    return CredentialsRepository(get_session_factory())


@lru_cache
def get_storage() -> StorageClient:
    """Returns the configured storage client."""
    config = get_config().minio
    minio_client = Minio(
        endpoint=config.endpoint,
        access_key=config.user,
        secret_key=config.password,
        secure=config.secure,
    )
    storage = MinioStorageClient(minio_client, config.bucket_name)
    storage.ensure_bucket_exists()
    return storage


def _open_channel() -> BlockingChannel:
    config = get_config().rabbitmq
    credentials = pika.PlainCredentials(config.user, config.password)
    parameters = pika.ConnectionParameters(
        host=config.host,
        credentials=credentials,
        heartbeat=0,
    )
    connection = pika.BlockingConnection(parameters)
    logger.info("Connected to RabbitMQ", extra={"host": config.host})
    return connection.channel()


@lru_cache
def get_dispatcher() -> TaskDispatcher:
    """Returns the dispatcher used by the API to schedule pipeline tasks."""
    config = get_config().rabbitmq
    channel = _open_channel()
    channel.exchange_declare(
        exchange=config.exchange_name,
        exchange_type="topic",
        durable=True,
    )
    return RabbitMQTaskDispatcher(channel, config)


@lru_cache
def get_adapter_provider() -> AdapterProvider:
    """Returns the provider of per-owner transcription and polishing adapters."""
    config = get_config()
    system_prompt = (_PACKAGE_DIR / config.gemini.system_prompt_path).read_text(
        encoding="utf-8"
    )
    credentials = DatabaseCredentialsProvider(
        get_credentials_repository(),
        ApiKeys(
            assemblyai_api_key=config.assemblyai.api_key,
            gemini_api_key=config.gemini.api_key,
        ),
    )
    return SdkAdapterProvider(credentials, config.gemini, system_prompt)


@lru_cache
def get_session_lock() -> SessionLock:
    """Returns the Redis-backed finalize lock."""
    config = get_config().redis
    client = redis.Redis(host=config.host, port=config.port)
    return RedisSessionLock(client, config.lock_timeout_seconds)


@lru_cache
def get_dictation_service() -> DictationService:
    """Returns the service behind the HTTP API."""
    return DictationService(
        get_repository(),
        get_storage(),
        get_dispatcher(),
        get_config().pipeline,
    )


@lru_cache
def get_credentials_service() -> CredentialsService:
    """Returns the service behind the API key endpoints."""
    return CredentialsService(get_credentials_repository(), get_adapter_provider())


def get_chunk_worker() -> Worker:
    """Returns a worker consuming the chunk transcription queue."""
    config = get_config()
    broker = RabbitMQBroker(_open_channel(), config.rabbitmq, config.rabbitmq.chunk_queue)
    broker.setup()

    handler = ChunkTaskHandler(
        get_repository(),
        get_storage(),
        get_adapter_provider(),
        config.assemblyai.language_code,
    )
    return Worker(broker, handler, config.pipeline.retry)


def get_finalize_worker() -> Worker:
    """Returns a worker consuming the transcript finalization queue."""
    config = get_config()
    broker = RabbitMQBroker(
        _open_channel(), config.rabbitmq, config.rabbitmq.finalize_queue
    )
    broker.setup()

    handler = FinalizeTaskHandler(
        get_repository(),
        get_adapter_provider(),
        TranscriptMerger(config.pipeline.merge_order),
        get_session_lock(),
    )
    return Worker(broker, handler, config.pipeline.retry)
