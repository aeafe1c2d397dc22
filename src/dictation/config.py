"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, computed_field


class PostgresConfig(BaseModel, frozen=True):
    """PostgreSQL connection configuration."""

    host: str
    port: int
    user: str
    password: str
    database: str

    @computed_field
    @property
    def url(self) -> str:
        """Returns the full PostgreSQL connection URL."""
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "dictation"
    secure: bool = False


class QueueConfig(BaseModel, frozen=True):
    """RabbitMQ queue configuration for one pipeline stage."""

    name: str
    queue_type: str = "quorum"
    routing_key: str
    retry_queue_name: str
    dlq_name: str
    dlq_exchange_name: str = "dead_letter_exchange"
    dlq_routing_key: str


class RabbitMQConfig(BaseModel, frozen=True):
    """RabbitMQ connection configuration."""

    host: str
    user: str
    password: str
    exchange_name: str = "dictation"
    chunk_queue: QueueConfig = QueueConfig(
        name="chunk_transcription_queue",
        routing_key="dictation.chunk.uploaded",
        retry_queue_name="chunk_transcription_retry",
        dlq_name="dlq_chunk_transcription",
        dlq_routing_key="dictation.chunk.failed",
    )
    finalize_queue: QueueConfig = QueueConfig(
        name="transcript_finalization_queue",
        routing_key="dictation.session.finalize",
        retry_queue_name="transcript_finalization_retry",
        dlq_name="dlq_transcript_finalization",
        dlq_routing_key="dictation.session.failed",
    )


class RedisConfig(BaseModel, frozen=True):
    """Redis connection configuration."""

    host: str
    port: int = 6379
    lock_timeout_seconds: int = 600  # upper bound on one finalize run


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str
    language_code: str = "es"


class GeminiConfig(BaseModel, frozen=True):
    """Gemini LLM configuration."""

    api_key: str
    model_name: str = "gemini-2.5-flash"
    max_output_tokens: int = 4096
    system_prompt_path: Path = Path("prompts/polish_es_mx.txt")


class RetryPolicy(BaseModel, frozen=True):
    """Fixed retry schedule applied to every pipeline task."""

    max_attempts: int = 3
    backoff_seconds: tuple[int, ...] = (10, 30, 60)

    def delay_for(self, attempt: int) -> int:
        """Returns the delay before retrying a task whose `attempt` just failed."""
        index = min(max(attempt, 1), len(self.backoff_seconds)) - 1
        return self.backoff_seconds[index]


class PipelineConfig(BaseModel, frozen=True):
    """Behavioural knobs for the transcription pipeline."""

    retry: RetryPolicy = RetryPolicy()
    merge_order: Literal["created_at", "chunk_start"] = "created_at"
    low_confidence_threshold: float = 0.7
    max_chunk_bytes: int = 10 * 1024 * 1024
    allowed_extensions: frozenset[str] = Field(
        default=frozenset({"webm", "ogg", "mp3", "wav", "m4a"})
    )
    chunk_prefix: str = "audio-chunks"


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    postgres: PostgresConfig
    minio: MinioConfig
    rabbitmq: RabbitMQConfig
    redis: RedisConfig
    assemblyai: AssemblyAIConfig
    gemini: GeminiConfig
    pipeline: PipelineConfig = PipelineConfig()


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        postgres=PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "postgres"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            user=os.getenv("POSTGRES_USER", ""),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            database=os.getenv("POSTGRES_DB", "dictation"),
        ),
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
        ),
        rabbitmq=RabbitMQConfig(
            host=os.getenv("RABBITMQ_HOST", "rabbitmq"),
            user=os.getenv("RABBITMQ_USER", ""),
            password=os.getenv("RABBITMQ_PASSWORD", ""),
        ),
        redis=RedisConfig(
            host=os.getenv("REDIS_HOST", "redis"),
            port=int(os.getenv("REDIS_PORT", "6379")),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
            language_code=os.getenv("TRANSCRIPTION_LANGUAGE", "es"),
        ),
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model_name=os.getenv("GEMINI_MODEL_NAME", "gemini-2.5-flash"),
        ),
        pipeline=PipelineConfig(
            merge_order=os.getenv("MERGE_ORDER", "created_at"),
        ),
    )
