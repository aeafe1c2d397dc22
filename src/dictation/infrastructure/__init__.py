"""Infrastructure layer exports."""

from .assemblyai_transcriber import AssemblyAITranscriber
from .credentials import DatabaseCredentialsProvider, SdkAdapterProvider
from .gemini_polisher import GeminiPolisher
from .minio_storage import MinioStorageClient
from .rabbitmq_broker import RabbitMQBroker
from .rabbitmq_dispatcher import RabbitMQTaskDispatcher
from .redis_lock import RedisSessionLock

__all__ = [
    "AssemblyAITranscriber",
    "DatabaseCredentialsProvider",
    "SdkAdapterProvider",
    "GeminiPolisher",
    "MinioStorageClient",
    "RabbitMQBroker",
    "RabbitMQTaskDispatcher",
    "RedisSessionLock",
]
