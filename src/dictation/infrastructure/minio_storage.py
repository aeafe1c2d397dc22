"""MinIO implementation of the StorageClient interface."""

import io

from minio import Minio
from minio.error import S3Error

from dictation.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageUploadError,
)
from dictation.logging import setup_logging

from .interfaces import StorageClient

logger = setup_logging()

_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject"}


class MinioStorageClient(StorageClient):
    """Handles audio chunk storage using a single MinIO bucket."""

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    def upload(self, object_name: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                bucket_name=self._bucket_name,
                object_name=object_name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
            logger.info(
                "File uploaded to MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

    def download(self, object_name: str) -> bytes:
        response = None
        try:
            response = self._client.get_object(bucket_name=self._bucket_name, object_name=object_name)
            data = response.data
            logger.info(
                "File downloaded from MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            return data
        except Exception as e:
            logger.exception(
                "MinIO download failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def exists(self, object_name: str) -> bool:
        try:
            self._client.stat_object(bucket_name=self._bucket_name, object_name=object_name)
            return True
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                return False
            logger.exception(
                "MinIO stat failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDownloadError(object_name, e) from e

    def delete(self, object_name: str) -> None:
        try:
            self._client.remove_object(bucket_name=self._bucket_name, object_name=object_name)
            logger.info(
                "File deleted from MinIO",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
        except Exception as e:
            logger.exception(
                "MinIO delete failed",
                extra={"bucket_name": self._bucket_name, "object_name": object_name},
            )
            raise StorageDeleteError(object_name, e) from e

    def ensure_bucket_exists(self) -> None:
        if not self._client.bucket_exists(bucket_name=self._bucket_name):
            self._client.make_bucket(bucket_name=self._bucket_name)
            logger.info("Bucket created", extra={"bucket_name": self._bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": self._bucket_name})
