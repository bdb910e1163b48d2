"""MinIO implementation of the StorageClient interface."""

import io
from datetime import timedelta

from minio import Minio

from smart_minutes.domain.models import ObjectReference
from smart_minutes.exceptions import StorageUnavailableError
from smart_minutes.infrastructure.interfaces import StorageClient
from smart_minutes.logging import setup_logging

logger = setup_logging()


class MinioStorageClient(StorageClient):
    """Handles audio object storage using MinIO."""

    def __init__(self, client: Minio, url_expiry: timedelta = timedelta(hours=2)):
        self._client = client
        self._url_expiry = url_expiry

    def upload(self, reference: ObjectReference, data: bytes, content_type: str) -> None:
        try:
            result = self._client.put_object(
                bucket_name=reference.bucket,
                object_name=reference.name,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except Exception as e:
            logger.exception(
                "MinIO upload failed",
                extra={"bucket_name": reference.bucket, "object_name": reference.name},
            )
            raise StorageUnavailableError(reference.name, e) from e

        if not getattr(result, "etag", None):
            logger.error(
                "MinIO upload not confirmed",
                extra={"bucket_name": reference.bucket, "object_name": reference.name},
            )
            raise StorageUnavailableError(reference.name)

        logger.info(
            "File uploaded to MinIO",
            extra={
                "bucket_name": reference.bucket,
                "object_name": reference.name,
                "size": len(data),
            },
        )

    def presigned_url(self, reference: ObjectReference) -> str:
        try:
            return self._client.presigned_get_object(
                reference.bucket, reference.name, expires=self._url_expiry
            )
        except Exception as e:
            logger.exception(
                "MinIO presign failed",
                extra={"bucket_name": reference.bucket, "object_name": reference.name},
            )
            raise StorageUnavailableError(reference.name, e) from e

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        if not self._client.bucket_exists(bucket_name):
            self._client.make_bucket(bucket_name)
            logger.info("Bucket created", extra={"bucket_name": bucket_name})
        else:
            logger.info("Bucket already exists", extra={"bucket_name": bucket_name})
