"""Abstract interface for audio object storage."""

from abc import ABC, abstractmethod

from smart_minutes.domain.models import ObjectReference


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def upload(self, reference: ObjectReference, data: bytes, content_type: str) -> None:
        """
        Writes an object and waits for the backend to confirm it.

        Args:
            reference: Destination bucket and object name.
            data: The object contents.
            content_type: MIME type of the object.

        Raises:
            StorageUnavailableError: If the write is not confirmed.
        """
        pass

    @abstractmethod
    def presigned_url(self, reference: ObjectReference) -> str:
        """
        Returns a time-limited URL external services can read the object from.

        Raises:
            StorageUnavailableError: If the URL cannot be generated.
        """
        pass

    @abstractmethod
    def ensure_bucket_exists(self, bucket_name: str) -> None:
        """
        Ensures a bucket exists, creating it if necessary.

        Args:
            bucket_name: The bucket name to ensure exists.
        """
        pass
