"""Handler for persisting uploaded meeting audio."""

import os
from collections.abc import Callable
from datetime import datetime, timezone

from smart_minutes.domain.models import AudioAsset, ObjectReference
from smart_minutes.exceptions import InputValidationError
from smart_minutes.infrastructure.interfaces import StorageClient
from smart_minutes.logging import setup_logging

logger = setup_logging()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AudioIngestor:
    """Stores audio payloads and hands back a stable reference."""

    def __init__(
        self,
        storage: StorageClient,
        bucket_name: str,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._storage = storage
        self._bucket_name = bucket_name
        self._clock = clock

    def ingest(
        self, session_id: str, file_name: str, data: bytes, content_type: str
    ) -> AudioAsset:
        """
        Writes the audio to object storage.

        The object is named ``<submission-epoch-ms>-<file name>`` so submissions
        sort by arrival and do not collide.

        Args:
            session_id: Owning session identifier.
            file_name: Original name of the uploaded file.
            data: Audio bytes.
            content_type: MIME type of the audio.

        Returns:
            The stored AudioAsset.

        Raises:
            InputValidationError: If the session id, file name or payload is empty.
            StorageUnavailableError: If storage does not confirm the write.
        """
        if not session_id or not session_id.strip():
            raise InputValidationError("session_id", "must not be empty")
        if not data:
            raise InputValidationError("file", "audio payload is empty")

        base_name = os.path.basename((file_name or "").replace("\\", "/"))
        if not base_name:
            raise InputValidationError("file_name", "must not be empty")

        submitted_at = self._clock()
        epoch_ms = int(submitted_at.timestamp() * 1000)
        reference = ObjectReference(
            bucket=self._bucket_name, name=f"{epoch_ms}-{base_name}"
        )

        self._storage.upload(reference, data, content_type)

        logger.info(
            "Audio ingested",
            extra={
                "session_id": session_id,
                "reference": reference.uri,
                "size": len(data),
            },
        )

        return AudioAsset(
            session_id=session_id,
            file_name=base_name,
            reference=reference,
            content_type=content_type,
            created_at=submitted_at,
        )
