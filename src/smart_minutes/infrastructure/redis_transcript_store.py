"""Redis implementation of the TranscriptStore interface."""

import redis

from smart_minutes.domain.models import Transcript
from smart_minutes.exceptions import TranscriptStoreError
from smart_minutes.infrastructure.interfaces import TranscriptStore
from smart_minutes.logging import setup_logging

logger = setup_logging()


class RedisTranscriptStore(TranscriptStore):
    """Keeps each session's transcript under its own expiring Redis key."""

    def __init__(self, client: redis.Redis, ttl_seconds: int):
        self._client = client
        self._ttl_seconds = ttl_seconds

    def save(self, transcript: Transcript) -> None:
        key = self._key(transcript.session_id)
        try:
            self._client.set(key, transcript.model_dump_json(), ex=self._ttl_seconds)
            logger.info("Transcript stored", extra={"key": key, "ttl": self._ttl_seconds})
        except redis.RedisError as e:
            logger.exception("Redis set failed", extra={"key": key})
            raise TranscriptStoreError(key, "set", cause=e) from e

    def get(self, session_id: str) -> Transcript | None:
        key = self._key(session_id)
        try:
            value = self._client.get(key)
        except redis.RedisError as e:
            logger.exception("Redis get failed", extra={"key": key})
            raise TranscriptStoreError(key, "get", cause=e) from e

        if not value:
            return None
        logger.info("Transcript retrieved", extra={"key": key})
        return Transcript.model_validate_json(value)

    def _key(self, session_id: str) -> str:
        return f"transcript:{session_id}"
