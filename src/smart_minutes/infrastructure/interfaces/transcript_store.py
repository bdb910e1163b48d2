"""Abstract interface for session-scoped transcript storage."""

from abc import ABC, abstractmethod

from smart_minutes.domain.models import Transcript


class TranscriptStore(ABC):
    """Abstract base class holding one transcript per session."""

    @abstractmethod
    def save(self, transcript: Transcript) -> None:
        """
        Stores a transcript under its session id.

        Raises:
            TranscriptStoreError: If the write fails.
        """
        pass

    @abstractmethod
    def get(self, session_id: str) -> Transcript | None:
        """
        Retrieves the transcript of a session.

        Returns:
            The transcript or None if the session has none.

        Raises:
            TranscriptStoreError: If the read fails.
        """
        pass
