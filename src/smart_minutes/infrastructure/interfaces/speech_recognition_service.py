"""Abstract interface for long-running speech recognition."""

import threading
from abc import ABC, abstractmethod

from smart_minutes.domain.models import RecognitionJob, RecognitionRequest, RecognizedToken


class SpeechRecognitionService(ABC):
    """Abstract base class for diarizing speech recognition backends."""

    @abstractmethod
    def submit(self, audio_url: str, request: RecognitionRequest) -> RecognitionJob:
        """
        Submits an audio file for asynchronous recognition.

        Args:
            audio_url: URL the provider downloads the audio from.
            request: Language, encoding and diarization settings.

        Returns:
            A handle to the queued job.

        Raises:
            TranscriptionFailedError: If the provider rejects the job.
        """
        pass

    @abstractmethod
    def wait(
        self, job: RecognitionJob, stop_event: threading.Event
    ) -> list[RecognizedToken]:
        """
        Blocks until the job completes and returns its time-ordered words.

        Args:
            job: The submitted job.
            stop_event: Set by the caller once it no longer needs the result.
                Implementations must return or raise promptly after it is set.

        Raises:
            TranscriptionFailedError: If the job ends in an error state or the
                wait is stopped.
        """
        pass
