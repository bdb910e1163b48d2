"""Handler orchestrating speech recognition for stored audio."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, wait

from pydantic import BaseModel

from smart_minutes.domain import TranscriptBuilder, TranscriptCorrector
from smart_minutes.domain.models import (
    AudioAsset,
    DiarizationSettings,
    RecognitionJob,
    RecognitionRequest,
    RecognizedToken,
    Transcript,
    TranscriptSegment,
    TranscriptStatus,
)
from smart_minutes.exceptions import PipelineCancelledError, TranscriptionFailedError
from smart_minutes.infrastructure.interfaces import SpeechRecognitionService, StorageClient
from smart_minutes.logging import setup_logging

logger = setup_logging()

_ENCODINGS = {
    "audio/mpeg": "MP3",
    "audio/mp3": "MP3",
    "audio/wav": "LINEAR16",
    "audio/x-wav": "LINEAR16",
    "audio/wave": "LINEAR16",
    "audio/flac": "FLAC",
    "audio/x-flac": "FLAC",
    "audio/ogg": "OGG_OPUS",
    "audio/webm": "WEBM_OPUS",
    "audio/mp4": "MP4",
    "audio/x-m4a": "MP4",
}


class RecognitionSettings(BaseModel, frozen=True):
    """Static settings applied to every recognition job."""

    sample_rate_hertz: int = 44100
    primary_language: str = "en"
    fallback_languages: tuple[str, ...] = ()
    expected_speakers: int = 2
    poll_interval_seconds: float = 3.0
    timeout_seconds: float = 3600.0


def encoding_for(content_type: str) -> str:
    """Maps an audio MIME type to a recognition encoding name."""
    return _ENCODINGS.get(content_type.split(";")[0].strip().lower(), "ENCODING_UNSPECIFIED")


class TranscriptionOrchestrator:
    """Turns a stored recording into a corrected, speaker-labeled transcript."""

    def __init__(
        self,
        storage: StorageClient,
        recognizer: SpeechRecognitionService,
        builder: TranscriptBuilder,
        corrector: TranscriptCorrector,
        settings: RecognitionSettings,
    ):
        self._storage = storage
        self._recognizer = recognizer
        self._builder = builder
        self._corrector = corrector
        self._settings = settings

    def build_request(self, asset: AudioAsset) -> RecognitionRequest:
        return RecognitionRequest(
            encoding=encoding_for(asset.content_type),
            sample_rate_hertz=self._settings.sample_rate_hertz,
            primary_language=self._settings.primary_language,
            fallback_languages=self._settings.fallback_languages,
            diarization=DiarizationSettings(
                enabled=True, expected_speakers=self._settings.expected_speakers
            ),
        )

    def transcribe(
        self, asset: AudioAsset, cancel_event: threading.Event | None = None
    ) -> Transcript:
        """
        Runs recognition for an audio asset and returns a ready transcript.

        Args:
            asset: The stored recording.
            cancel_event: Set by the caller to abandon the wait on the job.

        Returns:
            Transcript with status ``ready``.

        Raises:
            StorageUnavailableError: If the audio URL cannot be produced.
            TranscriptionFailedError: If the job fails or exceeds the timeout.
            PipelineCancelledError: If ``cancel_event`` is set while waiting.
        """
        audio_url = self._storage.presigned_url(asset.reference)
        request = self.build_request(asset)

        logger.info(
            "Submitting audio for transcription",
            extra={
                "session_id": asset.session_id,
                "reference": asset.reference.uri,
                "encoding": request.encoding,
            },
        )

        try:
            job = self._recognizer.submit(audio_url, request)
            tokens = self._await_tokens(asset.session_id, job, cancel_event)
        except TranscriptionFailedError as e:
            if e.subject == asset.session_id:
                raise
            raise TranscriptionFailedError(asset.session_id, e.reason, e) from e
        except PipelineCancelledError:
            raise
        except Exception as e:
            logger.exception(
                "Recognizer raised unexpectedly", extra={"session_id": asset.session_id}
            )
            raise TranscriptionFailedError(asset.session_id, "recognizer error", e) from e

        segments = self._builder.assemble(tokens)
        transcript = Transcript(
            session_id=asset.session_id,
            segments=segments,
            raw_text=self._builder.render(segments),
        )

        corrected_segments = [
            TranscriptSegment(
                speaker_tag=s.speaker_tag, text=self._corrector.correct(s.text)
            )
            for s in segments
        ]
        transcript = transcript.model_copy(
            update={
                "corrected_text": self._builder.render(corrected_segments),
                "status": TranscriptStatus.READY,
            }
        )

        logger.info(
            "Transcript ready",
            extra={
                "session_id": asset.session_id,
                "segment_count": len(segments),
                "word_count": len(tokens),
            },
        )
        return transcript

    def _await_tokens(
        self,
        session_id: str,
        job: RecognitionJob,
        cancel_event: threading.Event | None,
    ) -> list[RecognizedToken]:
        """
        Waits for the job, checking timeout and cancellation once per poll.

        The recognizer runs on a worker thread and is told to stop as soon as
        this method returns or raises.
        """
        stop_event = threading.Event()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="recognition")
        future = executor.submit(self._recognizer.wait, job, stop_event)
        deadline = time.monotonic() + self._settings.timeout_seconds
        try:
            while True:
                done, _ = wait([future], timeout=self._settings.poll_interval_seconds)
                if done:
                    return future.result()
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(
                        "Transcription cancelled",
                        extra={"session_id": session_id, "job_id": job.job_id},
                    )
                    raise PipelineCancelledError(session_id, "transcription")
                if time.monotonic() >= deadline:
                    logger.error(
                        "Transcription timed out",
                        extra={
                            "session_id": session_id,
                            "job_id": job.job_id,
                            "timeout_seconds": self._settings.timeout_seconds,
                        },
                    )
                    raise TranscriptionFailedError(
                        session_id,
                        f"job {job.job_id} did not finish within "
                        f"{self._settings.timeout_seconds:g}s",
                    )
        finally:
            stop_event.set()
            executor.shutdown(wait=False, cancel_futures=True)
