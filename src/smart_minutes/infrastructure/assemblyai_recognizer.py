"""AssemblyAI implementation of the SpeechRecognitionService interface."""

import threading

import assemblyai as aai

from smart_minutes.domain.models import RecognitionJob, RecognitionRequest, RecognizedToken
from smart_minutes.exceptions import TranscriptionFailedError
from smart_minutes.infrastructure.interfaces import SpeechRecognitionService
from smart_minutes.logging import setup_logging

logger = setup_logging()


class AssemblyAIRecognizer(SpeechRecognitionService):
    """Runs diarized transcription jobs on AssemblyAI."""

    def __init__(self, transcriber: aai.Transcriber, poll_interval_seconds: float = 3.0):
        self._transcriber = transcriber
        self._poll_interval_seconds = poll_interval_seconds

    def submit(self, audio_url: str, request: RecognitionRequest) -> RecognitionJob:
        """
        Queues a transcription job without waiting for it.

        AssemblyAI detects encoding and sample rate itself; they are logged for
        traceability only.
        """
        config = self._build_config(request)
        try:
            transcript = self._transcriber.submit(audio_url, config=config)
        except Exception as e:
            logger.exception("AssemblyAI submit failed")
            raise TranscriptionFailedError(audio_url, "submit rejected", e) from e

        if transcript.status == aai.TranscriptStatus.error:
            raise TranscriptionFailedError(audio_url, str(transcript.error))

        logger.info(
            "Transcription job submitted",
            extra={
                "job_id": transcript.id,
                "encoding": request.encoding,
                "sample_rate_hertz": request.sample_rate_hertz,
                "language": request.primary_language,
            },
        )
        return RecognitionJob(job_id=transcript.id, handle=transcript)

    def wait(
        self, job: RecognitionJob, stop_event: threading.Event
    ) -> list[RecognizedToken]:
        """
        Polls the job until it completes or ``stop_event`` is set.

        Speaker labels ("A", "B", ...) are mapped to integer tags in order of
        first appearance.
        """
        while True:
            try:
                transcript = aai.Transcript.get_by_id(job.job_id)
            except Exception as e:
                logger.exception("AssemblyAI polling failed", extra={"job_id": job.job_id})
                raise TranscriptionFailedError(job.job_id, "polling failed", e) from e

            if transcript.status in (aai.TranscriptStatus.completed, aai.TranscriptStatus.error):
                break
            if stop_event.wait(self._poll_interval_seconds):
                logger.info("Stopped waiting for job", extra={"job_id": job.job_id})
                raise TranscriptionFailedError(job.job_id, "wait stopped by caller")

        if transcript.status == aai.TranscriptStatus.error:
            raise TranscriptionFailedError(job.job_id, str(transcript.error))

        speaker_tags: dict[str, int] = {}
        tokens = []
        for word in transcript.words or []:
            tokens.append(
                RecognizedToken(
                    text=word.text,
                    speaker_tag=self._speaker_tag(word.speaker, speaker_tags),
                    start_ms=word.start,
                    end_ms=word.end,
                )
            )

        logger.info(
            "Audio transcription successful",
            extra={
                "job_id": job.job_id,
                "word_count": len(tokens),
                "speaker_count": len(speaker_tags),
            },
        )
        return tokens

    def _build_config(self, request: RecognitionRequest) -> aai.TranscriptionConfig:
        diarization = request.diarization
        options = {
            "speaker_labels": diarization.enabled,
            "speakers_expected": diarization.expected_speakers if diarization.enabled else None,
            "punctuate": True,
            "format_text": True,
        }
        if request.fallback_languages:
            options["language_detection"] = True
            options["language_detection_options"] = aai.LanguageDetectionOptions(
                expected_languages=[request.primary_language, *request.fallback_languages],
                fallback_language=request.primary_language,
            )
        else:
            options["language_code"] = request.primary_language
        return aai.TranscriptionConfig(**options)

    def _speaker_tag(self, label: str | None, speaker_tags: dict[str, int]) -> int:
        if label is None:
            return 0
        if label not in speaker_tags:
            speaker_tags[label] = len(speaker_tags) + 1
        return speaker_tags[label]
