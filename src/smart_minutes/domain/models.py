"""Domain models for the minutes pipeline."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

STORE_SCHEME = "store://"


class ObjectReference(BaseModel, frozen=True):
    """Location of an object in durable storage."""

    bucket: str
    name: str

    @property
    def uri(self) -> str:
        return f"{STORE_SCHEME}{self.bucket}/{self.name}"

    @classmethod
    def from_uri(cls, uri: str) -> "ObjectReference":
        """
        Parses a ``store://<bucket>/<name>`` reference.

        Raises:
            ValueError: If the URI does not use the store scheme or lacks a name.
        """
        if not uri.startswith(STORE_SCHEME):
            raise ValueError(f"Not a storage reference: '{uri}'")
        bucket, _, name = uri[len(STORE_SCHEME) :].partition("/")
        if not bucket or not name:
            raise ValueError(f"Incomplete storage reference: '{uri}'")
        return cls(bucket=bucket, name=name)


class AudioAsset(BaseModel, frozen=True):
    """An uploaded meeting recording, created once by ingestion."""

    session_id: str
    file_name: str
    reference: ObjectReference
    content_type: str
    created_at: datetime


class RecognizedToken(BaseModel, frozen=True):
    """A single recognized word with its speaker attribution."""

    text: str
    speaker_tag: int
    start_ms: int = 0
    end_ms: int = 0


class TranscriptSegment(BaseModel, frozen=True):
    """A contiguous run of speech from one speaker."""

    speaker_tag: int
    text: str


class TranscriptStatus(str, Enum):
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class Transcript(BaseModel, frozen=True):
    """Speaker-labeled transcript owned by exactly one session."""

    session_id: str
    segments: list[TranscriptSegment] = Field(default_factory=list)
    raw_text: str = ""
    corrected_text: str = ""
    status: TranscriptStatus = TranscriptStatus.PENDING

    @property
    def is_ready(self) -> bool:
        return self.status is TranscriptStatus.READY


class DiarizationSettings(BaseModel, frozen=True):
    enabled: bool = True
    expected_speakers: int = 2


class RecognitionRequest(BaseModel, frozen=True):
    """Configuration submitted with a speech recognition job."""

    encoding: str
    sample_rate_hertz: int
    primary_language: str
    fallback_languages: tuple[str, ...] = ()
    diarization: DiarizationSettings = DiarizationSettings()


class RecognitionJob(BaseModel, frozen=True):
    """Handle to a submitted long-running recognition job."""

    job_id: str
    handle: Any = Field(default=None, exclude=True, repr=False)


class CorrectionRule(BaseModel, frozen=True):
    """Replaces whole-word, case-insensitive matches of ``pattern``."""

    pattern: str
    replacement: str

    @field_validator("pattern")
    @classmethod
    def _pattern_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("pattern must not be blank")
        return value


class CorrectionRuleSet(BaseModel, frozen=True):
    """Versioned, ordered list of correction rules."""

    version: str
    rules: tuple[CorrectionRule, ...] = ()

    @classmethod
    def from_file(cls, path: Path) -> "CorrectionRuleSet":
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


class SummaryTemplate(BaseModel, frozen=True):
    """A named summarization style applied to a transcript."""

    name: str
    field_key: str
    instruction: str

    def build_prompt(self, transcript_text: str) -> str:
        body = transcript_text.strip() or "(No speech was recorded in this meeting.)"
        return f"{self.instruction.strip()}\n\nTranscript:\n{body}"


class SummaryTemplateSet(BaseModel, frozen=True):
    templates: tuple[SummaryTemplate, ...]

    @field_validator("templates")
    @classmethod
    def _unique(cls, value: tuple[SummaryTemplate, ...]) -> tuple[SummaryTemplate, ...]:
        if not value:
            raise ValueError("at least one summary template is required")
        names = [t.name for t in value]
        keys = [t.field_key for t in value]
        if len(set(names)) != len(names) or len(set(keys)) != len(keys):
            raise ValueError("template names and field keys must be unique")
        return value

    @classmethod
    def from_file(cls, path: Path) -> "SummaryTemplateSet":
        return cls.model_validate_json(path.read_text(encoding="utf-8"))


class SummaryResult(BaseModel, frozen=True):
    """Outcome of one template's summarize-and-publish attempt."""

    template_name: str
    field_key: str
    text: str | None = None
    link: str | None = None
    failed_stage: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.link is not None


class MinutesRecord(BaseModel, frozen=True):
    """A new minutes record, before the datastore assigns key and timestamp."""

    session_id: str
    user_id: str
    audio_file_name: str
    links: dict[str, str]


class MinutesEntry(BaseModel, frozen=True):
    """A stored minutes record as read back from the datastore."""

    summary_id: str
    session_id: str
    user_id: str
    audio_file_name: str
    created_at: datetime
    links: dict[str, str]

    def to_response(self, field_keys: list[str]) -> dict[str, Any]:
        """
        Flattens the entry into the public record schema.

        Every configured field key is present; links that were never produced
        are ``None`` rather than omitted.
        """
        payload: dict[str, Any] = {
            "summaryId": self.summary_id,
            "audioFileName": self.audio_file_name,
            "createdAt": self.created_at.isoformat(),
        }
        for key in field_keys:
            payload[key] = self.links.get(key)
        for key, link in self.links.items():
            payload.setdefault(key, link)
        return payload


class RunStatus(str, Enum):
    SUCCEEDED = "succeeded"
    PARTIAL_FAILURE = "partial_failure"
    CANCELLED = "cancelled"


class SummarizationOutcome(BaseModel, frozen=True):
    """Result of one summarization invocation, after recording."""

    session_id: str
    summary_id: str
    status: RunStatus
    results: list[SummaryResult]

    @property
    def links(self) -> dict[str, str | None]:
        return {r.field_key: r.link for r in self.results}
