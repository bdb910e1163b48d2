"""Custom exceptions for the minutes pipeline.

Every error carries the pipeline ``stage`` it was raised from so callers can
report which step failed without parsing messages.
"""


class MinutesPipelineError(Exception):
    """Base class for all pipeline failures."""

    stage = "pipeline"

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class InputValidationError(MinutesPipelineError):
    """Raised when a caller supplies missing or invalid input."""

    stage = "validation"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid '{field}': {reason}")


class UpstreamServiceError(MinutesPipelineError):
    """Raised when an external service call fails."""

    stage = "upstream"


class StorageUnavailableError(UpstreamServiceError):
    """Raised when an audio upload cannot be confirmed by object storage."""

    stage = "ingestion"

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        super().__init__(f"Failed to store '{object_name}'", cause)


class TranscriptionFailedError(UpstreamServiceError):
    """Raised when the speech recognition job fails or times out."""

    stage = "transcription"

    def __init__(self, subject: str, reason: str, cause: Exception | None = None):
        self.subject = subject
        self.reason = reason
        super().__init__(f"Transcription failed for '{subject}': {reason}", cause)


class CompletionError(UpstreamServiceError):
    """Raised when a language model completion call fails."""

    stage = "summarization"


class SummarizationFailedError(UpstreamServiceError):
    """Raised when every summary template of an invocation failed."""

    stage = "summarization"

    def __init__(self, session_id: str, failures: dict[str, str]):
        self.session_id = session_id
        self.failures = failures
        super().__init__(
            f"All {len(failures)} summary templates failed for session '{session_id}'"
        )


class DocumentHostError(UpstreamServiceError):
    """Raised by the file hosting adapter when an operation fails."""

    stage = "publish"

    def __init__(self, operation: str, target: str, cause: Exception | None = None):
        self.operation = operation
        self.target = target
        super().__init__(f"Document host {operation} failed for '{target}'", cause)


class PublishFailedError(UpstreamServiceError):
    """Raised when a summary document cannot be uploaded and shared."""

    stage = "publish"

    def __init__(self, file_name: str, cause: Exception | None = None):
        self.file_name = file_name
        super().__init__(f"Failed to publish document '{file_name}'", cause)


class TranscriptStoreError(UpstreamServiceError):
    """Raised when the session transcript store cannot be read or written."""

    stage = "transcript_store"

    def __init__(self, key: str, operation: str, cause: Exception | None = None):
        self.key = key
        self.operation = operation
        super().__init__(f"Transcript store {operation} failed for key '{key}'", cause)


class PersistenceError(MinutesPipelineError):
    """Raised when a minutes record cannot be written to the datastore."""

    stage = "recording"

    def __init__(self, session_id: str, cause: Exception | None = None):
        self.session_id = session_id
        super().__init__(
            f"Failed to persist minutes record for session '{session_id}'", cause
        )


class TranscriptNotFoundError(MinutesPipelineError):
    """Raised when no ready transcript exists for a session."""

    stage = "summarization"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"No ready transcript for session '{session_id}'")


class PipelineCancelledError(MinutesPipelineError):
    """Raised when the caller cancels a run while it waits on a service."""

    stage = "cancelled"

    def __init__(self, session_id: str, during: str):
        self.session_id = session_id
        self.during = during
        super().__init__(f"Run for session '{session_id}' cancelled during {during}")


class ServiceNotReadyError(MinutesPipelineError):
    """Raised when pipeline dependencies are requested before startup."""

    stage = "startup"

    def __init__(self):
        super().__init__("Pipeline dependencies are not initialized")
