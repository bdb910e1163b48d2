"""Infrastructure interface exports."""

from smart_minutes.infrastructure.interfaces.document_host import DocumentHost
from smart_minutes.infrastructure.interfaces.llm_service import LLMService
from smart_minutes.infrastructure.interfaces.speech_recognition_service import (
    SpeechRecognitionService,
)
from smart_minutes.infrastructure.interfaces.storage_client import StorageClient
from smart_minutes.infrastructure.interfaces.transcript_store import TranscriptStore

__all__ = [
    "DocumentHost",
    "LLMService",
    "SpeechRecognitionService",
    "StorageClient",
    "TranscriptStore",
]
