"""Infrastructure layer exports."""

from smart_minutes.infrastructure.assemblyai_recognizer import AssemblyAIRecognizer
from smart_minutes.infrastructure.gemini_llm import GeminiLLMService
from smart_minutes.infrastructure.google_drive_host import GoogleDriveHost
from smart_minutes.infrastructure.minio_storage import MinioStorageClient
from smart_minutes.infrastructure.redis_transcript_store import RedisTranscriptStore

__all__ = [
    "AssemblyAIRecognizer",
    "GeminiLLMService",
    "GoogleDriveHost",
    "MinioStorageClient",
    "RedisTranscriptStore",
]
