"""Dependency injection configuration for the minutes service."""

import threading
from contextlib import contextmanager
from datetime import timedelta

import assemblyai as aai
import redis
from google import genai
from google.oauth2 import service_account
from googleapiclient.discovery import build
from minio import Minio
from sqlmodel import Session, SQLModel, create_engine

from smart_minutes.config import AppConfig, load_config
from smart_minutes.credentials import credential_source_for
from smart_minutes.domain import (
    FileCorrectionRuleSource,
    SummaryTemplateSet,
    TranscriptBuilder,
    TranscriptCorrector,
)
from smart_minutes.exceptions import ServiceNotReadyError
from smart_minutes.handlers import (
    AudioIngestor,
    DocumentPublisher,
    MinutesPipeline,
    RecognitionSettings,
    SummarizationFanOut,
    TranscriptionOrchestrator,
)
from smart_minutes.infrastructure import (
    AssemblyAIRecognizer,
    GeminiLLMService,
    GoogleDriveHost,
    MinioStorageClient,
    RedisTranscriptStore,
)
from smart_minutes.logging import setup_logging
from smart_minutes.repositories import MinutesRepository

logger = setup_logging()

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive"]

_pipeline: MinutesPipeline | None = None
_shutdown_event = threading.Event()


def build_pipeline(config: AppConfig) -> MinutesPipeline:
    """Constructs every external client once and composes the pipeline."""
    # MinIO storage
    minio_client = Minio(
        endpoint=config.minio.endpoint,
        access_key=config.minio.user,
        secret_key=config.minio.password,
        secure=config.minio.secure,
    )
    storage = MinioStorageClient(
        minio_client, timedelta(seconds=config.minio.presigned_url_ttl_seconds)
    )
    storage.ensure_bucket_exists(config.minio.bucket_name)

    # AssemblyAI recognition
    aai.settings.api_key = config.assemblyai.api_key
    recognizer = AssemblyAIRecognizer(
        aai.Transcriber(), config.assemblyai.poll_interval_seconds
    )

    # Gemini LLM
    llm = GeminiLLMService(
        genai.Client(api_key=config.gemini.api_key), config.gemini.model_name
    )
    system_prompt = config.gemini.system_prompt_path.read_text(encoding="utf-8")
    templates = SummaryTemplateSet.from_file(config.gemini.templates_path).templates

    # Google Drive
    credentials_info = credential_source_for(
        config.drive.credentials_source, config.drive.credentials_value
    ).load()
    credentials = service_account.Credentials.from_service_account_info(
        credentials_info, scopes=DRIVE_SCOPES
    )
    drive_service = build("drive", "v3", credentials=credentials, cache_discovery=False)
    publisher = DocumentPublisher(
        GoogleDriveHost(drive_service), config.drive.parent_folder_id
    )
    logger.info(
        "Drive client ready",
        extra={
            "credentials_source": config.drive.credentials_source,
            "service_account": credentials_info.get("client_email"),
        },
    )

    # Redis transcript store
    redis_client = redis.Redis(
        host=config.redis.host, port=config.redis.port, decode_responses=True
    )
    if not redis_client.ping():
        logger.error("Redis connection failed", extra={"host": config.redis.host})
        raise ConnectionError("Redis connection failed")
    transcript_store = RedisTranscriptStore(
        redis_client, config.redis.transcript_ttl_seconds
    )

    # PostgreSQL database
    db_engine = create_engine(config.postgres.url)
    SQLModel.metadata.create_all(db_engine)
    logger.info("Database initialized", extra={"host": config.postgres.host})

    @contextmanager
    def _session_factory():
        """Creates a database session context manager."""
        with Session(db_engine) as session:
            yield session

    # Service composition
    orchestrator = TranscriptionOrchestrator(
        storage,
        recognizer,
        TranscriptBuilder(),
        TranscriptCorrector(FileCorrectionRuleSource(config.corrections.rules_path)),
        RecognitionSettings(
            sample_rate_hertz=config.assemblyai.sample_rate_hertz,
            primary_language=config.assemblyai.primary_language,
            fallback_languages=config.assemblyai.fallback_languages,
            expected_speakers=config.assemblyai.expected_speakers,
            poll_interval_seconds=config.assemblyai.poll_interval_seconds,
            timeout_seconds=config.assemblyai.timeout_seconds,
        ),
    )
    fan_out = SummarizationFanOut(
        llm,
        publisher,
        list(templates),
        system_prompt,
        config.gemini.temperature,
    )
    return MinutesPipeline(
        AudioIngestor(storage, config.minio.bucket_name),
        orchestrator,
        fan_out,
        MinutesRepository(_session_factory),
        transcript_store,
    )


def init_dependencies(config: AppConfig | None = None) -> MinutesPipeline:
    """Builds the pipeline at startup; later calls return the same instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = build_pipeline(config or load_config())
        logger.info("Pipeline dependencies initialized")
    return _pipeline


def shutdown_dependencies() -> None:
    """Signals in-flight runs to stop waiting on external services."""
    _shutdown_event.set()
    logger.info("Pipeline shutdown requested")


def reset_dependencies() -> None:
    global _pipeline
    _pipeline = None
    _shutdown_event.clear()


def get_pipeline() -> MinutesPipeline:
    """
    Returns the configured pipeline.

    Raises:
        ServiceNotReadyError: If ``init_dependencies`` has not run.
    """
    if _pipeline is None:
        raise ServiceNotReadyError()
    return _pipeline


def get_shutdown_event() -> threading.Event:
    """Returns the event set when the service begins shutting down."""
    return _shutdown_event
