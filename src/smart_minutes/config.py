"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel, computed_field

RESOURCES_DIR = Path(__file__).parent / "resources"


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "smart-minutes"
    secure: bool = False
    presigned_url_ttl_seconds: int = 7200


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI recognition configuration."""

    api_key: str
    primary_language: str = "en"
    fallback_languages: tuple[str, ...] = ("es", "fr")
    expected_speakers: int = 2
    sample_rate_hertz: int = 44100
    poll_interval_seconds: float = 3.0
    timeout_seconds: float = 3600.0


class GeminiConfig(BaseModel, frozen=True):
    """Gemini LLM configuration."""

    api_key: str
    model_name: str = "gemini-2.5-flash-lite"
    temperature: float = 0.2
    system_prompt_path: Path = RESOURCES_DIR / "system_prompt.txt"
    templates_path: Path = RESOURCES_DIR / "summary_templates.json"


class DriveConfig(BaseModel, frozen=True):
    """Shared document hosting configuration."""

    parent_folder_id: str
    credentials_source: str = "env"
    credentials_value: str = "SMARTMINUTES_MOM_KEY_JSON"


class RedisConfig(BaseModel, frozen=True):
    """Redis connection configuration."""

    host: str
    port: int = 6379
    transcript_ttl_seconds: int = 86400


class PostgresConfig(BaseModel, frozen=True):
    """PostgreSQL connection configuration."""

    host: str
    user: str
    password: str
    port: int
    database: str

    @computed_field
    @property
    def url(self) -> str:
        """Returns the full PostgreSQL connection URL."""
        return (
            f"postgresql+psycopg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class CorrectionsConfig(BaseModel, frozen=True):
    rules_path: Path = RESOURCES_DIR / "correction_rules.json"


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    minio: MinioConfig
    assemblyai: AssemblyAIConfig
    gemini: GeminiConfig
    drive: DriveConfig
    redis: RedisConfig
    postgres: PostgresConfig
    corrections: CorrectionsConfig


def _csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value) if value else default


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET", "smart-minutes"),
            secure=os.getenv("MINIO_SECURE", "false").lower() == "true",
            presigned_url_ttl_seconds=int(
                os.getenv("MINIO_PRESIGNED_URL_TTL_SECONDS", "7200")
            ),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
            primary_language=os.getenv("ASSEMBLYAI_PRIMARY_LANGUAGE", "en"),
            fallback_languages=_csv(os.getenv("ASSEMBLYAI_FALLBACK_LANGUAGES", "es,fr")),
            expected_speakers=int(os.getenv("ASSEMBLYAI_EXPECTED_SPEAKERS", "2")),
            sample_rate_hertz=int(os.getenv("ASSEMBLYAI_SAMPLE_RATE_HERTZ", "44100")),
            poll_interval_seconds=float(os.getenv("ASSEMBLYAI_POLL_INTERVAL_SECONDS", "3")),
            timeout_seconds=float(os.getenv("ASSEMBLYAI_TIMEOUT_SECONDS", "3600")),
        ),
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite"),
            temperature=float(os.getenv("GEMINI_TEMPERATURE", "0.2")),
            system_prompt_path=_path(
                "GEMINI_SYSTEM_PROMPT_PATH", RESOURCES_DIR / "system_prompt.txt"
            ),
            templates_path=_path(
                "SUMMARY_TEMPLATES_PATH", RESOURCES_DIR / "summary_templates.json"
            ),
        ),
        drive=DriveConfig(
            parent_folder_id=os.getenv("DRIVE_PARENT_FOLDER_ID", ""),
            credentials_source=os.getenv("DRIVE_CREDENTIALS_SOURCE", "env"),
            credentials_value=os.getenv(
                "DRIVE_CREDENTIALS", "SMARTMINUTES_MOM_KEY_JSON"
            ),
        ),
        redis=RedisConfig(
            host=os.getenv("REDIS_HOST", "redis"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            transcript_ttl_seconds=int(
                os.getenv("REDIS_TRANSCRIPT_TTL_SECONDS", "86400")
            ),
        ),
        postgres=PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "postgres"),
            user=os.getenv("POSTGRES_USER", ""),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "smart_minutes"),
        ),
        corrections=CorrectionsConfig(
            rules_path=_path(
                "CORRECTION_RULES_PATH", RESOURCES_DIR / "correction_rules.json"
            ),
        ),
    )
