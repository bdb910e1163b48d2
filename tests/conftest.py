from contextlib import contextmanager
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from smart_minutes import db_models  # noqa: F401  registers the table
from smart_minutes.domain import (
    FileCorrectionRuleSource,
    SummaryTemplate,
    TranscriptBuilder,
    TranscriptCorrector,
)
from smart_minutes.handlers import (
    AudioIngestor,
    DocumentPublisher,
    MinutesPipeline,
    RecognitionSettings,
    SummarizationFanOut,
    TranscriptionOrchestrator,
)
from smart_minutes.repositories import MinutesRepository

from fakes import (
    FIXED_NOW,
    FakeDocumentHost,
    FakeLLM,
    FakeRecognizer,
    FakeStorage,
    InMemoryTranscriptStore,
)


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    path = tmp_path / "rules.json"
    path.write_text(
        '{"version": "test-1", "rules": ['
        '{"pattern": "young", "replacement": "Yoong"},'
        '{"pattern": "agender", "replacement": "agenda"}'
        "]}",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def corrector(rules_file: Path) -> TranscriptCorrector:
    return TranscriptCorrector(FileCorrectionRuleSource(rules_file))


@pytest.fixture
def templates() -> list[SummaryTemplate]:
    return [
        SummaryTemplate(name="formal", field_key="formalMinutesLink", instruction="FORMAL:"),
        SummaryTemplate(name="actions", field_key="actionItemsLink", instruction="ACTIONS:"),
        SummaryTemplate(name="brief", field_key="briefLink", instruction="BRIEF:"),
    ]


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'minutes.db'}",
        connect_args={"check_same_thread": False, "timeout": 10},
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def repository(engine) -> MinutesRepository:
    @contextmanager
    def session_factory():
        with Session(engine) as session:
            yield session

    return MinutesRepository(session_factory)


@pytest.fixture
def recognition_settings() -> RecognitionSettings:
    return RecognitionSettings(
        primary_language="en",
        fallback_languages=("es",),
        expected_speakers=3,
        poll_interval_seconds=0.01,
        timeout_seconds=2.0,
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def document_host() -> FakeDocumentHost:
    return FakeDocumentHost()


@pytest.fixture
def transcript_store() -> InMemoryTranscriptStore:
    return InMemoryTranscriptStore()


@pytest.fixture
def publisher(document_host) -> DocumentPublisher:
    return DocumentPublisher(document_host, "folder-123", clock=lambda: FIXED_NOW)


@pytest.fixture
def fan_out(llm, publisher, templates) -> SummarizationFanOut:
    return SummarizationFanOut(llm, publisher, templates, "SYSTEM", 0.2)


@pytest.fixture
def orchestrator(storage, recognizer, corrector, recognition_settings) -> TranscriptionOrchestrator:
    return TranscriptionOrchestrator(
        storage, recognizer, TranscriptBuilder(), corrector, recognition_settings
    )


@pytest.fixture
def pipeline(storage, orchestrator, fan_out, repository, transcript_store) -> MinutesPipeline:
    return MinutesPipeline(
        AudioIngestor(storage, "smart-minutes"),
        orchestrator,
        fan_out,
        repository,
        transcript_store,
    )
