"""Repository for append-only minutes records."""

from sqlmodel import select

from smart_minutes.db_models import MinutesRecordRow
from smart_minutes.domain.models import MinutesEntry, MinutesRecord
from smart_minutes.exceptions import PersistenceError
from smart_minutes.logging import setup_logging

logger = setup_logging()


class MinutesRepository:
    """
    Appends and lists minutes records, namespaced by owning user.

    Records are never updated: every summarization invocation adds a new row
    with a generated summary id and a database-assigned creation time.
    """

    def __init__(self, session_factory):
        """
        Initializes the repository.

        Args:
            session_factory: Callable that returns a SQLModel Session context manager.
        """
        self._session_factory = session_factory

    def push(self, record: MinutesRecord) -> MinutesEntry:
        """
        Persists a new minutes record.

        Args:
            record: The record to append.

        Returns:
            The stored entry, including its generated key and timestamp.

        Raises:
            PersistenceError: If the write fails.
        """
        try:
            with self._session_factory() as db_session:
                row = MinutesRecordRow(
                    user_id=record.user_id,
                    session_id=record.session_id,
                    audio_file_name=record.audio_file_name,
                    links=dict(record.links),
                )
                db_session.add(row)
                db_session.commit()
                db_session.refresh(row)
                entry = self._to_entry(row)
        except Exception as e:
            logger.exception(
                "Failed to persist minutes record",
                extra={"session_id": record.session_id, "user_id": record.user_id},
            )
            raise PersistenceError(record.session_id, cause=e) from e

        logger.info(
            "Minutes record persisted",
            extra={
                "summary_id": entry.summary_id,
                "session_id": entry.session_id,
                "link_count": len(entry.links),
            },
        )
        return entry

    def list_all(self, user_id: str) -> list[MinutesEntry]:
        """Returns every record of a user in the order they were written."""
        with self._session_factory() as db_session:
            statement = (
                select(MinutesRecordRow)
                .where(MinutesRecordRow.user_id == user_id)
                .order_by(MinutesRecordRow.id)
            )
            return [self._to_entry(row) for row in db_session.exec(statement).all()]

    def _to_entry(self, row: MinutesRecordRow) -> MinutesEntry:
        return MinutesEntry(
            summary_id=row.summary_id,
            session_id=row.session_id,
            user_id=row.user_id,
            audio_file_name=row.audio_file_name,
            created_at=row.created_at,
            links=row.links or {},
        )
