from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Column, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON
from sqlmodel import Field, SQLModel


def _new_summary_id() -> str:
    return uuid4().hex


class MinutesRecordRow(SQLModel, table=True):
    __tablename__ = "minutes_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    summary_id: str = Field(default_factory=_new_summary_id, unique=True, max_length=32)
    user_id: str = Field(index=True, max_length=255)
    session_id: str = Field(max_length=255)
    audio_file_name: str = Field(max_length=1024)
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
    )
    links: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON().with_variant(JSONB, "postgresql"), nullable=False),
    )
