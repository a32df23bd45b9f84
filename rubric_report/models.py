from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel, Session, create_engine

from . import config
from .pipeline.rubric import Level


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Assessment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    created_at: datetime = Field(default_factory=utc_now)


class DomainNote(SQLModel, table=True):
    """Rating and annotations for one rubric domain, keyed by domain name."""

    id: Optional[int] = Field(default=None, primary_key=True)
    assessment_id: int = Field(foreign_key="assessment.id", index=True)
    domain: str = Field(index=True)
    level: Optional[Level] = None
    evidence: str = ""
    next_steps: str = ""
    updated_at: datetime = Field(default_factory=utc_now)


class Artifact(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    assessment_id: int = Field(foreign_key="assessment.id")
    type: str
    path: str
    created_at: datetime = Field(default_factory=utc_now)


engine = create_engine(f"sqlite:///{config.DB_PATH}")


def reset_engine() -> None:
    global engine
    engine = create_engine(f"sqlite:///{config.DB_PATH}")


def init_db() -> None:
    config.OUT_DIR.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine, expire_on_commit=False)
