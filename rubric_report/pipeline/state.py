from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from slugify import slugify
from sqlmodel import select

from ..models import Assessment, DomainNote, get_session, init_db, utc_now
from .rubric import Level


NOTE_FIELDS = {"evidence", "next_steps"}


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one assessment's ratings and annotations by domain."""

    ratings: Dict[str, Level] = field(default_factory=dict)
    evidence: Dict[str, str] = field(default_factory=dict)
    next_steps: Dict[str, str] = field(default_factory=dict)


def slug_from_name(name: str) -> str:
    slug = slugify(name)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        slug = hashlib.md5(name.encode("utf-8")).hexdigest()[:12]
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from assessment name")
    return slug


def get_or_create_assessment(name: str) -> Assessment:
    init_db()
    name = name.strip()
    if not name:
        raise ValueError("Assessment name must not be empty")
    slug = slug_from_name(name)
    with get_session() as session:
        assessment = session.exec(select(Assessment).where(Assessment.slug == slug)).first()
        if assessment is None:
            assessment = Assessment(name=name, slug=slug)
            session.add(assessment)
            session.commit()
            session.refresh(assessment)
        return assessment


def _note(session, assessment: Assessment, domain: str) -> DomainNote:
    domain = domain.strip()
    if not domain:
        raise ValueError("Domain must not be empty")
    note = session.exec(
        select(DomainNote).where(
            DomainNote.assessment_id == assessment.id,
            DomainNote.domain == domain,
        )
    ).first()
    if note is None:
        note = DomainNote(assessment_id=assessment.id, domain=domain)
    return note


def set_rating(assessment: Assessment, domain: str, level: Optional[Level]) -> DomainNote:
    with get_session() as session:
        note = _note(session, assessment, domain)
        note.level = level
        note.updated_at = utc_now()
        session.add(note)
        session.commit()
        session.refresh(note)
        return note


def clear_rating(assessment: Assessment, domain: str) -> DomainNote:
    return set_rating(assessment, domain, None)


def set_note(assessment: Assessment, domain: str, field_name: str, text: str) -> DomainNote:
    if field_name not in NOTE_FIELDS:
        raise ValueError(f"Unknown note field: {field_name}")
    with get_session() as session:
        note = _note(session, assessment, domain)
        setattr(note, field_name, text or "")
        note.updated_at = utc_now()
        session.add(note)
        session.commit()
        session.refresh(note)
        return note


def load_snapshot(assessment: Assessment) -> Snapshot:
    with get_session() as session:
        notes = session.exec(select(DomainNote).where(DomainNote.assessment_id == assessment.id)).all()
    return Snapshot(
        ratings={n.domain: n.level for n in notes if n.level is not None},
        evidence={n.domain: n.evidence for n in notes if n.evidence},
        next_steps={n.domain: n.next_steps for n in notes if n.next_steps},
    )
