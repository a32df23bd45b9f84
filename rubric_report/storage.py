from __future__ import annotations

from pathlib import Path
from typing import Iterable

from . import config
from .models import Artifact, Assessment, get_session


ARTIFACT_NAMES = {
    "pdf": config.EXPORT_FILENAME,
    "preview_1": "preview_1.png",
    "preview_2": "preview_2.png",
    "preview_3": "preview_3.png",
    "error": "error.log",
}


def assessment_dir(slug: str, base_dir: Path | None = None, include_slug: bool = True) -> Path:
    root = base_dir or config.OUT_DIR
    path = root / slug if include_slug else root
    path.mkdir(parents=True, exist_ok=True)
    return path


def artifact_path(
    slug: str,
    artifact_type: str,
    base_dir: Path | None = None,
    include_slug: bool = True,
) -> Path:
    filename = ARTIFACT_NAMES[artifact_type]
    return assessment_dir(slug, base_dir=base_dir, include_slug=include_slug) / filename


def record_artifacts(assessment: Assessment, artifacts: Iterable[tuple[str, Path]]) -> None:
    with get_session() as session:
        for artifact_type, path in artifacts:
            session.add(
                Artifact(
                    assessment_id=assessment.id,
                    type=artifact_type,
                    path=str(path.relative_to(config.OUT_DIR)),
                )
            )
        session.commit()
