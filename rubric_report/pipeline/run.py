from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .. import config
from ..models import init_db
from ..storage import artifact_path, record_artifacts
from .content import build_blocks
from .finalize import finalize
from .ingest import load_rubric
from .paginate import Paginator, Placement
from .render_pdf import PdfSink, load_image
from .render_preview import render_previews
from .rubric import RubricRecord
from .sink import DocumentSink
from .state import Snapshot, get_or_create_assessment, load_snapshot


logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    slug: str
    pdf: Path
    page_count: int
    previews: List[Path] = field(default_factory=list)


def layout_document(
    records: Sequence[RubricRecord],
    snapshot: Snapshot,
    letterhead: Path,
    sink: Optional[DocumentSink] = None,
    style: Optional[dict] = None,
) -> Tuple[DocumentSink, List[Placement]]:
    """Build blocks, paginate them onto a fresh sink and stamp page numbers."""
    style = style or config.load_style_preset()
    blocks = build_blocks(records, snapshot.ratings, snapshot.evidence, snapshot.next_steps, style=style)
    sink = sink if sink is not None else PdfSink(style=style)
    placements = Paginator(sink, letterhead, style=style).layout(blocks)
    finalize(sink.pages)
    return sink, placements


def _write_error(slug: str, message: str) -> None:
    error_path = artifact_path(slug, "error", base_dir=config.OUT_DIR)
    error_path.write_text(message, encoding="utf-8")


def _prepare_temp_dir(slug: str) -> Path:
    temp_dir = config.OUT_DIR / f"{slug}.tmp"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _finalize_artifacts(
    temp_dir: Path,
    final_dir: Path,
    artifacts: List[tuple[str, Path]],
) -> List[tuple[str, Path]]:
    # the finished export replaces the whole folder, stale error.log included
    if final_dir.exists():
        shutil.rmtree(final_dir)
    temp_dir.replace(final_dir)
    return [(artifact_type, final_dir / path.relative_to(temp_dir)) for artifact_type, path in artifacts]


def export_assessment(
    name: str,
    csv_path: Path,
    letterhead: Optional[Path] = None,
    preview: bool = False,
) -> ExportResult:
    init_db()
    assessment = get_or_create_assessment(name)
    letterhead = letterhead or config.LETTERHEAD_PATH
    slug = assessment.slug
    temp_dir = _prepare_temp_dir(slug)
    try:
        load_image(letterhead)
        records = load_rubric(csv_path)
        sink, _ = layout_document(records, load_snapshot(assessment), letterhead)
        pdf_path = sink.export(artifact_path(slug, "pdf", base_dir=temp_dir, include_slug=False))
        previews = render_previews(slug, pdf_path, base_dir=temp_dir, include_slug=False) if preview else []
    except Exception as exc:
        logger.exception("Export failed for %s", slug)
        shutil.rmtree(temp_dir, ignore_errors=True)
        # an earlier PDF must not sit next to the error of a newer attempt
        shutil.rmtree(config.OUT_DIR / slug, ignore_errors=True)
        _write_error(slug, str(exc))
        raise

    artifacts = [("pdf", pdf_path)] + [(f"preview_{i}", p) for i, p in enumerate(previews, start=1)]
    artifacts = _finalize_artifacts(temp_dir, config.OUT_DIR / slug, artifacts)
    record_artifacts(assessment, artifacts)
    pdf_path, previews = artifacts[0][1], [path for _, path in artifacts[1:]]
    logger.info("Exported %s (%d pages)", pdf_path, sink.page_count())
    return ExportResult(slug, pdf_path, sink.page_count(), previews)
