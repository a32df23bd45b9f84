from __future__ import annotations

import tempfile
from pathlib import Path

from rubric_report.pipeline.render_preview import render_previews


class DummyRect:
    width = 595.0
    height = 842.0


class DummyPixmap:
    def save(self, path: str) -> None:
        Path(path).write_text("preview", encoding="utf-8")


class DummyPage:
    rect = DummyRect()

    def get_pixmap(self, matrix=None, alpha=True) -> DummyPixmap:  # noqa: ARG002 - signature matches fitz
        return DummyPixmap()


class DummyDoc:
    def __init__(self, page_count: int) -> None:
        self.page_count = page_count
        self.closed = False

    def __enter__(self) -> "DummyDoc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001 - test helper
        self.closed = True

    def load_page(self, index: int) -> DummyPage:  # noqa: ARG002 - test helper
        return DummyPage()


def test_render_previews_closes_document(monkeypatch) -> None:
    doc = DummyDoc(page_count=5)

    def fake_open(path: str) -> DummyDoc:  # noqa: ARG001 - test helper
        return doc

    with tempfile.TemporaryDirectory() as temp_dir:
        monkeypatch.setattr("rubric_report.pipeline.render_preview.fitz.open", fake_open)
        previews = render_previews("sample", Path("sample.pdf"), base_dir=Path(temp_dir))
        assert doc.closed is True
        assert [p.name for p in previews] == ["preview_1.png", "preview_2.png", "preview_3.png"]
        assert all(path.exists() for path in previews)


def test_render_previews_short_document(monkeypatch) -> None:
    doc = DummyDoc(page_count=1)
    monkeypatch.setattr("rubric_report.pipeline.render_preview.fitz.open", lambda path: doc)
    with tempfile.TemporaryDirectory() as temp_dir:
        previews = render_previews("sample", Path("sample.pdf"), base_dir=Path(temp_dir))
        assert len(previews) == 1
