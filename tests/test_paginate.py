from __future__ import annotations

from pathlib import Path

import pytest

from rubric_report.config import CONTENT_WIDTH, LETTERHEAD_BOX, PAGE_BOTTOM_LIMIT, TOP_MARGIN
from rubric_report.pipeline.content import HighlightedBox, build_blocks
from rubric_report.pipeline.measure import box_height
from rubric_report.pipeline.paginate import Paginator
from rubric_report.pipeline.rubric import Level, RubricRecord
from rubric_report.pipeline.render_pdf import PdfSink
from rubric_report.pipeline.sink import DrawImage, DrawRect, DrawText

LETTERHEAD = Path("letterhead.png")


def _records(count: int) -> list[RubricRecord]:
    return [
        RubricRecord(
            domain=f"Domain {i}",
            indicators="Leaders set a clear curriculum intent and staff share a common language for it. " * 2,
            levels={level: f"{level.value} practice is visible across most classrooms and phases." for level in Level},
        )
        for i in range(count)
    ]


def _rich_blocks(count: int = 20):
    records = _records(count)
    ratings = {r.domain: list(Level)[i % 4] for i, r in enumerate(records)}
    evidence = {r.domain: "- Used exemplars\n- Learning walk notes from the spring term" for r in records}
    next_steps = {r.domain: "Share practice at the next staff meeting" for r in records}
    return build_blocks(records, ratings, evidence, next_steps)


def _layout(blocks):
    sink = PdfSink()
    placements = Paginator(sink, LETTERHEAD).layout(blocks)
    return sink, placements


def test_rich_document_breaks_onto_new_pages() -> None:
    sink, placements = _layout(_rich_blocks())
    assert sink.page_count() > 1
    assert max(p.page_index for p in placements) == sink.page_count() - 1


def test_every_page_starts_with_letterhead() -> None:
    sink, _ = _layout(_rich_blocks())
    for page in sink.pages:
        first = page.commands[0]
        assert isinstance(first, DrawImage)
        assert (first.x, first.y, first.w, first.h) == LETTERHEAD_BOX
        assert first.image == LETTERHEAD
        assert sum(isinstance(cmd, DrawImage) for cmd in page.commands) == 1


def test_no_unit_crosses_page_bottom() -> None:
    _, placements = _layout(_rich_blocks())
    assert placements
    for placement in placements:
        assert placement.y >= TOP_MARGIN
        assert placement.bottom <= PAGE_BOTTOM_LIMIT


def test_unit_after_break_starts_at_top_margin() -> None:
    _, placements = _layout(_rich_blocks())
    firsts = {}
    for placement in placements:
        firsts.setdefault(placement.page_index, placement)
    assert len(firsts) > 1
    for placement in firsts.values():
        assert placement.y == TOP_MARGIN


def test_all_content_is_drawn_once() -> None:
    blocks = _rich_blocks()
    sink, _ = _layout(blocks)
    texts = [text for page in sink.pages for text in page.texts()]
    assert sum(text.startswith("Rating: ") for text in texts) == 20
    assert sum(text == "Evidence:" for text in texts) == 20
    assert sum(text == "• Used exemplars" for text in texts) == 20
    assert [t for t in texts if t.startswith("Domain ")] == [f"Domain {i}" for i in range(20)]


def test_heading_is_kept_with_its_rule() -> None:
    _, placements = _layout(_rich_blocks())
    for current, following in zip(placements, placements[1:]):
        if current.kind == "heading":
            assert following.kind == "rule"
            assert following.page_index == current.page_index


def test_long_heading_wraps_within_content_width() -> None:
    domain = " ".join(["Curriculum leadership and the sequencing of subject knowledge"] * 3)
    record = RubricRecord(domain=domain, indicators="Intent is shared.", levels={level: "Visible." for level in Level})
    sink = PdfSink()
    paginator = Paginator(sink, LETTERHEAD)
    placements = paginator.layout(build_blocks([record], {}, {}, {}))

    lines = [
        cmd.text for cmd in sink.pages[0].commands if isinstance(cmd, DrawText) and cmd.style == paginator.heading_style
    ]
    assert len(lines) > 1
    assert all(paginator.heading_font.width(line) <= CONTENT_WIDTH for line in lines)
    assert " ".join(lines) == domain

    kinds = [p.kind for p in placements]
    last_heading = len(lines) - 1
    assert kinds[: len(lines)] == ["heading"] * len(lines)
    assert kinds[last_heading + 1] == "rule"
    assert placements[last_heading + 1].page_index == placements[last_heading].page_index


def test_highlight_only_for_rated_domains() -> None:
    records = _records(2)
    blocks = build_blocks(records, {"Domain 0": Level.EXCELLING}, {}, {})
    sink, _ = _layout(blocks)
    rects = [cmd for page in sink.pages for cmd in page.commands if isinstance(cmd, DrawRect)]
    assert len(rects) == 1
    texts = sink.pages[0].texts()
    assert "Rating: Excelling" in texts
    assert "Rating: Not rated" in texts


def test_box_fill_is_drawn_before_its_text() -> None:
    blocks = build_blocks(_records(1), {"Domain 0": Level.EMBEDDING}, {}, {})
    sink, _ = _layout(blocks)
    commands = sink.pages[0].commands
    rect_at = next(i for i, cmd in enumerate(commands) if isinstance(cmd, DrawRect))
    label_at = next(i for i, cmd in enumerate(commands) if isinstance(cmd, DrawText) and cmd.text.startswith("Rating:"))
    assert rect_at < label_at


def test_box_that_does_not_fit_moves_whole_to_next_page() -> None:
    sink = PdfSink()
    paginator = Paginator(sink, LETTERHEAD)
    paginator.layout([])
    paginator.cursor.y = PAGE_BOTTOM_LIMIT - 30
    height = box_height(3)
    paginator.place(HighlightedBox("Rating: Emerging", "one two three", True, height))
    box = [p for p in paginator.placements if p.kind == "box"]
    assert len(box) == 1
    assert box[0].page_index == 1
    assert box[0].y == TOP_MARGIN
    assert sink.page_count() == 2
    assert sink.pages[0].texts() == []


def test_box_taller_than_a_page_is_split() -> None:
    description = "\n".join(f"Descriptor line {i}" for i in range(120))
    records = [RubricRecord("Huge", "Short", {Level.EXCELLING: description})]
    blocks = build_blocks(records, {"Huge": Level.EXCELLING}, {}, {})
    sink, placements = _layout(blocks)
    boxes = [p for p in placements if p.kind == "box"]
    assert len(boxes) >= 2
    assert len({p.page_index for p in boxes}) == len(boxes)
    assert all(p.bottom <= PAGE_BOTTOM_LIMIT for p in placements)
    texts = [text for page in sink.pages for text in page.texts()]
    assert texts.count("Rating: Excelling") == 1
    assert [t for t in texts if t.startswith("Descriptor line")] == [f"Descriptor line {i}" for i in range(120)]
    rects = [cmd for page in sink.pages for cmd in page.commands if isinstance(cmd, DrawRect)]
    assert len(rects) == len(boxes)


def test_layout_is_deterministic() -> None:
    first_sink, first = _layout(_rich_blocks())
    second_sink, second = _layout(_rich_blocks())
    assert first == second
    assert first_sink.page_count() == second_sink.page_count()
    assert [p.commands for p in first_sink.pages] == [p.commands for p in second_sink.pages]


def test_separate_paginators_do_not_share_state() -> None:
    big_sink, _ = _layout(_rich_blocks())
    small_sink, small = _layout(build_blocks(_records(1), {}, {}, {}))
    assert big_sink.page_count() > 1
    assert small_sink.page_count() == 1
    assert all(p.page_index == 0 for p in small)


def test_empty_document_has_letterhead_page() -> None:
    sink, placements = _layout([])
    assert sink.page_count() == 1
    assert placements == []
    assert isinstance(sink.pages[0].commands[0], DrawImage)


def test_paginator_is_single_use() -> None:
    paginator = Paginator(PdfSink(), LETTERHEAD)
    paginator.layout([])
    with pytest.raises(RuntimeError):
        paginator.layout([])
