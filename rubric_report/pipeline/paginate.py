from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config import (
    CONTENT_WIDTH,
    LEFT_MARGIN,
    LETTERHEAD_BOX,
    PAGE_BOTTOM_LIMIT,
    TOP_MARGIN,
    load_style_preset,
)
from .content import (
    BOX_INSET,
    BulletList,
    ContentBlock,
    Heading,
    HighlightedBox,
    Paragraph,
    Rule,
    box_lines,
)
from .measure import BOX_LABEL_HEIGHT, BOX_PADDING, LINE_HEIGHT, FontSpec, box_height, wrap
from .sink import DocumentSink, TextStyle


logger = logging.getLogger(__name__)

HEADING_RESERVE = 60.0  # heading, its rule and the first line below
HEADING_ADVANCE = 10.0
HEADING_LINE = 18.0
RULE_ADVANCE = 18.0
LIST_TITLE_RESERVE = 20.0
LIST_TITLE_ADVANCE = 14.0
BULLET_RESERVE = 18.0
BULLET_ADVANCE = 16.0
BULLET_INDENT = 8.0
BULLET = "•"


@dataclass
class LayoutCursor:
    page_index: int = 0
    y: float = TOP_MARGIN


@dataclass(frozen=True)
class Placement:
    page_index: int
    y: float
    height: float
    kind: str

    @property
    def bottom(self) -> float:
        return self.y + self.height


class Paginator:
    """
    Flows content blocks down fixed-size pages.

    Every atomic unit (one wrapped line, a rule, a rating box, a bullet
    line) is checked against the page bottom before it is drawn; if it does
    not fit, a new page with the letterhead is started and the unit goes
    there whole. One Paginator lays out one document.
    """

    def __init__(
        self,
        sink: DocumentSink,
        letterhead: Path,
        style: Optional[dict] = None,
    ) -> None:
        self.sink = sink
        self.letterhead = letterhead
        self.style = style or load_style_preset()
        self.cursor = LayoutCursor()
        self.placements: List[Placement] = []
        self._started = False

        self.heading_style = TextStyle.from_style(self.style["heading"])
        self.body_style = TextStyle.from_style(self.style["body"])
        self.bold_style = TextStyle.from_style(self.style["body_bold"])
        self.label_style = TextStyle.from_style(self.style["rating_label"])
        self.rating_style = TextStyle.from_style(self.style["rating_text"])
        self.heading_font = FontSpec.from_style(self.style["heading"])
        self.body_font = FontSpec.from_style(self.style["body"])
        self.bold_font = FontSpec.from_style(self.style["body_bold"])
        self.rating_font = FontSpec.from_style(self.style["rating_text"])

    @property
    def usable_height(self) -> float:
        return PAGE_BOTTOM_LIMIT - TOP_MARGIN

    # -------------------- pages --------------------
    def _start_page(self) -> None:
        self.sink.new_page()
        x, y, w, h = LETTERHEAD_BOX
        self.sink.draw_image(self.letterhead, x, y, w, h)
        self.cursor.page_index = self.sink.page_count() - 1
        self.cursor.y = TOP_MARGIN

    def _page_break(self) -> None:
        logger.debug("Page break after page %d at y=%.1f", self.cursor.page_index + 1, self.cursor.y)
        self._start_page()

    def _unit(self, kind: str, needed: float) -> float:
        if self.cursor.y + needed > PAGE_BOTTOM_LIMIT:
            self._page_break()
        self.placements.append(Placement(self.cursor.page_index, self.cursor.y, needed, kind))
        return self.cursor.y

    # -------------------- blocks --------------------
    def _place_heading(self, block: Heading) -> None:
        lines = wrap(block.text, CONTENT_WIDTH, self.heading_font)
        for line in lines[:-1]:
            y = self._unit("heading", HEADING_LINE)
            self.sink.draw_text(line, LEFT_MARGIN, y, self.heading_style)
            self.cursor.y += HEADING_LINE
        # the last line carries the reserve for the rule below it
        y = self._unit("heading", HEADING_RESERVE)
        self.sink.draw_text(lines[-1], LEFT_MARGIN, y, self.heading_style)
        self.cursor.y += HEADING_ADVANCE

    def _place_rule(self, block: Rule) -> None:
        y = self._unit("rule", RULE_ADVANCE)
        self.sink.draw_line(LEFT_MARGIN, y, LEFT_MARGIN + CONTENT_WIDTH, y, str(self.style["rule_color"]))
        self.cursor.y += RULE_ADVANCE

    def _place_paragraph(self, block: Paragraph) -> None:
        style = self.bold_style if block.emphasis else self.body_style
        font = self.bold_font if block.emphasis else self.body_font
        if block.color:
            style = TextStyle(style.font_name, style.size, block.color)
        for line in wrap(block.text, CONTENT_WIDTH, font):
            y = self._unit("line", LINE_HEIGHT)
            self.sink.draw_text(line, LEFT_MARGIN, y, style)
            self.cursor.y += LINE_HEIGHT

    def _draw_box(self, label: Optional[str], lines: Sequence[str], highlighted: bool, height: float) -> None:
        y = self._unit("box", height)
        if highlighted:
            self.sink.draw_rect(LEFT_MARGIN, y, CONTENT_WIDTH, height, str(self.style["box_fill"]))
        x = LEFT_MARGIN + BOX_INSET
        header = 0.0
        if label:
            self.sink.draw_text(label, x, y + BOX_PADDING + 12, self.label_style)
            header = BOX_LABEL_HEIGHT
        for i, line in enumerate(lines):
            baseline = y + BOX_PADDING + header + LINE_HEIGHT * (i + 1) - 4
            self.sink.draw_text(line, x, baseline, self.rating_style)
        self.cursor.y += height

    def _place_box(self, block: HighlightedBox) -> None:
        lines = box_lines(block.description, self.rating_font)
        if block.height_estimate <= self.usable_height:
            self._draw_box(block.label, lines, block.highlighted, block.height_estimate)
            return

        # Taller than a whole page: start clean and continue the box on as
        # many pages as needed, one segment per page.
        if self.cursor.y > TOP_MARGIN:
            self._page_break()
        logger.info("Rating box for %r spans more than one page; splitting", block.label)
        label: Optional[str] = block.label
        remaining = list(lines)
        while True:
            room = PAGE_BOTTOM_LIMIT - self.cursor.y - box_height(0, labelled=label is not None)
            capacity = max(1, int(room // LINE_HEIGHT))
            chunk, remaining = remaining[:capacity], remaining[capacity:]
            self._draw_box(label, chunk, block.highlighted, box_height(len(chunk), labelled=label is not None))
            if not remaining:
                break
            self._page_break()
            label = None

    def _place_list(self, block: BulletList) -> None:
        y = self._unit("list_title", LIST_TITLE_RESERVE)
        self.sink.draw_text(block.title, LEFT_MARGIN, y, self.bold_style)
        self.cursor.y += LIST_TITLE_ADVANCE

        hang = self.body_font.width(f"{BULLET} ")
        x = LEFT_MARGIN + BULLET_INDENT
        width = CONTENT_WIDTH - BULLET_INDENT - hang
        for item in block.items:
            for i, line in enumerate(wrap(item, width, self.body_font)):
                y = self._unit("bullet", BULLET_RESERVE)
                if i == 0:
                    self.sink.draw_text(f"{BULLET} {line}", x, y, self.body_style)
                else:
                    self.sink.draw_text(line, x + hang, y, self.body_style)
                self.cursor.y += BULLET_ADVANCE

    def place(self, block: ContentBlock) -> None:
        if isinstance(block, Heading):
            self._place_heading(block)
        elif isinstance(block, Rule):
            self._place_rule(block)
        elif isinstance(block, Paragraph):
            self._place_paragraph(block)
        elif isinstance(block, HighlightedBox):
            self._place_box(block)
        elif isinstance(block, BulletList):
            self._place_list(block)
        else:
            raise TypeError(f"Unsupported block: {type(block).__name__}")
        self.cursor.y += block.gap_after

    def layout(self, blocks: Iterable[ContentBlock]) -> List[Placement]:
        if self._started:
            raise RuntimeError("Paginator already used; create a new one per document")
        self._started = True
        self._start_page()
        for block in blocks:
            self.place(block)
        logger.info("Laid out %d pages", self.sink.page_count())
        return self.placements
