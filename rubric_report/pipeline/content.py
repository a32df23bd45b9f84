from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from ..config import CONTENT_WIDTH, load_style_preset
from .measure import FontSpec, box_height, wrap
from .rubric import Level, RubricRecord, rating_label


PARAGRAPH_GAP = 10.0
BOX_GAP = 12.0
LIST_GAP = 8.0
RECORD_GAP = 20.0
BOX_INSET = 8.0
BOX_TEXT_WIDTH = CONTENT_WIDTH - 2 * BOX_INSET

_LIST_MARKER = re.compile(r"^[-*+]\s+")


@dataclass(frozen=True)
class Heading:
    text: str
    gap_after: float = 0.0


@dataclass(frozen=True)
class Rule:
    gap_after: float = 0.0


@dataclass(frozen=True)
class Paragraph:
    text: str
    emphasis: bool = False
    color: Optional[str] = None
    gap_after: float = PARAGRAPH_GAP


@dataclass(frozen=True)
class HighlightedBox:
    label: str
    description: str
    highlighted: bool
    height_estimate: float
    gap_after: float = BOX_GAP


@dataclass(frozen=True)
class BulletList:
    title: str
    items: Tuple[str, ...]
    gap_after: float = LIST_GAP


ContentBlock = Union[Heading, Rule, Paragraph, HighlightedBox, BulletList]


def box_lines(description: str, font: FontSpec) -> List[str]:
    if not description.strip():
        return []
    return wrap(description, BOX_TEXT_WIDTH, font)


def bullet_items(text: str) -> Tuple[str, ...]:
    items = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        # a bare marker is kept as written
        items.append(_LIST_MARKER.sub("", line).strip() or line)
    return tuple(items)


def _record_blocks(
    record: RubricRecord,
    level: Optional[Level],
    evidence: str,
    next_steps: str,
    box_font: FontSpec,
) -> List[ContentBlock]:
    description = record.description_for(level)
    blocks: List[ContentBlock] = [
        Heading(record.domain),
        Rule(),
        Paragraph(f"Indicators: {record.indicators}"),
        HighlightedBox(
            label=f"Rating: {rating_label(level)}",
            description=description,
            highlighted=level is not None,
            height_estimate=box_height(len(box_lines(description, box_font))),
        ),
    ]
    for title, text in (("Evidence:", evidence), ("Next Steps:", next_steps)):
        if text.strip():
            blocks.append(BulletList(title, bullet_items(text)))

    last = blocks[-1]
    blocks[-1] = replace(last, gap_after=last.gap_after + RECORD_GAP)
    return blocks


def build_blocks(
    records: Sequence[RubricRecord],
    ratings: Mapping[str, Level],
    evidence: Mapping[str, str],
    next_steps: Mapping[str, str],
    style: Optional[dict] = None,
) -> List[ContentBlock]:
    """
    Turn rubric records plus the rating/annotation snapshot into an ordered
    list of layout blocks. Records without a domain produce nothing.
    """
    style = style or load_style_preset()
    box_font = FontSpec.from_style(style["rating_text"])
    blocks: List[ContentBlock] = []
    for record in records:
        domain = (record.domain or "").strip()
        if not domain:
            continue
        blocks.extend(
            _record_blocks(
                record,
                ratings.get(domain),
                evidence.get(domain, "") or "",
                next_steps.get(domain, "") or "",
                box_font,
            )
        )
    return blocks
