from __future__ import annotations

from dataclasses import dataclass
from typing import List

from reportlab.pdfbase.pdfmetrics import stringWidth


LINE_HEIGHT = 14.0
BOX_PADDING = 6.0
BOX_LABEL_HEIGHT = 16.0


@dataclass(frozen=True)
class FontSpec:
    name: str = "Helvetica"
    size: float = 10.0

    @classmethod
    def from_style(cls, entry: dict) -> "FontSpec":
        return cls(str(entry.get("font_name", "Helvetica")), float(entry.get("size", 10)))

    def width(self, text: str) -> float:
        return stringWidth(text, self.name, self.size)


def _hard_break(token: str, max_width: float, font: FontSpec) -> List[str]:
    pieces: List[str] = []
    cur = ""
    for ch in token:
        if cur and font.width(cur + ch) > max_width:
            pieces.append(cur)
            cur = ch
        else:
            cur += ch
    if cur:
        pieces.append(cur)
    return pieces


def _wrap_words(text: str, max_width: float, font: FontSpec) -> List[str]:
    """
    Word-boundary wrapping of one source line. A word wider than the line
    is split by characters; its last piece stays open for the next word.
    """
    words = text.split()
    if not words:
        return [""]

    lines: List[str] = []
    cur: List[str] = []

    for w in words:
        test = " ".join(cur + [w])
        if font.width(test) <= max_width:
            cur.append(w)
            continue

        if cur:
            lines.append(" ".join(cur))
            cur = []

        if font.width(w) <= max_width:
            cur = [w]
            continue

        pieces = _hard_break(w, max_width, font)
        lines.extend(pieces[:-1])
        cur = [pieces[-1]]

    if cur:
        lines.append(" ".join(cur))

    return lines


def wrap(text: str, max_width: float, font: FontSpec) -> List[str]:
    """Empty text yields a single empty line."""
    source = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    lines: List[str] = []
    for raw in source.split("\n"):
        lines.extend(_wrap_words(raw, max_width, font))
    return lines


def box_height(line_count: int, labelled: bool = True) -> float:
    header = BOX_LABEL_HEIGHT if labelled else 0.0
    return 2 * BOX_PADDING + header + LINE_HEIGHT * max(0, line_count)
