from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union


@dataclass(frozen=True)
class TextStyle:
    font_name: str = "Helvetica"
    size: float = 10.0
    color: str = "000000"

    @classmethod
    def from_style(cls, entry: dict) -> "TextStyle":
        return cls(
            font_name=str(entry.get("font_name", "Helvetica")),
            size=float(entry.get("size", 10)),
            color=str(entry.get("color", "000000")),
        )


@dataclass(frozen=True)
class DrawText:
    text: str
    x: float
    y: float
    style: TextStyle


@dataclass(frozen=True)
class DrawLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str


@dataclass(frozen=True)
class DrawRect:
    x: float
    y: float
    w: float
    h: float
    fill: str


@dataclass(frozen=True)
class DrawImage:
    image: Path
    x: float
    y: float
    w: float
    h: float


DrawCommand = Union[DrawText, DrawLine, DrawRect, DrawImage]


@dataclass
class Page:
    commands: List[DrawCommand] = field(default_factory=list)
    footer: str = ""

    def texts(self) -> List[str]:
        return [cmd.text for cmd in self.commands if isinstance(cmd, DrawText)]


class DocumentSink(ABC):
    """
    Receives draw commands and keeps every page in memory until export.
    Coordinates are points from the top-left corner of the page. Pages stay
    editable until export so the footer can be stamped last; subclasses
    decide how the finished pages are written out.
    """

    def __init__(self) -> None:
        self.pages: List[Page] = []
        self._current = -1

    def new_page(self) -> Page:
        self.pages.append(Page())
        self._current = len(self.pages) - 1
        return self.pages[self._current]

    def page_count(self) -> int:
        return len(self.pages)

    def select_page(self, number: int) -> Page:
        # 1-based, matching how pages are numbered on paper
        if not 1 <= number <= len(self.pages):
            raise IndexError(f"No page {number} (document has {len(self.pages)})")
        self._current = number - 1
        return self.pages[self._current]

    @property
    def current(self) -> Page:
        if self._current < 0:
            raise IndexError("No page has been started")
        return self.pages[self._current]

    def draw_text(self, text: str, x: float, y: float, style: TextStyle) -> None:
        self.current.commands.append(DrawText(text, x, y, style))

    def draw_line(self, x1: float, y1: float, x2: float, y2: float, color: str) -> None:
        self.current.commands.append(DrawLine(x1, y1, x2, y2, color))

    def draw_rect(self, x: float, y: float, w: float, h: float, fill: str) -> None:
        self.current.commands.append(DrawRect(x, y, w, h, fill))

    def draw_image(self, image: Path, x: float, y: float, w: float, h: float) -> None:
        self.current.commands.append(DrawImage(image, x, y, w, h))

    @abstractmethod
    def export(self, output_path: Path) -> Path:
        """Write all pages to output_path and return it."""
