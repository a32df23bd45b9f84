from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..config import FOOTER_ANCHOR, load_style_preset
from .sink import DocumentSink, DrawImage, DrawLine, DrawRect, DrawText, Page, TextStyle


logger = logging.getLogger(__name__)


def _hex(value: str, default=colors.black) -> colors.Color:
    if not value:
        return default
    try:
        return colors.HexColor("#" + str(value).lstrip("#"))
    except ValueError:
        return default


def load_image(path: Path) -> ImageReader:
    if not Path(path).exists():
        raise FileNotFoundError(f"Letterhead not found: {path}")
    try:
        reader = ImageReader(str(path))
        reader.getSize()
    except Exception as exc:
        raise ValueError(f"Letterhead could not be read: {path}") from exc
    return reader


def _draw_text(canv: canvas.Canvas, cmd: DrawText, ph: float) -> None:
    canv.setFont(cmd.style.font_name, cmd.style.size)
    canv.setFillColor(_hex(cmd.style.color))
    canv.drawString(cmd.x, ph - cmd.y, cmd.text)


def _draw_page(
    canv: canvas.Canvas,
    page: Page,
    images: Dict[Path, ImageReader],
    footer_style: TextStyle,
    ph: float,
) -> None:
    for cmd in page.commands:
        if isinstance(cmd, DrawText):
            _draw_text(canv, cmd, ph)
        elif isinstance(cmd, DrawLine):
            canv.setStrokeColor(_hex(cmd.color))
            canv.setLineWidth(1)
            canv.line(cmd.x1, ph - cmd.y1, cmd.x2, ph - cmd.y2)
        elif isinstance(cmd, DrawRect):
            canv.setFillColor(_hex(cmd.fill))
            canv.rect(cmd.x, ph - cmd.y - cmd.h, cmd.w, cmd.h, stroke=0, fill=1)
        elif isinstance(cmd, DrawImage):
            reader = images.get(cmd.image)
            if reader is None:
                reader = images[cmd.image] = load_image(cmd.image)
            canv.drawImage(reader, cmd.x, ph - cmd.y - cmd.h, width=cmd.w, height=cmd.h, mask="auto")

    if page.footer:
        x, y = FOOTER_ANCHOR
        _draw_text(canv, DrawText(page.footer, x, y, footer_style), ph)


def render_pdf(
    pages: Sequence[Page],
    output_path: Path,
    page_size: Tuple[float, float] = A4,
    style: Optional[dict] = None,
    title: str = "Curriculum Rubric Summary",
) -> Path:
    style = style or load_style_preset()
    footer_style = TextStyle.from_style(style["footer"])
    _, ph = page_size

    output_path.parent.mkdir(parents=True, exist_ok=True)
    canv = canvas.Canvas(str(output_path), pagesize=page_size)
    canv.setTitle(title)

    # one reader per image for the whole document
    images: Dict[Path, ImageReader] = {}
    for page in pages:
        _draw_page(canv, page, images, footer_style, ph)
        canv.showPage()

    canv.save()
    logger.info("Wrote %d pages to %s", len(pages), output_path)
    return output_path


class PdfSink(DocumentSink):
    def __init__(self, style: Optional[dict] = None) -> None:
        super().__init__()
        self.style = style

    def export(self, output_path: Path) -> Path:
        return render_pdf(self.pages, output_path, style=self.style)
