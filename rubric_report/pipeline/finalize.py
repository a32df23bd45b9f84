from __future__ import annotations

from typing import Sequence

from .sink import Page


def page_label(number: int, total: int) -> str:
    return f"Page {number} of {total}"


def finalize(pages: Sequence[Page]) -> None:
    """Stamp each page's footer slot once the total page count is known."""
    total = len(pages)
    for number, page in enumerate(pages, start=1):
        page.footer = page_label(number, total)
