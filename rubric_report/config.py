from __future__ import annotations

from pathlib import Path
import json


PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "rubric.db"
BRAND_DIR = PACKAGE_DIR / "assets" / "brand"
STYLE_PRESET_PATH = BRAND_DIR / "template_styles.json"
LETTERHEAD_PATH = BRAND_DIR / "letterhead.png"

EXPORT_FILENAME = "Curriculum_Rubric_Summary.pdf"
NOT_RATED_LABEL = "Not rated"

# Page geometry in points, measured from the top-left corner of an A4 page.
LEFT_MARGIN = 50.0
CONTENT_WIDTH = 440.0
TOP_MARGIN = 90.0
PAGE_BOTTOM_LIMIT = 750.0
LETTERHEAD_BOX = (50.0, 20.0, 140.0, 40.0)
FOOTER_ANCHOR = (500.0, 820.0)

DEFAULT_ASSESSMENT = "default"


def load_style_preset() -> dict:
    with STYLE_PRESET_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "rubric.db"
