from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional

from ..config import NOT_RATED_LABEL


class Level(str, Enum):
    EMERGING = "Emerging"
    DEVELOPING = "Developing"
    EMBEDDING = "Embedding"
    EXCELLING = "Excelling"

    @property
    def column(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["Level"]:
        """Case-insensitive lookup. Blank text means "not rated"."""
        name = (text or "").strip().lower()
        if not name:
            return None
        for level in cls:
            if level.column == name:
                return level
        choices = ", ".join(level.value for level in cls)
        raise ValueError(f"Unknown level: {text} (expected one of {choices})")


@dataclass(frozen=True)
class RubricRecord:
    domain: str
    indicators: str = ""
    levels: Mapping[Level, str] = field(default_factory=dict)

    def description_for(self, level: Optional[Level]) -> str:
        if level is None:
            return ""
        return self.levels.get(level, "")


def rating_label(level: Optional[Level]) -> str:
    return level.value if level is not None else NOT_RATED_LABEL


def record_from_row(row: Mapping[str, Optional[str]]) -> RubricRecord:
    levels: Dict[Level, str] = {
        level: (row.get(level.column) or "").strip() for level in Level
    }
    return RubricRecord(
        domain=(row.get("domain") or "").strip(),
        indicators=(row.get("indicators") or "").strip(),
        levels=levels,
    )
