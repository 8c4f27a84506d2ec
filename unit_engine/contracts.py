from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

SYNTHETIC_TITLE = "Full Content (Auto-detected)"


class UnitKind(str, Enum):
    UNIT = "Unit"
    MODULE = "Module"
    SECTION = "Section"


class Unit(BaseModel):
    """
    One curriculum division recovered from syllabus text.

    - identifier: label as matched ("I", "3", "2.1"); empty for the synthetic unit
    - kind: which keyword introduced the unit
    - title / content: whitespace-normalized text
    - synthetic: True only for the whole-document fallback unit
    """
    model_config = ConfigDict(frozen=True)

    identifier: str
    kind: UnitKind = UnitKind.UNIT
    title: str = ""
    content: str = ""
    synthetic: bool = False

    @property
    def key(self) -> str:
        return self.identifier.upper()

    @property
    def heading(self) -> str:
        """Display title, e.g. "Unit II: Stacks and Queues"."""
        if self.synthetic:
            return self.title
        label = f"{self.kind.value} {self.identifier}"
        return f"{label}: {self.title}" if self.title else label


def synthetic_unit(content: str) -> Unit:
    return Unit(identifier="", kind=UnitKind.UNIT, title=SYNTHETIC_TITLE, content=content, synthetic=True)
