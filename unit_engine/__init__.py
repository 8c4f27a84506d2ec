# unit_engine/__init__.py
"""
Syllabus unit segmentation engine.

Public API:
- extract_units(raw_text: str) -> list[Unit]

Pure text-to-structure: no logging, network, disk or database access.
"""

from .cleaning import clean_syllabus_text, normalize_whitespace
from .contracts import SYNTHETIC_TITLE, Unit, UnitKind
from .segmenter import extract_units, strip_trailing_references

__all__ = [
    "SYNTHETIC_TITLE",
    "Unit",
    "UnitKind",
    "clean_syllabus_text",
    "extract_units",
    "normalize_whitespace",
    "strip_trailing_references",
]
