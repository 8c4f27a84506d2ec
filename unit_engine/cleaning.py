# strip syllabus boilerplate, normalize whitespace

# unit_engine/cleaning.py
from __future__ import annotations

import re
from typing import Optional

# Boilerplate spans run up to the next structural keyword, or to the end of the text.
# Greedy-to-end when no keyword follows is a known limitation.
_NEXT_STRUCTURE = r"(?=(?i:\bunit|\bchapter|\bsection|\bmodule|\n[ \t]*\d+\.?[ \t]*unit)|\Z)"

PAGE_LINE_RE = re.compile(
    r"^[ \t]*(?:page|p\.?)[ \t]*\d+(?:[ \t]*(?:of|/)[ \t]*\d+)?[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
METADATA_MARKER_RE = re.compile(r"\bR-\d{2}\b")  # regulation codes, e.g. R-24

OBJECTIVES_SPAN_RE = re.compile(
    r"(?:course|learning|educational)\s+objectives?[\s\S]*?" + _NEXT_STRUCTURE,
    re.IGNORECASE,
)
OUTCOMES_SPAN_RE = re.compile(
    r"(?:course|learning|expected|student\s+learning)\s+outcomes?[\s\S]*?" + _NEXT_STRUCTURE,
    re.IGNORECASE,
)
# CO / COs / CO-PO Mapping headers at the start of a line
CO_SECTION_RE = re.compile(
    r"^[ \t]*(?:CO-PO[ \t]+Mapping|COs?)[\s:.\-][\s\S]*?" + _NEXT_STRUCTURE,
    re.MULTILINE,
)
CO_DEFINITION_LINE_RE = re.compile(r"^[ \t]*CO\d+.*$", re.IGNORECASE | re.MULTILINE)

CO_BRACKET_TAG_RE = re.compile(r"\[\s*CO[:\s-]*\d+(?:\s*,\s*\d+)*\s*\]", re.IGNORECASE)
CO_PAREN_TAG_RE = re.compile(r"\(\s*CO[:\s-]*\d+(?:\s*,\s*\d+)*\s*\)", re.IGNORECASE)
CO_BARE_TAG_RE = re.compile(r"\bCO[: \t-]*\d+\b", re.IGNORECASE)

_MULTI_SPACE_RE = re.compile(r" {2,}")
_NEWLINE_PAD_RE = re.compile(r" *\n *")


def normalize_whitespace(text: Optional[str]) -> str:
    """
    Collapse extraction artifacts: tabs -> space, runs of spaces -> one space,
    no spaces around newlines, trimmed ends. Idempotent.
    """
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.replace("\t", " ")
    text = _MULTI_SPACE_RE.sub(" ", text)
    text = _NEWLINE_PAD_RE.sub("\n", text)
    return text.strip()


def clean_syllabus_text(text: Optional[str]) -> str:
    """
    Remove non-curricular boilerplate before unit matching:
      - page-number lines and R-24 style metadata markers
      - course objectives / outcomes sections
      - CO headers, CO definition lines and inline CO tags ([CO:1], (CO-2), CO3)

    Pure; empty input returns "".
    """
    if not text:
        return ""

    cleaned = PAGE_LINE_RE.sub("", text)
    cleaned = METADATA_MARKER_RE.sub("", cleaned)

    cleaned = OBJECTIVES_SPAN_RE.sub("", cleaned)
    cleaned = OUTCOMES_SPAN_RE.sub("", cleaned)
    cleaned = CO_SECTION_RE.sub("", cleaned)

    # definition lines go before the bare tags, otherwise "CO1: ..." loses its prefix and survives
    cleaned = CO_DEFINITION_LINE_RE.sub("", cleaned)
    cleaned = CO_BRACKET_TAG_RE.sub("", cleaned)
    cleaned = CO_PAREN_TAG_RE.sub("", cleaned)
    cleaned = CO_BARE_TAG_RE.sub("", cleaned)

    return cleaned
