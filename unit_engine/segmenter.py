# unit boundary cascade, roman fallback, reference stripping

# unit_engine/segmenter.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .cleaning import clean_syllabus_text, normalize_whitespace
from .contracts import Unit, UnitKind, synthetic_unit

# Roman (any case) or decimal label, optionally with a subsection: I, iv, 3, 2.1
# A Roman label glued to a following letter ("Unit in", "UNIT Introduction") is prose;
# a decimal label may run straight into its title ("UNIT 1Introduction").
_IDENT = r"(?P<ident>[IVX]+(?![a-z])|\d+(?:\.\d+)?)"


def _keyword_marker(keyword: str) -> re.Pattern[str]:
    # "UNIT I: Title", "UNIT I - Title", "UNIT I[Title", "UNIT I Title"
    return re.compile(rf"\b{keyword}\s+{_IDENT}\s*[:\-.\[\]]?\s*", re.IGNORECASE)


@dataclass(frozen=True)
class BoundaryRule:
    name: str
    marker: re.Pattern[str]
    kind: UnitKind
    requires_title: bool = False


@dataclass(frozen=True)
class BoundaryMatch:
    identifier: str
    kind: UnitKind
    title: str
    content: str
    start: int


# Tried in order; the first rule producing an accepted unit wins.
BOUNDARY_RULES: tuple[BoundaryRule, ...] = (
    BoundaryRule("unit_keyword", _keyword_marker("unit"), UnitKind.UNIT),
    BoundaryRule(
        "numbered_unit",
        re.compile(
            r"^[ \t]*(?P<ident>\d+(?:\.\d+)?)\.?[ \t]*[.:\-]?[ \t]*unit[ \t]+(?P<title>[^\n]*\S)",
            re.IGNORECASE | re.MULTILINE,
        ),
        UnitKind.UNIT,
    ),
    BoundaryRule("module_keyword", _keyword_marker("module"), UnitKind.MODULE),
    BoundaryRule(
        "unit_header_line",
        re.compile(
            r"^[ \t]*unit[ \t]*[-:]?[ \t]*" + _IDENT + r"[ \t]*(?:[:\-.][ \t]*(?P<title>[^\n]*\S))?[ \t]*$",
            re.IGNORECASE | re.MULTILINE,
        ),
        UnitKind.UNIT,
        requires_title=True,
    ),
    BoundaryRule("section_keyword", _keyword_marker("section"), UnitKind.SECTION),
)

# "I. Introduction" / "II Something" at the start of a line; upper-case numerals only
ROMAN_HEADING_RE = re.compile(r"^[ \t]*(?P<ident>[IVX]+)(?P<dot>\.?)[ \t]+(?P<title>[^\n]*\S)", re.MULTILINE)
_WELL_FORMED_ROMAN_RE = re.compile(r"X{0,3}(?:IX|IV|V?I{0,3})")

_BARE_ROMAN_TITLE_RE = re.compile(r"[ivx]+")
_BOILERPLATE_TITLE_RE = re.compile(r"objective|outcome|\bco[:\-]", re.IGNORECASE)

REFERENCES_HEADING_RE = re.compile(
    r"(?:^|\n)[ \t]*(?:references?|bibliography|text[ \t]*books?|reference[ \t]*books?"
    r"|suggested[ \t]*readings?|web[ \t]*references?|e-?resources?|recommended[ \t]*books?"
    r"|further[ \t]*readings?)\b[ \t]*[:\-]?",
    re.IGNORECASE,
)


def _split_title(span: str) -> tuple[str, str]:
    """First non-empty line is the title, the remainder is content."""
    title, _, content = span.lstrip().partition("\n")
    return title.strip(), content.strip()


def scan_rule(rule: BoundaryRule, text: str) -> List[BoundaryMatch]:
    """
    Locate every marker of one rule and slice the text between consecutive markers.
    Unfiltered: may contain duplicates and noise titles.
    """
    markers = list(rule.marker.finditer(text))
    out: List[BoundaryMatch] = []

    for i, m in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        span = text[m.end():end]

        inline_title = m.groupdict().get("title")
        if inline_title:
            title, content = inline_title.strip(), span.strip()
        else:
            title, content = _split_title(span)

        if rule.requires_title and not title:
            continue

        out.append(
            BoundaryMatch(
                identifier=m.group("ident"),
                kind=rule.kind,
                title=title,
                content=content,
                start=m.start(),
            )
        )
    return out


def is_acceptable_title(title: str) -> bool:
    lowered = title.lower()
    # non-greedy capture swallowed the next marker
    if "UNIT " in title.upper() and len(title) < 10:
        return False
    if _BARE_ROMAN_TITLE_RE.fullmatch(lowered):
        return False
    if _BOILERPLATE_TITLE_RE.search(title):
        return False
    return True


def _is_duplicate(units: List[Unit], candidate: Unit) -> bool:
    for u in units:
        if u.key == candidate.key:
            return True
        if len(candidate.title) > 5 and candidate.title in u.title:
            return True
    return False


def collect_units(matches: List[BoundaryMatch]) -> List[Unit]:
    """Filter noise titles, normalize, and drop duplicate identifiers/titles (first one wins)."""
    units: List[Unit] = []
    for bm in matches:
        if not is_acceptable_title(bm.title):
            continue
        candidate = Unit(
            identifier=bm.identifier,
            kind=bm.kind,
            title=normalize_whitespace(bm.title),
            content=normalize_whitespace(bm.content),
        )
        if not _is_duplicate(units, candidate):
            units.append(candidate)
    return units


def match_units(text: str) -> List[Unit]:
    for rule in BOUNDARY_RULES:
        units = collect_units(scan_rule(rule, text))
        if units:
            return units
    return []


def match_roman_headings(text: str) -> List[Unit]:
    """
    Fallback for sloppy documents: Roman numerals at line start.
    Without a dot after the numeral the title must start upper-case ("I am ..." is prose).
    """
    markers = [
        m
        for m in ROMAN_HEADING_RE.finditer(text)
        if _WELL_FORMED_ROMAN_RE.fullmatch(m.group("ident"))
        and (m.group("dot") or m.group("title")[0].isupper())
    ]

    matches: List[BoundaryMatch] = []
    for i, m in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        matches.append(
            BoundaryMatch(
                identifier=m.group("ident"),
                kind=UnitKind.UNIT,
                title=m.group("title").strip(),
                content=text[m.end():end].strip(),
                start=m.start(),
            )
        )
    return collect_units(matches)


def strip_trailing_references(units: List[Unit]) -> List[Unit]:
    """Cut a references/bibliography tail off the last unit's content."""
    if not units or units[-1].synthetic:
        return units

    last = units[-1]
    m = REFERENCES_HEADING_RE.search(last.content)
    if not m:
        return units

    trimmed = last.model_copy(update={"content": normalize_whitespace(last.content[: m.start()])})
    return units[:-1] + [trimmed]


def extract_units(raw_text: Optional[str]) -> List[Unit]:
    """
    Segment raw syllabus text into ordered units.

    - empty input (or input that is only boilerplate) -> []
    - no unit/module/section markers -> Roman-numeral headings
    - still nothing -> one synthetic unit holding the whole cleaned text

    Never raises for string input.
    """
    if not raw_text:
        return []

    cleaned = normalize_whitespace(clean_syllabus_text(raw_text))
    if not cleaned:
        return []

    units = match_units(cleaned)
    if not units:
        units = match_roman_headings(cleaned)
    if not units:
        return [synthetic_unit(cleaned)]

    return strip_trailing_references(units)
