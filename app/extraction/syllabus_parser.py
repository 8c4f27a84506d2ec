# parse_syllabus_from_text (line-based outline with subtopics)

# app/extraction/syllabus_parser.py
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from unit_engine import clean_syllabus_text

PAGE_LINE_RE = re.compile(r"^(?:page|p)\s*\d+$", re.IGNORECASE)
COURSE_CODE_LINE_RE = re.compile(r"^(?=.*[/\d])[A-Z./(]+\s*[A-Z/0-9-]+$")  # IT/CB/CM/, CS126
METADATA_RE = re.compile(r"R-\d{2}|Printed through web")

KEYWORD_TOPIC_RE = re.compile(
    r"^(?:chapter|unit|section|module)[ \t]*[-:]?[ \t]*([IVX]+(?![a-z])|\d+)[ \t]*[:\-.]?[ \t]*(.*)$",
    re.IGNORECASE,
)
ROMAN_TOPIC_RE = re.compile(r"^(?=[IVX])(X{0,3}(?:IX|IV|V?I{0,3}))\.?\s+(.+)$")
NUMBERED_TOPIC_RE = re.compile(r"^(\d+)\.?\s+(.+)$")

SUBTOPIC_RES = [
    re.compile(r"^(\d+(?:\.\d+)+)\.?\s+(.+)$"),  # 1.1 Title, 1.1.1 Title
    re.compile(r"^([A-HJ-UWYZa-z])[.)]\s+(.+)$"),  # A. Title, a) Title; I. V. X. are topics
    re.compile(r"^(\d+)\.([A-Z][^0-9.].*)$"),  # 1.Impart knowledge ...
]

DESCRIPTION_PREVIEW_CHARS = 200


def _is_noise(line: str) -> bool:
    return bool(
        PAGE_LINE_RE.match(line)
        or COURSE_CODE_LINE_RE.match(line)
        or METADATA_RE.search(line)
    )


def _topic_title(line: str, topic_count: int) -> Optional[str]:
    m = KEYWORD_TOPIC_RE.match(line)
    if m:
        return m.group(2).strip() or f"Unit {m.group(1)}"

    # numerals and numbers that look like a topic line
    for pattern in (ROMAN_TOPIC_RE, NUMBERED_TOPIC_RE):
        m = pattern.match(line)
        if m:
            return m.group(2).strip() or f"Topic {topic_count + 1}"
    return None


def _subtopic_title(line: str, under_keyword: bool) -> Optional[str]:
    patterns = SUBTOPIC_RES + [NUMBERED_TOPIC_RE] if under_keyword else SUBTOPIC_RES
    for pattern in patterns:
        m = pattern.match(line)
        if m:
            return m.group(2).strip()
    return None


def _new_topic(title: str) -> Dict[str, Any]:
    return {"title": title, "description": "", "content": "", "subtopics": [], "resources": []}


def parse_syllabus_from_text(content: Optional[str]) -> List[Dict[str, Any]]:
    """
    Older line-based outline parser. Produces topic records with subtopics:
      {title, description, content, subtopics: [{title, content}], resources: []}

    Topic lines: "UNIT I: ...", "Chapter 2 ...", "II. ...", "3. ..."
    Subtopic lines (inside a topic): "1.1 ...", "A. ...", "a) ...", "1.Impart ...",
    and "3. ..." when the topic came from a UNIT/Chapter/Section/Module heading.
    Lines before the first topic are dropped. No topics -> one "Course Content" topic.
    """
    text = clean_syllabus_text(content)
    lines = [ln.strip() for ln in text.splitlines()]

    topics: List[Dict[str, Any]] = []
    current: Optional[Dict[str, Any]] = None
    current_sub: Optional[Dict[str, str]] = None
    under_keyword = False

    def flush_subtopic():
        nonlocal current_sub
        if current is not None and current_sub is not None:
            current_sub["content"] = current_sub["content"].strip()
            current["subtopics"].append(current_sub)
        current_sub = None

    def flush_topic():
        nonlocal current
        flush_subtopic()
        if current is not None:
            current["content"] = current["content"].strip()
            topics.append(current)
        current = None

    for line in lines:
        if not line:
            continue

        # keyword headings first: "UNIT 1" would otherwise look like a course code
        keyword_heading = KEYWORD_TOPIC_RE.match(line) is not None
        if not keyword_heading and _is_noise(line):
            continue

        sub_title = None
        if current is not None and not keyword_heading:
            sub_title = _subtopic_title(line, under_keyword)
        if sub_title is not None:
            flush_subtopic()
            current_sub = {"title": sub_title, "content": ""}
            continue

        topic_title = _topic_title(line, len(topics))
        if topic_title is not None:
            flush_topic()
            current = _new_topic(topic_title)
            under_keyword = keyword_heading
            continue

        if current_sub is not None:
            current_sub["content"] += line + " "
        elif current is not None:
            current["content"] += line + " "

    flush_topic()

    if not topics:
        all_content = " ".join(ln for ln in lines if ln and not _is_noise(ln))
        if all_content:
            topic = _new_topic("Course Content")
            topic["description"] = all_content[:DESCRIPTION_PREVIEW_CHARS] + (
                "..." if len(all_content) > DESCRIPTION_PREVIEW_CHARS else ""
            )
            topic["content"] = all_content
            topics.append(topic)

    return topics
