# app/extraction/pipeline.py
# orchestrates: document text -> units -> topic records, writes manifest

# app/extraction/pipeline.py
from __future__ import annotations

import hashlib
import json
import mimetypes
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from unit_engine import Unit, extract_units

from .doc_text import PDF_TYPE, ensure_searchable_text, extract_text, resolve_content_type
from .syllabus_parser import parse_syllabus_from_text

load_dotenv()

DEFAULT_PREVIEW_CHARS = int(os.getenv("SYLLABUS_PREVIEW_CHARS", "2000"))
STRATEGIES = ("units", "outline")


def _log(message: str) -> None:
    print(f"[extraction] {message}", flush=True)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _preview(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def unit_to_dict(unit: Unit) -> Dict[str, Any]:
    out = unit.model_dump(mode="json")
    out["heading"] = unit.heading
    return out


# ----------------------------
# Topic records
# ----------------------------
def build_topics(
    units: List[Unit],
    raw_text: str = "",
    preview_chars: int = DEFAULT_PREVIEW_CHARS,
) -> List[Dict[str, Any]]:
    """
    Topic records as the persistence layer stores them:
      {title, description, content, subtopics: [], resources: []}

    - the synthetic whole-document unit is cut to preview_chars
    - no units but some raw text -> a single "Course Content" preview topic
    """
    topics = [
        {
            "title": u.heading,
            "description": f"Content for {u.heading}",
            "content": _preview(u.content, preview_chars) if u.synthetic else u.content,
            "subtopics": [],
            "resources": [],
        }
        for u in units
    ]

    if not topics and raw_text.strip():
        topics = [
            {
                "title": "Course Content",
                "description": "General course content",
                "content": _preview(raw_text, preview_chars),
                "subtopics": [],
                "resources": [],
            }
        ]
    return topics


def parse_text(
    text: str,
    strategy: str = "units",
    preview_chars: int = DEFAULT_PREVIEW_CHARS,
) -> Dict[str, Any]:
    """
    strategy="units"   -> unit segmentation engine + topic records
    strategy="outline" -> legacy line-based parser (topics with subtopics, no units)
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy {strategy!r}; expected one of {STRATEGIES}")

    if strategy == "outline":
        return {"units": [], "topics": parse_syllabus_from_text(text)}

    units = extract_units(text)
    return {
        "units": [unit_to_dict(u) for u in units],
        "topics": build_topics(units, text, preview_chars),
    }


# ----------------------------
# Public API
# ----------------------------
def run_parse(
    path: str,
    output_dir: Optional[str] = None,
    strategy: str = "units",
    preview_chars: int = DEFAULT_PREVIEW_CHARS,
    prefer_ocr: bool = True,
) -> Dict[str, Any]:
    """
    Parse one syllabus file from disk.
    Writes a manifest JSON to output_dir when given.

    Returns:
      manifest dict (units, topics, warnings, provenance)
    """
    src = Path(path)
    data = src.read_bytes()
    guessed_type, _ = mimetypes.guess_type(src.name)
    content_type = resolve_content_type(guessed_type, src.name)

    manifest: Dict[str, Any] = {
        "source": str(src),
        "filename": src.name,
        "content_type": content_type,
        "sha256": _sha256_bytes(data),
        "strategy": strategy,
        "started_at": _now_utc_iso(),
        "warnings": [],
    }

    _log(f"Processing {src.name} ({content_type}, {len(data)} bytes)")

    if content_type == PDF_TYPE:
        work_dir = output_dir or str(src.parent)
        Path(work_dir).mkdir(parents=True, exist_ok=True)
        pages_text, used_ocr, ocr_path, warning = ensure_searchable_text(
            pdf_path=str(src),
            output_dir=work_dir,
            prefer_ocr=prefer_ocr,
        )
        text = "\n".join(pages_text)
        manifest["page_count"] = len(pages_text)
        manifest["used_ocr"] = used_ocr
        manifest["ocr_output_pdf"] = ocr_path
        if warning:
            manifest["warnings"].append(warning)
    else:
        text, warnings = extract_text(data, content_type, src.name)
        manifest["warnings"].extend(warnings)

    if not text.strip():
        manifest["warnings"].append(
            f"No text extracted from {src.name}. Document may be image-only or have unsupported text encoding."
        )

    parsed = parse_text(text, strategy=strategy, preview_chars=preview_chars)
    manifest["text_chars"] = len(text)
    manifest["unit_count"] = len(parsed["units"])
    manifest["topic_count"] = len(parsed["topics"])
    manifest["units"] = parsed["units"]
    manifest["topics"] = parsed["topics"]
    manifest["finished_at"] = _now_utc_iso()

    if output_dir:
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        manifest_path = Path(output_dir) / f"parse_manifest_{src.stem}_{manifest['sha256'][:8]}.json"
        with open(manifest_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=2, ensure_ascii=False)
        manifest["manifest_uri"] = str(manifest_path)
        _log(f"Wrote manifest {manifest_path}")

    _log(f"Parse completed. units={manifest['unit_count']} topics={manifest['topic_count']}")
    return manifest
