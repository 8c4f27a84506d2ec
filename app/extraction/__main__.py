"""
Package CLI entrypoint for extraction tooling.

Usage:
  python -m app.extraction parse <path> [--strategy units|outline] [--out-dir DIR] [--preview-chars N]
  python -m app.extraction check <path>


"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List

from unit_engine import Unit, clean_syllabus_text, extract_units, normalize_whitespace

from app.extraction.doc_text import extract_text, resolve_content_type
from app.extraction.pipeline import DEFAULT_PREVIEW_CHARS, STRATEGIES, run_parse


def _check_units(text: str, units: List[Unit]) -> List[str]:
    """
    Invariant checks over one segmentation run.
    Returns a list of failure messages (empty == pass).
    """
    failures: List[str] = []

    # all-boilerplate documents clean down to nothing and legitimately produce no units
    if normalize_whitespace(clean_syllabus_text(text)) and not units:
        failures.append("no units produced for non-empty cleaned text")

    seen = set()
    for u in units:
        if u.key in seen:
            failures.append(f"duplicate identifier {u.identifier!r}")
        seen.add(u.key)

        lowered = u.title.lower()
        if "objective" in lowered or "outcome" in lowered:
            failures.append(f"boilerplate title {u.heading!r}")

    return failures


def _check_file(path: str) -> bool:
    src = Path(path)
    content_type = resolve_content_type(None, src.name)
    text, warnings = extract_text(src.read_bytes(), content_type, src.name)
    for w in warnings:
        print(f"[check] ⚠️ {w}")

    units = extract_units(text)
    print(f"[check] file: {src}")
    print(f"[check] text_chars: {len(text)}")
    print(f"[check] units: {len(units)}")
    for u in units:
        print(f"  - {u.heading} ({len(u.content)} chars)")

    failures = _check_units(text, units)
    if failures:
        print("[check] ❌ Invariant failures:")
        for f in failures:
            print(f"  - {f}")
        return False

    print("[check] ✅ PASS: units unique, no boilerplate titles")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m app.extraction")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="Parse a syllabus file into units/topics")
    p_parse.add_argument("path", help="PDF / DOCX / PPTX / TXT file")
    p_parse.add_argument("--strategy", choices=STRATEGIES, default="units")
    p_parse.add_argument(
        "--out-dir",
        default=os.getenv("PARSE_OUTPUT_DIR"),
        help="Write the parse manifest JSON here (default: $PARSE_OUTPUT_DIR)",
    )
    p_parse.add_argument("--preview-chars", type=int, default=DEFAULT_PREVIEW_CHARS)

    p_check = sub.add_parser("check", help="Run segmentation and verify its invariants")
    p_check.add_argument("path", help="PDF / DOCX / PPTX / TXT file")

    args = parser.parse_args(argv)

    if args.cmd == "parse":
        manifest = run_parse(
            args.path,
            output_dir=args.out_dir,
            strategy=args.strategy,
            preview_chars=args.preview_chars,
        )
        summary = {
            "filename": manifest["filename"],
            "sha256": manifest["sha256"],
            "strategy": manifest["strategy"],
            "unit_count": manifest["unit_count"],
            "topics": [t["title"] for t in manifest["topics"]],
            "warnings": manifest["warnings"],
            "manifest_uri": manifest.get("manifest_uri"),
        }
        print(json.dumps(summary, indent=2, ensure_ascii=False))
        return 0

    if args.cmd == "check":
        ok = _check_file(args.path)
        return 0 if ok else 2

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
