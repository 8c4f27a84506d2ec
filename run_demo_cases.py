#!/usr/bin/env python3
"""
run_demo_cases.py

Posts every syllabus in demo_cases/ (txt, pdf, docx, pptx) to a running FastAPI backend:

1) POST /api/syllabi/parse     (multipart: file + strategy)

Outputs:
- demo_results.json (full responses per file)
- demo_results.csv  (one summary row per file)

Start the backend first, e.g. `uvicorn app.main:app`.
"""

from __future__ import annotations

import argparse
import csv
import json
import mimetypes
import sys
import time
from pathlib import Path
from typing import Any, Dict, List

import requests

DEMO_SUFFIXES = {".txt", ".pdf", ".docx", ".pptx"}


def die(msg: str) -> None:
    print(f"ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


def save_json(path: Path, obj: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def save_csv(path: Path, rows: List[Dict[str, Any]], fieldnames: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def post_parse(base_url: str, doc_path: Path, strategy: str, timeout_s: int) -> Dict[str, Any]:
    url = f"{base_url}/api/syllabi/parse"
    content_type = mimetypes.guess_type(doc_path.name)[0] or "application/octet-stream"
    files = [
        ("file", (doc_path.name, doc_path.read_bytes(), content_type)),
    ]

    r = requests.post(url, data={"strategy": strategy}, files=files, timeout=timeout_s)
    if r.status_code != 200:
        die(f"POST /api/syllabi/parse failed for {doc_path.name} ({r.status_code}): {r.text}")
    return r.json()


def summarize(doc_name: str, resp: Dict[str, Any]) -> Dict[str, Any]:
    units = resp.get("units") or []
    topics = resp.get("topics") or []
    return {
        "file": doc_name,
        "strategy": resp.get("strategy"),
        "unit_count": resp.get("unitCount", len(units)),
        "topic_count": len(topics),
        "synthetic": any(u.get("synthetic") for u in units),
        "first_heading": topics[0]["title"] if topics else None,
        "warnings": " | ".join(resp.get("warnings") or []),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--base-url", default="http://127.0.0.1:8000", help="FastAPI base URL")
    ap.add_argument("--cases-dir", default="demo_cases", help="Folder containing syllabus files")
    ap.add_argument("--strategy", choices=["units", "outline"], default="units")
    ap.add_argument("--timeout", type=int, default=30, help="HTTP timeout seconds")
    ap.add_argument("--sleep", type=float, default=0.0, help="Seconds to sleep between files")
    ap.add_argument("--out-json", default="demo_results/demo_results.json")
    ap.add_argument("--out-csv", default="demo_results/demo_results.csv")
    args = ap.parse_args()

    base_url = args.base_url.rstrip("/")
    cases_dir = Path(args.cases_dir)

    if not cases_dir.exists():
        die(f"cases dir not found: {cases_dir}")

    docs = sorted(p for p in cases_dir.iterdir() if p.is_file() and p.suffix.lower() in DEMO_SUFFIXES)
    if not docs:
        die(f"No syllabi found in {cases_dir} (expected {', '.join(sorted(DEMO_SUFFIXES))})")

    all_results: List[Dict[str, Any]] = []
    summary_rows: List[Dict[str, Any]] = []

    for p in docs:
        print(f"\n=== Parsing {p.name} ===")
        resp = post_parse(base_url=base_url, doc_path=p, strategy=args.strategy, timeout_s=args.timeout)
        for t in resp.get("topics") or []:
            print(f"  - {t['title']}")

        all_results.append({"file": p.name, "response": resp})
        summary_rows.append(summarize(p.name, resp))

        if args.sleep > 0:
            time.sleep(args.sleep)

    out_json = Path(args.out_json)
    out_csv = Path(args.out_csv)
    save_json(out_json, all_results)

    fieldnames = [
        "file",
        "strategy",
        "unit_count",
        "topic_count",
        "synthetic",
        "first_heading",
        "warnings",
    ]
    save_csv(out_csv, summary_rows, fieldnames=fieldnames)

    print("\n=== DONE ===")
    print(f"Wrote: {out_json}")
    print(f"Wrote: {out_csv}")


if __name__ == "__main__":
    main()
