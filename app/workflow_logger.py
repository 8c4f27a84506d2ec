# app/workflow_logger.py
from __future__ import annotations

from datetime import datetime, timezone
import json
import os
from pathlib import Path
from typing import Any, Iterable

_LOG_PATH: Path | None = None


# One file per process run, created on the first event:
# $WORKFLOW_LOG_DIR/run_YYYYMMDDTHHMMSSZ.log
def current_log_path() -> Path:
    global _LOG_PATH
    if _LOG_PATH is None:
        log_dir = Path(os.getenv("WORKFLOW_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        _LOG_PATH = log_dir / f"run_{stamp}.log"
    return _LOG_PATH


def log_event(*, document: str, status: str, actor: str, event: str, extra: dict | None = None) -> None:
    """
    One pipe-separated line per event, echoed to stdout:
      <ts> | document=<name> | status=<status> | actor=<actor> | <Event> | json={...}
    """
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
    payload = json.dumps(extra or {}, ensure_ascii=False, default=str)

    line = f"{ts} | document={document} | status={status} | actor={actor} | {event} | json={payload}"

    print(line, flush=True)
    with current_log_path().open("a", encoding="utf-8") as f:
        f.write(line + "\n")


def log_parse_result(
    *,
    document: str,
    event: str,
    sha256: str,
    strategy: str,
    units: Iterable[dict[str, Any]],
    topic_count: int,
    text_chars: int,
    warnings: list[str] | None = None,
    **extra: Any,
) -> None:
    """Audit line for a finished segmentation run; headings only, never unit content."""
    units = list(units)
    log_event(
        document=document,
        status="parsed",
        actor="parser",
        event=event,
        extra={
            "sha256": sha256,
            "strategy": strategy,
            "text_chars": text_chars,
            "unit_count": len(units),
            "topic_count": topic_count,
            "synthetic": any(u.get("synthetic") for u in units),
            "headings": [u.get("heading") for u in units],
            "warnings": warnings or [],
            **extra,
        },
    )
