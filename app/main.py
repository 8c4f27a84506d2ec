from __future__ import annotations

import hashlib
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import (
    FastAPI,
    UploadFile,
    File,
    Form,
    HTTPException,
)

from app.workflow_logger import log_event, log_parse_result
from app.schemas import ParseOut, ParseTextIn
from app.extraction.doc_text import (
    DocumentReadError,
    UnsupportedDocumentError,
    extract_text,
)
from app.extraction.pipeline import DEFAULT_PREVIEW_CHARS, STRATEGIES, parse_text

load_dotenv()

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

app = FastAPI(title="Syllabus Unit Segmentation")


def compute_sha256(data: bytes) -> str:
    h = hashlib.sha256()
    h.update(data)
    return h.hexdigest()


def to_parse_out(
    filename: Optional[str],
    sha256: str,
    strategy: str,
    parsed: Dict[str, Any],
    warnings: list[str],
) -> ParseOut:
    return ParseOut(
        filename=filename,
        sha256=sha256,
        strategy=strategy,
        unitCount=len(parsed["units"]),
        units=parsed["units"],
        topics=parsed["topics"],
        warnings=warnings,
    )


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/api/syllabi/parse", response_model=ParseOut)
def parse_upload(
    file: UploadFile = File(...),
    strategy: str = Form("units"),
):
    if strategy not in STRATEGIES:
        raise HTTPException(status_code=422, detail=f"Invalid strategy (expected one of {list(STRATEGIES)})")

    raw = file.file.read()
    if not raw:
        raise HTTPException(status_code=422, detail="Uploaded file is empty")
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File exceeds {MAX_UPLOAD_BYTES} bytes")

    sha = compute_sha256(raw)
    try:
        text, warnings = extract_text(raw, file.content_type, file.filename)
    except UnsupportedDocumentError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except DocumentReadError as e:
        log_event(
            document=file.filename or sha,
            status="failed",
            actor="parser",
            event="DocumentReadFailed",
            extra={"sha256": sha, "error": str(e)},
        )
        raise HTTPException(status_code=422, detail=str(e))

    parsed = parse_text(text, strategy=strategy, preview_chars=DEFAULT_PREVIEW_CHARS)

    log_parse_result(
        document=file.filename or sha,
        event="SyllabusParsed",
        sha256=sha,
        strategy=strategy,
        units=parsed["units"],
        topic_count=len(parsed["topics"]),
        text_chars=len(text),
        warnings=warnings,
        content_type=file.content_type,
    )
    return to_parse_out(file.filename, sha, strategy, parsed, warnings)


@app.post("/api/syllabi/parse-text", response_model=ParseOut)
def parse_plain_text(payload: ParseTextIn):
    sha = compute_sha256(payload.text.encode("utf-8"))
    parsed = parse_text(payload.text, strategy=payload.strategy, preview_chars=DEFAULT_PREVIEW_CHARS)

    log_parse_result(
        document=payload.filename or sha,
        event="SyllabusTextParsed",
        sha256=sha,
        strategy=payload.strategy,
        units=parsed["units"],
        topic_count=len(parsed["topics"]),
        text_chars=len(payload.text),
    )
    return to_parse_out(payload.filename, sha, payload.strategy, parsed, [])
