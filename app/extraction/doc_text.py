# pdfplumber / python-docx / python-pptx text extraction, image-only heuristics, OCR

# app/extraction/doc_text.py
from __future__ import annotations

import io
import re
import subprocess
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

PDF_TYPE = "application/pdf"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
PPTX_TYPE = "application/vnd.openxmlformats-officedocument.presentationml.presentation"
TEXT_TYPE = "text/plain"

_EXTENSION_TYPES = {
    ".pdf": PDF_TYPE,
    ".docx": DOCX_TYPE,
    ".pptx": PPTX_TYPE,
    ".txt": TEXT_TYPE,
    ".text": TEXT_TYPE,
    ".md": TEXT_TYPE,
}


class DocumentReadError(ValueError):
    """The file has a supported type but its text could not be read."""


class UnsupportedDocumentError(ValueError):
    """No extractor for this content type / extension."""


def resolve_content_type(content_type: Optional[str], filename: Optional[str]) -> str:
    """
    Pick the extractor type: a known MIME type wins, otherwise the file extension.
    Raises UnsupportedDocumentError when neither is recognised.
    """
    ct = (content_type or "").split(";")[0].strip().lower()
    if ct in (PDF_TYPE, DOCX_TYPE, PPTX_TYPE, TEXT_TYPE):
        return ct

    ext = Path(filename or "").suffix.lower()
    if ext in _EXTENSION_TYPES:
        return _EXTENSION_TYPES[ext]

    raise UnsupportedDocumentError(f"Unsupported file type: {content_type or 'unknown'} ({filename or 'no name'})")


def extract_pdf_text_by_page(pdf: Union[str, BinaryIO]) -> List[str]:
    """
    Extract text per page using pdfplumber.

    Notes:
    - This will return empty strings for image-only PDFs (scans).
    - OCR fallback handled by ensure_searchable_text.
    """
    import pdfplumber  # local import to reduce editor import sensitivity

    pages: List[str] = []
    with pdfplumber.open(pdf) as doc:
        for page in doc.pages:
            t = page.extract_text() or ""
            t = re.sub(r"[ \t]+", " ", t)
            pages.append(t.strip())
    return pages


def looks_like_image_only(pages_text: List[str], min_chars_per_page: int = 40) -> bool:
    """
    Heuristic: if >=80% pages have fewer than min_chars_per_page characters, treat as image-only.
    """
    if not pages_text:
        return True
    low = sum(1 for t in pages_text if len(t) < min_chars_per_page)
    return (low / max(len(pages_text), 1)) >= 0.8


def ocr_to_searchable_pdf(input_pdf: str, output_pdf: str) -> None:
    """
    Create a searchable PDF via ocrmypdf (must be on PATH).
    """
    try:
        subprocess.run(
            ["ocrmypdf", "--skip-text", "--force-ocr", input_pdf, output_pdf],
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise RuntimeError(
            "OCR is required for this PDF, but 'ocrmypdf' is not installed/available on PATH. "
            "Install it (pip install ocrmypdf) and ensure dependencies (tesseract) are installed."
        ) from e
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"ocrmypdf failed: {e.stderr[:500]}") from e


def ensure_searchable_text(
    pdf_path: str,
    output_dir: str,
    prefer_ocr: bool = True,
) -> tuple[list[str], bool, Optional[str], Optional[str]]:
    """
    Returns: (pages_text, used_ocr, ocr_output_pdf, warning)

    - If image-only and prefer_ocr=True, attempts OCR. If OCR unavailable, returns the
      original (empty-ish) pages with a warning.
    """
    pages_text = extract_pdf_text_by_page(pdf_path)
    used_ocr = False
    ocr_out: Optional[str] = None
    warning: Optional[str] = None

    if prefer_ocr and looks_like_image_only(pages_text):
        out = str(Path(output_dir) / f"ocr_{Path(pdf_path).stem}.pdf")
        try:
            ocr_to_searchable_pdf(pdf_path, out)
            used_ocr = True
            ocr_out = out
            pages_text = extract_pdf_text_by_page(out)
        except RuntimeError as e:
            warning = f"OCR required but unavailable/failed for {pdf_path}: {e}"

    return pages_text, used_ocr, ocr_out, warning


def extract_docx_text(data: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(data))
    lines = [p.text for p in doc.paragraphs]
    # syllabi often keep the unit list inside a table
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" ".join(cells))
    return "\n".join(lines)


def extract_pptx_text(data: bytes) -> str:
    from pptx import Presentation

    prs = Presentation(io.BytesIO(data))
    slides_text: List[str] = []
    for slide in prs.slides:
        parts: List[str] = []
        for shape in slide.shapes:
            if shape.has_text_frame:
                for para in shape.text_frame.paragraphs:
                    if para.text.strip():
                        parts.append(para.text)
        if parts:
            slides_text.append("\n".join(parts))
    return "\n\n".join(slides_text)


def extract_text(
    data: bytes,
    content_type: Optional[str],
    filename: Optional[str],
) -> tuple[str, list[str]]:
    """
    Plain text for one uploaded document.

    Returns: (text, warnings)
    Raises UnsupportedDocumentError / DocumentReadError.
    """
    kind = resolve_content_type(content_type, filename)
    warnings: List[str] = []

    if kind == TEXT_TYPE:
        return data.decode("utf-8-sig", errors="replace"), warnings

    try:
        if kind == PDF_TYPE:
            pages = extract_pdf_text_by_page(io.BytesIO(data))
            if looks_like_image_only(pages):
                warnings.append(
                    f"{filename or 'PDF'} appears to have no readable text content "
                    f"(scanned or encrypted); OCR is only attempted for files on disk."
                )
            text = "\n".join(pages)
        elif kind == DOCX_TYPE:
            text = extract_docx_text(data)
        else:
            text = extract_pptx_text(data)
    except Exception as e:
        raise DocumentReadError(f"Failed to read {filename or kind}: {e}") from e

    return text, warnings
