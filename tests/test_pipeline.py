"""
Document text extraction, topic records and the file-level parse manifest.
"""

import io
import json

import pytest

from app.extraction import doc_text
from app.extraction.doc_text import (
    DOCX_TYPE,
    PDF_TYPE,
    PPTX_TYPE,
    TEXT_TYPE,
    DocumentReadError,
    UnsupportedDocumentError,
    extract_text,
    looks_like_image_only,
    resolve_content_type,
)
from app.extraction.pipeline import build_topics, parse_text, run_parse
from unit_engine import extract_units


# ----------------------------
# Content types
# ----------------------------
class TestResolveContentType:
    def test_mime_type_with_parameters(self):
        assert resolve_content_type("text/plain; charset=utf-8", None) == TEXT_TYPE

    def test_extension_when_mime_is_generic(self):
        assert resolve_content_type("application/octet-stream", "syllabus.DOCX") == DOCX_TYPE
        assert resolve_content_type(None, "deck.pptx") == PPTX_TYPE
        assert resolve_content_type("", "notes.md") == TEXT_TYPE

    def test_unknown(self):
        with pytest.raises(UnsupportedDocumentError):
            resolve_content_type("application/octet-stream", "archive.zip")


# ----------------------------
# Text extraction
# ----------------------------
class TestExtractText:
    def test_plain_text_strips_bom(self):
        text, warnings = extract_text("\ufeffUNIT I: Sets".encode("utf-8"), "text/plain", "s.txt")
        assert text == "UNIT I: Sets"
        assert warnings == []

    def test_unsupported(self):
        with pytest.raises(UnsupportedDocumentError):
            extract_text(b"MZ\x90\x00", "application/octet-stream", "setup.exe")

    def test_docx_paragraphs_and_tables(self):
        from docx import Document

        doc = Document()
        doc.add_paragraph("UNIT I: Sets")
        doc.add_paragraph("Relations and functions.")
        table = doc.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "UNIT II:"
        table.cell(0, 1).text = "Graphs"
        buf = io.BytesIO()
        doc.save(buf)

        text, warnings = extract_text(buf.getvalue(), None, "syllabus.docx")
        assert "UNIT I: Sets" in text
        assert "UNIT II: Graphs" in text
        assert warnings == []
        assert [u.title for u in extract_units(text)] == ["Sets", "Graphs"]

    def test_pptx_slides(self):
        from pptx import Presentation

        prs = Presentation()
        slide = prs.slides.add_slide(prs.slide_layouts[1])
        slide.shapes.title.text = "MODULE 1: Cloud Basics"
        slide.placeholders[1].text = "Virtualization and elasticity."
        buf = io.BytesIO()
        prs.save(buf)

        text, _ = extract_text(buf.getvalue(), PPTX_TYPE, "deck.pptx")
        units = extract_units(text)
        assert [(u.identifier, u.title, u.content) for u in units] == [
            ("1", "Cloud Basics", "Virtualization and elasticity.")
        ]

    def test_pdf_pages_joined(self, monkeypatch):
        pages = [
            "UNIT I: Logic\nPropositions, connectives and truth tables.",
            "UNIT II: Proofs\nDirect proofs, contradiction and induction.",
        ]
        monkeypatch.setattr(doc_text, "extract_pdf_text_by_page", lambda pdf: pages)

        text, warnings = extract_text(b"%PDF-1.4", PDF_TYPE, "s.pdf")
        assert text == "\n".join(pages)
        assert warnings == []

    def test_pdf_without_text_warns(self, monkeypatch):
        monkeypatch.setattr(doc_text, "extract_pdf_text_by_page", lambda pdf: ["", ""])

        text, warnings = extract_text(b"%PDF-1.4", PDF_TYPE, "scan.pdf")
        assert text.strip() == ""
        assert len(warnings) == 1
        assert "scan.pdf" in warnings[0]

    def test_unreadable_pdf(self, monkeypatch):
        def broken(pdf):
            raise ValueError("not a PDF")

        monkeypatch.setattr(doc_text, "extract_pdf_text_by_page", broken)
        with pytest.raises(DocumentReadError):
            extract_text(b"garbage", PDF_TYPE, "bad.pdf")


@pytest.mark.parametrize(
    "pages, expected",
    [
        ([], True),
        (["", "", "x"], True),
        (["a" * 100, "b" * 100], False),
        (["a" * 100, "", "", "", ""], True),
    ],
)
def test_looks_like_image_only(pages, expected):
    assert looks_like_image_only(pages) is expected


# ----------------------------
# Topic records
# ----------------------------
class TestBuildTopics:
    def test_one_topic_per_unit(self):
        units = extract_units("UNIT I: Arrays\nIndexing.\nUNIT II: Lists\nNodes.")
        topics = build_topics(units)
        assert topics == [
            {
                "title": "Unit I: Arrays",
                "description": "Content for Unit I: Arrays",
                "content": "Indexing.",
                "subtopics": [],
                "resources": [],
            },
            {
                "title": "Unit II: Lists",
                "description": "Content for Unit II: Lists",
                "content": "Nodes.",
                "subtopics": [],
                "resources": [],
            },
        ]

    def test_synthetic_unit_content_is_previewed(self):
        units = extract_units("word " * 1000)
        topics = build_topics(units, preview_chars=100)
        assert topics[0]["title"] == "Full Content (Auto-detected)"
        assert len(topics[0]["content"]) == 103
        assert topics[0]["content"].endswith("...")
        # the unit itself keeps the whole text
        assert len(units[0].content) > 100

    def test_unit_content_is_never_truncated(self):
        body = "x" * 500
        topics = build_topics(extract_units(f"UNIT I: Long\n{body}"), preview_chars=10)
        assert topics[0]["content"] == body

    def test_no_units_with_raw_text(self):
        topics = build_topics([], "raw text here", preview_chars=5)
        assert topics == [
            {
                "title": "Course Content",
                "description": "General course content",
                "content": "raw t...",
                "subtopics": [],
                "resources": [],
            }
        ]

    def test_nothing(self):
        assert build_topics([], "   ") == []


# ----------------------------
# parse_text / run_parse
# ----------------------------
def test_parse_text_units(programming_syllabus):
    parsed = parse_text(programming_syllabus)
    assert [u["identifier"] for u in parsed["units"]] == ["I", "II", "III"]
    assert parsed["units"][0]["kind"] == "Unit"
    assert parsed["units"][0]["heading"] == "Unit I: Introduction to Programming"
    assert parsed["units"][0]["synthetic"] is False
    assert len(parsed["topics"]) == 3


def test_parse_text_outline(programming_syllabus):
    parsed = parse_text(programming_syllabus, strategy="outline")
    assert parsed["units"] == []
    assert parsed["topics"][0]["title"] == "Introduction to Programming"


def test_parse_text_unknown_strategy():
    with pytest.raises(ValueError):
        parse_text("UNIT I: X", strategy="chapters")


def test_run_parse_writes_manifest(tmp_path, programming_syllabus):
    src = tmp_path / "programming.txt"
    src.write_text(programming_syllabus, encoding="utf-8")
    out_dir = tmp_path / "manifests"

    manifest = run_parse(str(src), output_dir=str(out_dir))

    assert manifest["filename"] == "programming.txt"
    assert manifest["content_type"] == TEXT_TYPE
    assert manifest["strategy"] == "units"
    assert manifest["unit_count"] == 3
    assert manifest["topic_count"] == 3
    assert manifest["warnings"] == []
    assert len(manifest["sha256"]) == 64

    written = json.loads(open(manifest["manifest_uri"], encoding="utf-8").read())
    assert written["units"] == manifest["units"]
    assert manifest["manifest_uri"].endswith(f"parse_manifest_programming_{manifest['sha256'][:8]}.json")


def test_run_parse_without_output_dir(tmp_path):
    src = tmp_path / "empty.txt"
    src.write_text("", encoding="utf-8")

    manifest = run_parse(str(src))

    assert "manifest_uri" not in manifest
    assert manifest["unit_count"] == 0
    assert manifest["topics"] == []
    assert any("No text extracted" in w for w in manifest["warnings"])
    assert list(tmp_path.iterdir()) == [src]


def test_run_parse_pdf_uses_searchable_text(tmp_path, monkeypatch):
    src = tmp_path / "scan.pdf"
    src.write_bytes(b"%PDF-1.4")
    calls = {}

    def fake_ensure(pdf_path, output_dir, prefer_ocr=True):
        calls["args"] = (pdf_path, output_dir, prefer_ocr)
        return ["UNIT I: Logic\nPropositions.", "UNIT II: Proofs\nInduction."], True, "ocr_scan.pdf", None

    monkeypatch.setattr("app.extraction.pipeline.ensure_searchable_text", fake_ensure)

    manifest = run_parse(str(src))

    assert calls["args"] == (str(src), str(tmp_path), True)
    assert manifest["content_type"] == PDF_TYPE
    assert manifest["page_count"] == 2
    assert manifest["used_ocr"] is True
    assert [u["title"] for u in manifest["units"]] == ["Logic", "Proofs"]
