import pytest

from app import workflow_logger


PROGRAMMING_SYLLABUS = """
COURSE OBJECTIVES:
1. Impart fundamental knowledge of computer science
2. Develop problem-solving skills

COURSE OUTCOMES:
CO1: Students will be able to analyze problems
CO2: Students will be able to design solutions

UNIT I: Introduction to Programming
Variables, data types and control structures. [CO:1]
Page 2
UNIT II: Object-Oriented Programming
Classes, objects, inheritance and polymorphism. (CO-2)

UNIT III: Data Structures
Arrays, linked lists, stacks, queues, trees and graphs.

TEXT BOOKS:
1. Programming in C, E. Balagurusamy
2. Data Structures using C, Reema Thareja
"""

DIRTY_PDF_SYLLABUS = (
    "R.V.R. & J.C. College of Engineering (Autonomous), Guntur-522019, A.P.R-24 IT/CD/CO/ CS126 "
    "DATA STRUCTURESLTPCIntExt 4--4.03070 Semester II [First Year] UNIT I[Introduction to Data Structures. "
    "UNIT II[Stacks and Queues. UNIT III[Linked Lists. UNIT IV[Trees and Graphs."
)


@pytest.fixture
def programming_syllabus() -> str:
    """Syllabus with objectives, outcomes, CO tags, a page number and a text-book list."""
    return PROGRAMMING_SYLLABUS


@pytest.fixture
def dirty_pdf_syllabus() -> str:
    """Run-on PDF text with letterhead noise and '[' separators."""
    return DIRTY_PDF_SYLLABUS


@pytest.fixture(autouse=True)
def isolated_workflow_log(tmp_path, monkeypatch):
    """Send workflow log files to a per-test directory."""
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("WORKFLOW_LOG_DIR", str(log_dir))
    monkeypatch.setattr(workflow_logger, "_LOG_PATH", None)
    return log_dir
