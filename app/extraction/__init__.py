# app/extraction/__init__.py
"""
Document extraction & topic-building package.

Public API:
- run_parse(path: str, output_dir: str | None = None, strategy: str = "units") -> dict
- parse_text(text: str, strategy: str = "units") -> dict
"""

from .pipeline import parse_text, run_parse

__all__ = ["parse_text", "run_parse"]
