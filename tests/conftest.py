"""Shared test fixtures for url-snapshot tests."""

import io
from pathlib import Path

import docx
import pytest
from pypdf import PdfWriter

from url_snapshot.config import Settings


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary output directory, with dirs created."""
    s = Settings(out_dir=tmp_path / "out", urls_file=tmp_path / "urls.json")
    s.ensure_dirs()
    return s


@pytest.fixture
def docx_bytes() -> bytes:
    """A small Word document with two paragraphs."""
    document = docx.Document()
    document.add_paragraph("First paragraph")
    document.add_paragraph("Second paragraph")
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    """A single blank-page PDF."""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()
