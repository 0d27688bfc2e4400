"""Plain-text extraction from PDF and Word document bytes."""

from __future__ import annotations

import io
import logging
import zipfile
from typing import Iterator

import docx
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_pdf_text(data: bytes) -> str:
    """Extract text from PDF bytes, one block per page separated by blank lines."""
    logger.debug("Extracting text from PDF (%d bytes)", len(data))
    try:
        reader = PdfReader(io.BytesIO(data))
        parts = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, KeyError, OSError) as exc:
        raise ExtractionError(f"Failed to extract PDF text: {exc}") from exc
    text = "\n\n".join(p for p in parts if p)
    logger.info("Extracted %d characters of text from PDF", len(text))
    return text


def _block_text(container) -> Iterator[str]:
    for block in container.iter_inner_content():
        if isinstance(block, Table):
            for row in block.rows:
                seen = set()
                for cell in row.cells:
                    # A merged cell repeats once per grid column it spans.
                    if cell._tc in seen:
                        continue
                    seen.add(cell._tc)
                    yield from _block_text(cell)
        else:
            yield block.text


def extract_docx_text(data: bytes) -> str:
    """Extract paragraph and table text from Word (.docx) bytes, in body order."""
    logger.debug("Extracting text from Word document (%d bytes)", len(data))
    try:
        document = docx.Document(io.BytesIO(data))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
        raise ExtractionError(f"Failed to extract Word document text: {exc}") from exc
    text = "\n".join(_block_text(document))
    logger.info("Extracted %d characters of text from Word document", len(text))
    return text


def extract_document_text(data: bytes, content_type: str) -> str:
    """Dispatch to the extractor matching ``content_type``.

    Raises:
        ExtractionError: For unsupported types or unparseable documents.
    """
    ct = content_type.lower()
    if "pdf" in ct:
        return extract_pdf_text(data)
    if "word" in ct:
        return extract_docx_text(data)
    raise ExtractionError(f"Unsupported document type: {content_type}")
