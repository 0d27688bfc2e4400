"""Content-type probing and dispatch classification."""

from __future__ import annotations

import logging
from enum import Enum

import httpx

from .errors import ProbeError

logger = logging.getLogger(__name__)


class ContentCategory(str, Enum):
    WEB_PAGE = "web_page"
    PDF = "pdf"
    WORD = "word"
    UNSUPPORTED = "unsupported"

    @property
    def is_document(self) -> bool:
        return self in (ContentCategory.PDF, ContentCategory.WORD)


def classify_content_type(content_type: str) -> ContentCategory:
    """Map a content-type header value to the worker that handles it."""
    ct = content_type.lower()
    if "pdf" in ct:
        return ContentCategory.PDF
    if "word" in ct:
        return ContentCategory.WORD
    if "html" in ct:
        return ContentCategory.WEB_PAGE
    return ContentCategory.UNSUPPORTED


def document_extension(content_type: str) -> str:
    """Return the file extension used to store a downloaded document."""
    category = classify_content_type(content_type)
    if category is ContentCategory.PDF:
        return ".pdf"
    if category is ContentCategory.WORD:
        return ".docx"
    return ".bin"


class ContentProbe:
    """Issues metadata-only (HEAD) requests to learn a URL's content type."""

    def __init__(self, client: httpx.Client, timeout: float = 30.0) -> None:
        self.client = client
        self.timeout = timeout

    def _head(self, url: str) -> str:
        try:
            resp = self.client.head(url, timeout=self.timeout)
        except httpx.HTTPError as exc:
            raise ProbeError(f"Error checking content type for {url}: {exc}") from exc
        return resp.headers.get("content-type", "").lower()

    def content_type(self, url: str) -> str:
        """Return the lowercased content type, or "" when the probe fails.

        A failed probe is indistinguishable from an unsupported resource.
        """
        logger.debug("Checking content type for: %s", url)
        try:
            content_type = self._head(url)
        except ProbeError as exc:
            logger.error("%s", exc)
            return ""
        logger.debug("Content type: %s", content_type)
        return content_type
