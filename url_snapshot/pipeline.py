"""The resumable fetch-and-classify loop."""

from __future__ import annotations

import logging
from typing import List

from .capture_document import DocumentCapturer
from .capture_page import PageCapturer
from .classify import ContentCategory, ContentProbe, classify_content_type
from .errors import UnsupportedContentType
from .models import CaptureResult, RunSummary
from .shutdown import ShutdownCoordinator
from .state import RunState, fingerprint

logger = logging.getLogger(__name__)


def process_url(
    url: str,
    *,
    probe: ContentProbe,
    pages: PageCapturer,
    documents: DocumentCapturer,
) -> CaptureResult:
    """Classify ``url`` and hand it to the matching capture worker."""
    fp = fingerprint(url)
    content_type = probe.content_type(url)
    category = classify_content_type(content_type)

    if category.is_document:
        logger.info("Document detected (%s)", content_type)
        return documents.capture(url, fp)

    if category is ContentCategory.WEB_PAGE:
        logger.info("Processing as webpage...")
        return pages.capture(url, fp)

    logger.warning("Skipping unsupported content: %r", content_type)
    return CaptureResult.failed(UnsupportedContentType(content_type))


class Pipeline:
    """Processes URLs one at a time, persisting state after every outcome."""

    def __init__(
        self,
        state: RunState,
        *,
        probe: ContentProbe,
        pages: PageCapturer,
        documents: DocumentCapturer,
        shutdown: ShutdownCoordinator,
    ) -> None:
        self.state = state
        self.probe = probe
        self.pages = pages
        self.documents = documents
        self.shutdown = shutdown

    def _process(self, url: str) -> CaptureResult:
        try:
            return process_url(
                url, probe=self.probe, pages=self.pages, documents=self.documents
            )
        except Exception as exc:  # per-URL boundary: record and move on
            logger.exception("Unexpected error processing %s", url)
            return CaptureResult.failed(exc)

    def _record(self, url: str, result: CaptureResult) -> None:
        if result.is_success:
            self.state.record_success(url, result.artifacts)
            logger.info("[OK] %s", url)
        else:
            self.state.record_failure(url, str(result.error))
            if result.timed_out:
                logger.warning("[TIMEOUT] %s", url)
            else:
                logger.error("[FAIL] %s: %s", url, result.error)
        self.state.flush()

    def run(self, urls: List[str]) -> RunSummary:
        work = self.state.pending(urls)
        logger.info("Found %d URLs, %d need processing", len(urls), len(work))

        processed = 0
        try:
            for url in work:
                if self.shutdown.requested:
                    logger.info("Stopping before %s", url)
                    break
                processed += 1
                logger.info("[%d/%d] Processing: %s", processed, len(work), url)
                self._record(url, self._process(url))
        finally:
            if not self.state.flush():
                logger.error("Final state flush failed; the next run may repeat work")

        summary = RunSummary(
            total=len(work),
            processed=processed,
            successful=len(self.state.index),
            failed=len(self.state.ledger),
            interrupted=self.shutdown.requested,
        )
        for line in summary.summary().splitlines():
            logger.info("%s", line)
        return summary
