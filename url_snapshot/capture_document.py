"""Document capture: download a PDF/Word resource and extract its text."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from .classify import ContentProbe, document_extension
from .config import Settings
from .errors import DownloadError, SnapshotError
from .extract import extract_document_text
from .models import CaptureResult, DocumentArtifacts

logger = logging.getLogger(__name__)


class DocumentCapturer:
    def __init__(self, client: httpx.Client, probe: ContentProbe, settings: Settings) -> None:
        self.client = client
        self.probe = probe
        self.settings = settings

    def _download(self, url: str, dest: Path) -> bytes:
        """Stream the body of ``url`` to ``dest`` and return it.

        The partial file is removed if anything goes wrong.
        """
        logger.info("Downloading file: %s -> %s", url, dest)
        chunks = []
        try:
            with self.client.stream("GET", url) as resp:
                resp.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in resp.iter_bytes(chunk_size=65536):
                        f.write(chunk)
                        chunks.append(chunk)
        except (httpx.HTTPError, OSError) as exc:
            dest.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {exc}") from exc

        body = b"".join(chunks)
        logger.info("File downloaded successfully (%d bytes)", len(body))
        return body

    def capture(self, url: str, fp: str) -> CaptureResult:
        content_type = self.probe.content_type(url)
        doc_path = self.settings.doc_path / f"{fp}{document_extension(content_type)}"
        text_path = self.settings.text_path / f"{fp}.txt"

        try:
            body = self._download(url, doc_path)
            text = extract_document_text(body, content_type)
        except SnapshotError as exc:
            return CaptureResult.failed(exc)

        text_path.write_text(text, encoding="utf-8")
        logger.info("Saved extracted text to: %s", text_path)
        return CaptureResult.success(
            DocumentArtifacts(document=doc_path.name, text=text_path.name)
        )
