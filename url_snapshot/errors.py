"""Error taxonomy for per-URL failures."""

from __future__ import annotations


class SnapshotError(Exception):
    """Base class for errors that terminate a single URL for the current run."""


class ProbeError(SnapshotError):
    """The content-type probe could not reach the resource."""


class UnsupportedContentType(SnapshotError):
    """The resource is neither a web page nor a supported document."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Unsupported content type: {content_type}")
        self.content_type = content_type


class NavigationTimeout(SnapshotError):
    """Rendering the page did not finish within its deadline."""

    def __init__(self, message: str = "Processing timeout") -> None:
        super().__init__(message)


class NavigationError(SnapshotError):
    """The browser failed to navigate to or render the page."""


class DownloadError(SnapshotError):
    """Downloading a document body failed."""


class ExtractionError(SnapshotError):
    """Text could not be extracted from a downloaded document."""
