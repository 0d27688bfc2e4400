"""Models shared across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .errors import NavigationTimeout


class PageArtifacts(BaseModel):
    """Files produced for a rendered web page, named ``<fingerprint>.<ext>``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    screenshot: str
    html: str
    text: str


class DocumentArtifacts(BaseModel):
    """Files produced for a downloaded PDF or Word document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    document: str
    text: str


ArtifactSet = Union[PageArtifacts, DocumentArtifacts]


class FailureRecord(BaseModel):
    """A URL that failed terminally during some run."""

    url: str
    error: str
    timestamp: datetime


@dataclass(frozen=True)
class CaptureResult:
    """Outcome of a capture worker: artifacts on success, an error otherwise."""

    artifacts: Optional[ArtifactSet] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, artifacts: ArtifactSet) -> "CaptureResult":
        return cls(artifacts=artifacts)

    @classmethod
    def failed(cls, error: Exception) -> "CaptureResult":
        return cls(error=error)

    @property
    def is_success(self) -> bool:
        return self.artifacts is not None and self.error is None

    @property
    def timed_out(self) -> bool:
        return isinstance(self.error, NavigationTimeout)


@dataclass(frozen=True)
class RunSummary:
    """Counts reported at the end of a run."""

    total: int
    processed: int
    successful: int
    failed: int
    interrupted: bool = False

    def summary(self) -> str:
        lines = [
            "Processing interrupted:" if self.interrupted else "Processing complete:",
            f"- Total URLs: {self.total}",
            f"- Newly processed: {self.processed}",
            f"- Total successful: {self.successful}",
            f"- Total failed: {self.failed}",
        ]
        return "\n".join(lines)
