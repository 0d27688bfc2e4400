"""url-snapshot: resumable screenshot/HTML/text capture for lists of URLs."""

from .classify import ContentCategory, ContentProbe, classify_content_type
from .config import Settings, get_settings
from .models import CaptureResult, DocumentArtifacts, FailureRecord, PageArtifacts, RunSummary
from .pipeline import Pipeline, process_url
from .shutdown import ShutdownCoordinator
from .state import FailureLedger, IndexStore, RunState, fingerprint, pending_urls

__all__ = [
    "Settings",
    "get_settings",
    "ContentCategory",
    "ContentProbe",
    "classify_content_type",
    "CaptureResult",
    "DocumentArtifacts",
    "FailureRecord",
    "PageArtifacts",
    "RunSummary",
    "Pipeline",
    "process_url",
    "ShutdownCoordinator",
    "FailureLedger",
    "IndexStore",
    "RunState",
    "fingerprint",
    "pending_urls",
]
