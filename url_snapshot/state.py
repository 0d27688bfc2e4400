"""Persisted run state: the success index, the failure ledger, and resume logic."""

from __future__ import annotations

import hashlib
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pydantic import TypeAdapter

from .models import ArtifactSet, FailureRecord

logger = logging.getLogger(__name__)

INDEX_NAME = "index.json"
FAILURES_NAME = "failed_urls.json"

_INDEX_ADAPTER = TypeAdapter(Dict[str, ArtifactSet])
_FAILURES_ADAPTER = TypeAdapter(List[FailureRecord])


def fingerprint(url: str) -> str:
    """Return the stable filename stem for a URL (hex MD5 of its UTF-8 bytes)."""
    return hashlib.md5(url.encode("utf-8")).hexdigest()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _read_json(path: Path) -> Optional[Any]:
    """Read a JSON file. Returns None if the file doesn't exist."""
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json_atomic(path: Path, payload: Any) -> None:
    """Write JSON atomically via tmp-file rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)


class IndexStore:
    """Durable mapping of successfully processed URL to its artifact set."""

    def __init__(self, path: Path, entries: Optional[Dict[str, ArtifactSet]] = None) -> None:
        self.path = path
        self._entries: Dict[str, ArtifactSet] = dict(entries or {})

    @classmethod
    def load(cls, path: Path) -> "IndexStore":
        entries: Dict[str, ArtifactSet] = {}
        try:
            raw = _read_json(path)
            if raw is not None:
                logger.info("Loading existing index data from %s", path)
                entries = _INDEX_ADAPTER.validate_python(raw)
                logger.info("Found %d existing processed URLs", len(entries))
        except (OSError, ValueError) as exc:
            logger.error("Error loading %s: %s", path, exc)
        return cls(path, entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, url: str) -> Optional[ArtifactSet]:
        return self._entries.get(url)

    def add(self, url: str, artifacts: ArtifactSet) -> None:
        self._entries[url] = artifacts

    def values(self) -> List[ArtifactSet]:
        return list(self._entries.values())

    def save(self) -> None:
        _write_json_atomic(self.path, _INDEX_ADAPTER.dump_python(self._entries, mode="json"))


class FailureLedger:
    """Append-only log of URLs that failed, in order of occurrence."""

    def __init__(self, path: Path, records: Optional[List[FailureRecord]] = None) -> None:
        self.path = path
        self._records: List[FailureRecord] = list(records or [])

    @classmethod
    def load(cls, path: Path) -> "FailureLedger":
        records: List[FailureRecord] = []
        try:
            raw = _read_json(path)
            if raw is not None:
                logger.info("Loading existing failed URLs data from %s", path)
                records = _FAILURES_ADAPTER.validate_python(raw)
                logger.info("Found %d existing failed URLs", len(records))
        except (OSError, ValueError) as exc:
            logger.error("Error loading %s: %s", path, exc)
        return cls(path, records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FailureRecord]:
        return iter(self._records)

    def append(
        self, url: str, error: str, timestamp: Optional[datetime] = None
    ) -> FailureRecord:
        record = FailureRecord(url=url, error=error, timestamp=timestamp or _utc_now())
        self._records.append(record)
        return record

    def save(self) -> None:
        _write_json_atomic(self.path, _FAILURES_ADAPTER.dump_python(self._records, mode="json"))


def pending_urls(urls: Iterable[str], index: IndexStore) -> List[str]:
    """Return the work list: input URLs not yet in the index, first occurrence only.

    URLs that only appear in the failure ledger stay in the work list and are
    retried on every run.
    """
    return [url for url in dict.fromkeys(urls) if url not in index]


class RunState:
    """Run context owning the index and the ledger; the only writer of both."""

    def __init__(self, index: IndexStore, ledger: FailureLedger) -> None:
        self.index = index
        self.ledger = ledger

    @classmethod
    def load(cls, out_dir: Path) -> "RunState":
        return cls(
            IndexStore.load(out_dir / INDEX_NAME),
            FailureLedger.load(out_dir / FAILURES_NAME),
        )

    def pending(self, urls: Iterable[str]) -> List[str]:
        return pending_urls(urls, self.index)

    def record_success(self, url: str, artifacts: ArtifactSet) -> None:
        self.index.add(url, artifacts)

    def record_failure(self, url: str, error: str) -> FailureRecord:
        return self.ledger.append(url, error)

    def flush(self) -> bool:
        """Persist index and ledger. Errors are logged, never raised.

        The two files are disjoint, so they are written concurrently.
        """
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = {
                self.index.path: pool.submit(self.index.save),
                self.ledger.path: pool.submit(self.ledger.save),
            }
        ok = True
        for path, future in futures.items():
            exc = future.exception()
            if exc is not None:
                logger.error("Error updating %s: %s", path, exc)
                ok = False
        if ok:
            logger.debug("Index files updated")
        return ok
