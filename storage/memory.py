"""
In-process document stores.

InMemoryDocumentStore keeps documents in a dict guarded by a lock;
JsonFileDocumentStore additionally persists every write to a JSON file so a
single-node deployment survives restarts.
"""
import copy
import json
import logging
import os
import tempfile
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from storage.base import DocumentNotFound, DocumentStore, PreconditionFailed

logger = logging.getLogger(__name__)

TIMESTAMP_FIELDS = ("created_at", "last_updated_at")


def _set_path(doc: Dict[str, Any], path: str, value: Any) -> None:
    """Assign `value` at a dotted path; numeric parts index into lists."""
    parts = path.split(".")
    target: Any = doc
    for depth, part in enumerate(parts):
        last = depth == len(parts) - 1
        if isinstance(target, list):
            if not part.isdigit():
                raise ValueError(f"List index expected in path {path!r}, got {part!r}")
            index = int(part)
            if index >= len(target):
                target.extend([None] * (index + 1 - len(target)))
            if last:
                target[index] = value
                return
            if target[index] is None:
                target[index] = {}
            target = target[index]
        elif isinstance(target, dict):
            if last:
                target[part] = value
                return
            if target.get(part) is None:
                target[part] = {}
            target = target[part]
        else:
            raise ValueError(f"Cannot descend into {type(target).__name__} at {path!r}")


class InMemoryDocumentStore(DocumentStore):
    """
    Thread-safe dict-backed store.
    """

    def __init__(self):
        self._docs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._clock = datetime.min.replace(tzinfo=timezone.utc)

    def _now(self) -> datetime:
        # Server timestamp; strictly increasing even if the wall clock is not
        now = datetime.now(timezone.utc)
        if now <= self._clock:
            now = self._clock + timedelta(microseconds=1)
        self._clock = now
        return now

    def create(self, data: Dict[str, Any]) -> str:
        with self._lock:
            doc_id = uuid.uuid4().hex[:20]
            doc = copy.deepcopy(data)
            doc.pop("id", None)
            doc["created_at"] = doc["last_updated_at"] = self._now()
            self._docs[doc_id] = doc
            self._persist()
        logger.info(f"Created document {doc_id}")
        return doc_id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._docs.get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def update(
        self,
        doc_id: str,
        fields: Dict[str, Any],
        if_match: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        with self._lock:
            doc = self._docs.get(doc_id)
            if doc is None:
                raise DocumentNotFound(doc_id)

            for name, expected in (if_match or {}).items():
                actual = doc.get(name)
                if actual != expected:
                    raise PreconditionFailed(doc_id, name, expected, actual)

            # Apply to a copy so a bad path leaves the stored document untouched
            updated = copy.deepcopy(doc)
            for path, value in fields.items():
                _set_path(updated, path, copy.deepcopy(value))
            updated["last_updated_at"] = self._now()

            self._docs[doc_id] = updated
            self._persist()
            return copy.deepcopy(updated)

    def list_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                {**copy.deepcopy(doc), "id": doc_id}
                for doc_id, doc in self._docs.items()
                if doc.get(field) == value
            ]

    def _persist(self) -> None:
        """Hook for durable subclasses; called with the lock held."""


class JsonFileDocumentStore(InMemoryDocumentStore):
    """
    In-memory store mirrored to a JSON file after every write.
    """

    def __init__(self, path: str):
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            logger.info(f"No store file at {self.path}, starting empty")
            return

        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)

        for doc_id, doc in raw.items():
            for name in TIMESTAMP_FIELDS:
                if isinstance(doc.get(name), str):
                    doc[name] = datetime.fromisoformat(doc[name])
            self._docs[doc_id] = doc
            stamp = doc.get("last_updated_at")
            if isinstance(stamp, datetime) and stamp > self._clock:
                self._clock = stamp
        logger.info(f"Loaded {len(self._docs)} documents from {self.path}")

    def _persist(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._docs, f, default=_json_default, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
