"""
Document store capability used to persist interviews.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class DocumentNotFound(KeyError):
    """No document with the given id."""


class PreconditionFailed(Exception):
    """An `if_match` precondition did not hold at write time."""

    def __init__(self, doc_id: str, field: str, expected: Any, actual: Any):
        super().__init__(f"{doc_id}: expected {field}={expected!r}, found {actual!r}")
        self.doc_id = doc_id
        self.field = field
        self.expected = expected
        self.actual = actual


class DocumentStore(ABC):
    """
    Keyed document persistence with per-call atomic field writes.

    Field paths in `update` may be dotted ("answers.3") to address a single
    element of a list or a key of a nested mapping; each call is applied
    atomically, so writes to distinct paths from different callers commute.
    The store stamps `created_at` and `last_updated_at` itself.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        ...

    @abstractmethod
    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a copy of a document, or None."""
        ...

    @abstractmethod
    def update(
        self,
        doc_id: str,
        fields: Dict[str, Any],
        if_match: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Write `fields` (dotted paths allowed) in one atomic step.

        Args:
            doc_id: The document to update
            fields: Mapping of field path to new value
            if_match: Top-level fields that must hold these values at write time

        Returns:
            A copy of the document after the write

        Raises:
            DocumentNotFound: no such document
            PreconditionFailed: an `if_match` value did not match
        """
        ...

    @abstractmethod
    def list_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """All documents whose top-level `field` equals `value`, each with its `id`."""
        ...
