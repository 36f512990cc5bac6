"""
Document storage for interviews.
"""
import logging

from .base import DocumentNotFound, DocumentStore, PreconditionFailed
from .memory import InMemoryDocumentStore, JsonFileDocumentStore
from utils.config import Config

logger = logging.getLogger(__name__)


def create_document_store(config: Config) -> DocumentStore:
    """JSON file store when INTERVIEW_DB_PATH is set, otherwise in-memory."""
    if config.store.db_path:
        logger.info(f"Using JSON file store at {config.store.db_path}")
        return JsonFileDocumentStore(config.store.db_path)
    logger.warning("INTERVIEW_DB_PATH not set, interviews are kept in memory only")
    return InMemoryDocumentStore()


__all__ = [
    'DocumentStore',
    'DocumentNotFound',
    'PreconditionFailed',
    'InMemoryDocumentStore',
    'JsonFileDocumentStore',
    'create_document_store',
]
