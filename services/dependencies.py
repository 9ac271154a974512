from functools import lru_cache

from core.config import DOCUMENT_STORE, DOCUMENTS_TABLE
from core.errors import ConfigurationError
from core.logging_config import get_logger
from services.completion import OpenAIStructuredCompletionClient, StructuredCompletionClient
from services.document_store import DocumentStore, InMemoryDocumentStore, PostgresDocumentStore

logger = get_logger(__name__)


@lru_cache
def get_document_store() -> DocumentStore:
    if DOCUMENT_STORE == "postgres":
        return PostgresDocumentStore(table=DOCUMENTS_TABLE)
    if DOCUMENT_STORE == "memory":
        logger.warning("Using in-memory document store, data is lost on restart")
        return InMemoryDocumentStore()
    raise ConfigurationError(f"Unknown DOCUMENT_STORE '{DOCUMENT_STORE}'", {"allowed": ["postgres", "memory"]})


@lru_cache
def get_completion_client() -> StructuredCompletionClient:
    return OpenAIStructuredCompletionClient()
