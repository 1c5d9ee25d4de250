# Makes the folder importable as a package.
# Exports the retriever, the classifier and the shared types for convenience.

from .backends import SearchBackend, SqliteChunkSearch
from .classifier import classify_query_type
from .retriever import HybridRetriever, limit_for
from .types import ContextChunk, QueryType, SearchHit

__all__ = [
    "HybridRetriever",
    "SearchBackend",
    "SqliteChunkSearch",
    "classify_query_type",
    "limit_for",
    "ContextChunk",
    "QueryType",
    "SearchHit",
]
