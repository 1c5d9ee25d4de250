# Hybrid keyword retriever.
#  - Strategy A: the question as typed, ranks boosted 1.5x
#  - Strategy B: the question plus per-intent expansion terms
# Results are fused by chunk id (A wins) and clipped to `limit`.

from __future__ import annotations

import logging
from typing import List

from .backends import SearchBackend
from .classifier import expansion_for
from .rank import DIRECT_BOOST, merge_and_rank
from .types import ContextChunk, QueryType, SearchHit

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 8
DETAILED_LIMIT = 10


def limit_for(response_length: str) -> int:
    """More chunks for detailed answers."""
    return DETAILED_LIMIT if response_length == "detailed" else DEFAULT_LIMIT


class HybridRetriever:
    def __init__(self, backend: SearchBackend, boost: float = DIRECT_BOOST):
        self.backend = backend
        self.boost = boost

    # -------------------------
    # Search helpers
    # -------------------------
    def _search(self, query_text: str, limit: int, strategy: str) -> List[SearchHit]:
        """Run one strategy; a failing backend counts as no hits."""
        try:
            return list(self.backend.search(query_text, limit) or [])
        except Exception:
            logger.warning("Search strategy %s failed; continuing without it", strategy, exc_info=True)
            return []

    # -------------------------
    # Public API
    # -------------------------
    def retrieve_chunks(self, query: str, query_type: QueryType, limit: int = DEFAULT_LIMIT) -> List[ContextChunk]:
        if limit <= 0:
            return []

        # 1) DIRECT
        direct = self._search(query, limit, "direct")

        # 2) EXPANDED (skipped when the intent has no expansion terms)
        expanded: List[SearchHit] = []
        extra = expansion_for(query_type)
        if extra:
            expanded = self._search(f"{query} {extra}", limit, "expanded")

        # 3) MERGE & rank
        merged = merge_and_rank(direct, expanded, top_k=limit, boost=self.boost)
        logger.info(
            "Retrieved %d chunks (direct=%d expanded=%d type=%s)",
            len(merged), len(direct), len(expanded), QueryType.normalize(query_type).value,
        )
        return merged

    def retrieve(self, query: str, query_type: QueryType, limit: int = DEFAULT_LIMIT) -> List[str]:
        """Ranked passage texts, at most `limit` of them."""
        return [c.text for c in self.retrieve_chunks(query, query_type, limit)]
