# Merge and ranking helpers for combining the two keyword strategies.
# Stateless; returns the top_k ContextChunks.

from __future__ import annotations
from typing import Dict, Iterable, List

from .types import ContextChunk, SearchHit

DIRECT_BOOST = 1.5


def fuse_results(
    direct_hits: Iterable[SearchHit],
    expanded_hits: Iterable[SearchHit],
    boost: float = DIRECT_BOOST,
) -> Dict[str, ContextChunk]:
    """
    Build the fused map keyed by chunk id.
    Direct hits go in first with their rank boosted; expanded hits are only
    inserted when the id is absent, so a direct hit is never overwritten.
    """
    combined: Dict[str, ContextChunk] = {}
    for h in direct_hits:
        combined[h.chunk_id] = ContextChunk(
            id=h.chunk_id,
            text=h.content,
            score=h.rank * boost,
            strategy="direct",
            meta={"base_rank": h.rank},
        )

    for h in expanded_hits:
        if h.chunk_id in combined:
            continue
        combined[h.chunk_id] = ContextChunk(
            id=h.chunk_id,
            text=h.content,
            score=h.rank,
            strategy="expanded",
            meta={"base_rank": h.rank},
        )
    return combined


def merge_and_rank(
    direct_hits: Iterable[SearchHit],
    expanded_hits: Iterable[SearchHit],
    top_k: int = 8,
    boost: float = DIRECT_BOOST,
) -> List[ContextChunk]:
    combined = fuse_results(direct_hits, expanded_hits, boost=boost)
    # Sort and clip
    ranked = sorted(combined.values(), key=lambda x: x.score, reverse=True)
    return ranked[:max(top_k, 0)]
