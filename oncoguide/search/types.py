# Data models for the search layer.
# These types represent query intent and what retrieval returns.

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class QueryType(str, Enum):
    """Intent category of a patient question."""
    TREATMENT = "treatment"
    SIDE_EFFECT = "side_effect"
    PROGNOSIS = "prognosis"
    DIAGNOSIS = "diagnosis"
    SCREENING = "screening"
    GENERAL = "general"

    @classmethod
    def normalize(cls, value) -> "QueryType":
        """Map any value to a QueryType, unknown values become GENERAL."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.GENERAL


@dataclass(frozen=True)
class SearchHit:
    """One row returned by a search backend. Higher rank is better."""
    chunk_id: str
    content: str
    rank: float


@dataclass
class ContextChunk:
    """A reference passage after fusion, unique by id."""
    id: str
    text: str
    score: float
    strategy: str
    meta: Optional[Dict[str, Any]] = None
