import os
import sys
from pathlib import Path
from typing import Dict, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("APP_ENV", "test")

from oncoguide.generate.types import Message, ModelParams  # noqa: E402
from oncoguide.search.types import SearchHit  # noqa: E402


class FakeClient:
    """Provider stand-in: returns `text`, or raises `error` when given."""

    def __init__(self, text: str = "", error: Exception | None = None, engine: str = "fake",
                 supports_repetition_penalty: bool = False):
        self.text = text
        self.error = error
        self.engine = engine
        self.model = f"{engine}-model"
        self.supports_repetition_penalty = supports_repetition_penalty
        self.calls: List[tuple] = []

    def generate(self, messages: List[Message], params: ModelParams):
        self.calls.append((messages, params))
        if self.error is not None:
            raise self.error
        return self.text, {"engine": self.engine, "model": self.model}


class FakeBackend:
    """Search stand-in keyed by exact query text."""

    def __init__(self, results: Dict[str, List[SearchHit]] | None = None, error: Exception | None = None,
                 failing: set | None = None):
        self.results = results or {}
        self.error = error
        # None means every query raises `error`
        self.failing = failing
        self.calls: List[tuple] = []

    def search(self, query_text: str, limit_count: int) -> List[SearchHit]:
        self.calls.append((query_text, limit_count))
        if self.error is not None and (self.failing is None or query_text in self.failing):
            raise self.error
        return list(self.results.get(query_text, []))[:limit_count]


@pytest.fixture
def fake_client_factory():
    return FakeClient


@pytest.fixture
def fake_backend_factory():
    return FakeBackend
