"""
Profile and conversation-history collaborators.

The pipeline only reads profiles and reads/appends history through these
protocols; how rows are actually stored is up to the implementation.
The in-memory versions back the development app and the tests.
"""

from __future__ import annotations

from collections import defaultdict, deque
from typing import Any, Deque, Dict, List, Optional, Protocol

from oncoguide.generate.types import Message, PatientContext


class ProfileStore(Protocol):
    def get_patient_context(self, user_id: str) -> Optional[PatientContext]:
        ...


class HistoryStore(Protocol):
    def get_recent_history(self, conversation_id: str, max_turns: int) -> List[Message]:
        """Newest turn first."""
        ...

    def append(self, conversation_id: str, role: str, content: str) -> None:
        ...


def conversation_key(user_id: str, session_id: str) -> str:
    return f"{user_id}:{session_id}"


class InMemoryProfileStore:
    def __init__(self, records: Optional[Dict[str, Dict[str, Any]]] = None):
        self._records: Dict[str, Dict[str, Any]] = dict(records or {})

    def put(self, user_id: str, record: Dict[str, Any]) -> None:
        self._records[user_id] = record

    def get_patient_context(self, user_id: str) -> Optional[PatientContext]:
        record = self._records.get(user_id)
        if record is None:
            return None
        return PatientContext.from_record(record)


class InMemoryHistoryStore:
    """Keeps only the newest `max_turns` turns per conversation."""

    def __init__(self, max_turns: int = 12):
        self.max_turns = max_turns
        self._turns: Dict[str, Deque[Message]] = defaultdict(lambda: deque(maxlen=self.max_turns))

    def get_recent_history(self, conversation_id: str, max_turns: int) -> List[Message]:
        if max_turns <= 0:
            return []
        turns = list(self._turns.get(conversation_id, ()))
        return list(reversed(turns[-max_turns:]))

    def append(self, conversation_id: str, role: str, content: str) -> None:
        self._turns[conversation_id].append(Message(role=role, content=content))
