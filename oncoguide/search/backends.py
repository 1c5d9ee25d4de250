# Full-text search capability over the chunk corpus.
# Any object with search(query_text, limit_count) -> List[SearchHit] works;
# SqliteChunkSearch is the bundled one (SQLite FTS5 + BM25).

from __future__ import annotations

import re
import sqlite3
from pathlib import Path
from typing import List, Optional, Protocol

from .types import SearchHit

_FTS_WORD = re.compile(r"[0-9A-Za-z_]+")

SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    id TEXT PRIMARY KEY,
    filename TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending'
);
CREATE VIRTUAL TABLE IF NOT EXISTS chunks USING fts5(
    chunk_id UNINDEXED,
    document_id UNINDEXED,
    content,
    tokenize='porter'
);
"""


class SearchBackend(Protocol):
    def search(self, query_text: str, limit_count: int) -> List[SearchHit]:
        ...


def _fts5_safe_query(raw: str) -> str:
    """
    Convert arbitrary user text to a safe FTS5 MATCH expression.
    - Extract alphanumeric/underscore tokens.
    - Join with AND so all terms must appear.
    - Quote each token to avoid operator parsing (e.g., '-' or ':' etc).
    """
    terms = _FTS_WORD.findall(raw or "")
    if not terms:
        return '""'  # empty phrase → matches nothing
    return " AND ".join(f'"{t}"' for t in terms)


class SqliteChunkSearch:
    """Ranked keyword search restricted to documents whose status is 'completed'."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            # FastAPI runs sync endpoints on a threadpool
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        return self._conn

    def ensure_schema(self) -> None:
        conn = self._get_conn()
        conn.executescript(SCHEMA)
        conn.commit()

    def search(self, query_text: str, limit_count: int) -> List[SearchHit]:
        if limit_count <= 0:
            return []
        sql = """
        SELECT chunks.chunk_id, chunks.content, -bm25(chunks) AS rank
        FROM chunks
        JOIN documents ON documents.id = chunks.document_id
        WHERE chunks MATCH ?
          AND documents.status = 'completed'
        ORDER BY rank DESC
        LIMIT ?;
        """
        rows = self._get_conn().execute(sql, (_fts5_safe_query(query_text), limit_count)).fetchall()
        return [SearchHit(chunk_id=str(cid), content=content, rank=float(rank)) for (cid, content, rank) in rows]

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
