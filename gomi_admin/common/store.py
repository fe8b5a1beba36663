"""
Hierarchical document store backed by SQLite.

Documents live at slash-separated paths with alternating collection/document
segments, e.g. ``municipalities/{id}/cities/{id}/areas/{id}``. Subcollections
are plain path prefixes, so deleting a document never touches its children.
"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from gomi_admin.common.db import get_db_connection


class DocumentNotFoundError(LookupError):
    """Raised when an update targets a document that does not exist."""


@dataclass
class Document:
    id: str
    path: str
    data: dict = field(default_factory=dict)


def join_path(*segments: str) -> str:
    """Join path segments, rejecting empty ones and embedded slashes."""
    for segment in segments:
        if not segment or "/" in str(segment):
            raise ValueError(f"Invalid path segment: {segment!r}")
    return "/".join(str(s) for s in segments)


def _split_doc_path(doc_path: str) -> tuple[str, str]:
    parts = doc_path.split("/")
    if len(parts) % 2 != 0 or not all(parts):
        raise ValueError(f"Not a document path: {doc_path}")
    return "/".join(parts[:-1]), parts[-1]


def _check_collection_path(collection_path: str) -> None:
    parts = collection_path.split("/")
    if len(parts) % 2 != 1 or not all(parts):
        raise ValueError(f"Not a collection path: {collection_path}")


def generate_document_id() -> str:
    """Random store-assigned id (20 hex chars)."""
    return uuid.uuid4().hex[:20]


class DocumentStore:
    """
    Collection/document CRUD with nested subcollections and batched writes.

    Every call opens its own connection unless it runs inside ``batch()``,
    where all writes share one connection and are committed together.
    """

    def __init__(self, db_path: Path | str | None = None):
        self.db_path = db_path
        self._batch_conn: sqlite3.Connection | None = None

    def _connect(self) -> sqlite3.Connection:
        return get_db_connection(self.db_path)

    @contextmanager
    def _connection(self):
        if self._batch_conn is not None:
            yield self._batch_conn
            return
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    @contextmanager
    def batch(self):
        """Group writes into one commit; rolled back if the block raises."""
        if self._batch_conn is not None:
            raise RuntimeError("Nested batches are not supported")
        conn = self._connect()
        self._batch_conn = conn
        try:
            yield self
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._batch_conn = None
            conn.close()

    def add(self, collection_path: str, data: dict) -> str:
        """Create a document with a store-assigned id and return the id."""
        _check_collection_path(collection_path)
        doc_id = generate_document_id()
        self.set(f"{collection_path}/{doc_id}", data)
        return doc_id

    def set(self, doc_path: str, data: dict) -> None:
        """Create or overwrite the document at doc_path."""
        collection, doc_id = _split_doc_path(doc_path)
        now_str = datetime.now().isoformat()
        payload = json.dumps(data, ensure_ascii=False)
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO documents (path, collection, doc_id, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(path) DO UPDATE SET data = ?, updated_at = ?
            """,
                (doc_path, collection, doc_id, payload, now_str, now_str, payload, now_str),
            )

    def get(self, doc_path: str) -> dict | None:
        _split_doc_path(doc_path)
        with self._connection() as conn:
            row = conn.execute(
                "SELECT data FROM documents WHERE path = ?", (doc_path,)
            ).fetchone()
        return json.loads(row[0]) if row else None

    def exists(self, doc_path: str) -> bool:
        return self.get(doc_path) is not None

    def update(self, doc_path: str, fields: dict) -> None:
        """Merge top-level fields into an existing document."""
        _split_doc_path(doc_path)
        with self._connection() as conn:
            row = conn.execute(
                "SELECT data FROM documents WHERE path = ?", (doc_path,)
            ).fetchone()
            if row is None:
                raise DocumentNotFoundError(f"Document not found: {doc_path}")
            data = json.loads(row[0])
            data.update(fields)
            conn.execute(
                "UPDATE documents SET data = ?, updated_at = ? WHERE path = ?",
                (json.dumps(data, ensure_ascii=False), datetime.now().isoformat(), doc_path),
            )

    def delete(self, doc_path: str) -> bool:
        """Delete one document (children are left in place). Returns True if it existed."""
        _split_doc_path(doc_path)
        with self._connection() as conn:
            cursor = conn.execute("DELETE FROM documents WHERE path = ?", (doc_path,))
            return cursor.rowcount > 0

    def list_collection(self, collection_path: str) -> list[Document]:
        """All documents of a collection, in insertion order."""
        _check_collection_path(collection_path)
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT doc_id, path, data FROM documents WHERE collection = ? ORDER BY rowid",
                (collection_path,),
            ).fetchall()
        return [Document(id=row[0], path=row[1], data=json.loads(row[2])) for row in rows]

    def where(self, collection_path: str, field_name: str, value: object) -> list[Document]:
        """Documents of a collection whose top-level field equals value."""
        return [doc for doc in self.list_collection(collection_path) if doc.data.get(field_name) == value]


# Global store instance
_store = None


def get_store() -> DocumentStore:
    """Get or create global store instance"""
    global _store
    if _store is None:
        _store = DocumentStore()
    return _store
