"""Path-addressed document store backed by SQLite.

Documents live at paths such as ``users/u1/programs/p1/weeks/w1``. The store
offers scoped listing, server-side counting and write batches with a fixed
operation ceiling, and it assigns ``created_at``/``updated_at`` itself.
"""

import json
import re
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

import aiosqlite

from ..config import settings
from ..errors import BatchLimitExceededError, NotFoundError, StoreError
from .engine import get_db_path
from .paths import split_document_path, user_id_from_path

_FIELD_RE = re.compile(r"^[a-z_][a-z0-9_]*$")
_COLUMNS = {"id", "created_at", "updated_at"}
_OPERATORS = {"==": "=", "!=": "!=", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


def _ts(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


@dataclass
class Document:
    """A stored document and its server timestamps."""

    path: str
    id: str
    data: dict
    created_at: datetime
    updated_at: datetime

    @property
    def parent_path(self) -> str:
        return self.path.rsplit("/", 1)[0]


@dataclass(frozen=True)
class Filter:
    """A ``field op value`` condition on a document field."""

    field: str
    op: str
    value: Any


@dataclass
class _Operation:
    kind: str  # "set", "update" or "delete"
    path: str
    data: dict | None = field(default=None)


@runtime_checkable
class StoreGateway(Protocol):
    """What the cascade and analytics services need from a store.

    ``batch()`` may return any object with ``delete(path)`` and an async
    ``commit()``; tests substitute failing batches this way.
    """

    max_batch_operations: int

    async def get(self, path: str) -> Document | None: ...

    async def list_documents(
        self,
        collection_path: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
    ) -> list[Document]: ...

    async def list_descendants(
        self,
        prefix: str,
        collection: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
    ) -> list[Document]: ...

    async def count(self, collection_path: str) -> int: ...

    async def count_descendants(self, prefix: str, collection: str) -> int: ...

    async def update(self, path: str, data: dict) -> None: ...

    def batch(self) -> "WriteBatch": ...


class WriteBatch:
    """Operations committed together in one transaction.

    A batch refuses to grow beyond ``max_operations``. It can be committed
    once.
    """

    def __init__(self, store: "DocumentStore", max_operations: int):
        self._store = store
        self.max_operations = max_operations
        self._operations: list[_Operation] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._operations)

    def set(self, path: str, data: dict) -> "WriteBatch":
        return self._add(_Operation("set", path, data))

    def update(self, path: str, data: dict) -> "WriteBatch":
        return self._add(_Operation("update", path, data))

    def delete(self, path: str) -> "WriteBatch":
        return self._add(_Operation("delete", path))

    def _add(self, operation: _Operation) -> "WriteBatch":
        if self._committed:
            raise StoreError("Batch has already been committed")
        if len(self._operations) >= self.max_operations:
            raise BatchLimitExceededError(self.max_operations)
        self._operations.append(operation)
        return self

    async def commit(self) -> None:
        if self._committed:
            raise StoreError("Batch has already been committed")
        await self._store._commit(self._operations)
        self._committed = True


class DocumentStore:
    """SQLite implementation of the store gateway."""

    def __init__(
        self,
        db_path: Path | None = None,
        max_batch_operations: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.db_path = db_path or get_db_path()
        self.max_batch_operations = (
            max_batch_operations or settings.store_max_batch_operations
        )
        self._clock = clock or datetime.now
        self._last_timestamp: datetime | None = None

    @asynccontextmanager
    async def _connect(self):
        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as e:
            raise StoreError(f"Document store failure: {e}") from e

    def _server_timestamp(self) -> datetime:
        """Current time, strictly increasing across calls."""
        now = self._clock()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    # Reads

    async def get(self, path: str) -> Document | None:
        """Get a document by path."""
        async with self._connect() as db:
            cursor = await db.execute("SELECT * FROM documents WHERE path = ?", (path,))
            row = await cursor.fetchone()
            return self._row_to_document(row) if row else None

    async def list_documents(
        self,
        collection_path: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
    ) -> list[Document]:
        """List the documents directly inside a collection."""
        return await self._select(["parent = ?"], [collection_path], filters, order_by)

    async def list_descendants(
        self,
        prefix: str,
        collection: str,
        filters: list[Filter] | None = None,
        order_by: str | None = None,
    ) -> list[Document]:
        """List documents of one collection anywhere beneath a document path."""
        clauses, params = self._descendant_clause(prefix, collection)
        return await self._select(clauses, params, filters, order_by)

    async def count(self, collection_path: str) -> int:
        """Count the documents directly inside a collection."""
        return await self._count(["parent = ?"], [collection_path])

    async def count_descendants(self, prefix: str, collection: str) -> int:
        """Count documents of one collection anywhere beneath a document path."""
        clauses, params = self._descendant_clause(prefix, collection)
        return await self._count(clauses, params)

    # Writes

    async def add(
        self, collection_path: str, data: dict, created_at: datetime | None = None
    ) -> str:
        """Create a document with a generated id and return the id.

        ``created_at`` backdates the document (imports and seeding); it
        defaults to the server time.
        """
        doc_id = uuid4().hex[:20]
        await self._commit(
            [_Operation("set", f"{collection_path}/{doc_id}", data)],
            created_at=created_at,
        )
        return doc_id

    async def set(self, path: str, data: dict, created_at: datetime | None = None) -> None:
        """Create or replace a document, keeping the original created_at."""
        await self._commit([_Operation("set", path, data)], created_at=created_at)

    async def update(self, path: str, data: dict) -> None:
        """Merge fields into an existing document."""
        await self._commit([_Operation("update", path, data)])

    async def delete(self, path: str) -> None:
        await self._commit([_Operation("delete", path)])

    def batch(self) -> WriteBatch:
        return WriteBatch(self, self.max_batch_operations)

    async def _commit(
        self, operations: list[_Operation], created_at: datetime | None = None
    ) -> None:
        """Apply operations in a single transaction."""
        if len(operations) > self.max_batch_operations:
            raise BatchLimitExceededError(self.max_batch_operations)
        if not operations:
            return

        now = _ts(self._server_timestamp())
        async with self._connect() as db:
            for op in operations:
                if op.kind == "delete":
                    await db.execute("DELETE FROM documents WHERE path = ?", (op.path,))
                elif op.kind == "set":
                    parent, collection, doc_id = split_document_path(op.path)
                    await db.execute(
                        """
                        INSERT INTO documents
                        (path, parent, collection, id, user_id, data, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(path) DO UPDATE SET
                            data = excluded.data,
                            updated_at = excluded.updated_at
                        """,
                        (
                            op.path,
                            parent,
                            collection,
                            doc_id,
                            user_id_from_path(op.path),
                            json.dumps(op.data),
                            _ts(created_at) if created_at else now,
                            now,
                        ),
                    )
                else:
                    cursor = await db.execute(
                        "SELECT data FROM documents WHERE path = ?", (op.path,)
                    )
                    row = await cursor.fetchone()
                    if row is None:
                        # Leaving without commit discards the whole transaction
                        raise NotFoundError(f"No document at {op.path}")
                    merged = json.loads(row["data"])
                    merged.update(op.data)
                    await db.execute(
                        "UPDATE documents SET data = ?, updated_at = ? WHERE path = ?",
                        (json.dumps(merged), now, op.path),
                    )
            await db.commit()

    # Query helpers

    @staticmethod
    def _descendant_clause(prefix: str, collection: str) -> tuple[list[str], list]:
        scope = prefix.rstrip("/") + "/"
        return (
            ["collection = ?", "substr(path, 1, ?) = ?"],
            [collection, len(scope), scope],
        )

    @staticmethod
    def _field_expr(name: str) -> str:
        if not _FIELD_RE.match(name):
            raise ValueError(f"Invalid field name: {name!r}")
        if name in _COLUMNS:
            return name
        return f"json_extract(data, '$.{name}')"

    def _where(
        self, clauses: list[str], params: list, filters: list[Filter] | None
    ) -> tuple[str, list]:
        clauses = list(clauses)
        params = list(params)
        for f in filters or []:
            if f.op not in _OPERATORS:
                raise ValueError(f"Unsupported filter operator: {f.op!r}")
            value = f.value
            if isinstance(value, datetime):
                value = _ts(value)
            elif isinstance(value, bool):
                value = int(value)
            clauses.append(f"{self._field_expr(f.field)} {_OPERATORS[f.op]} ?")
            params.append(value)
        return " AND ".join(clauses), params

    async def _select(
        self,
        clauses: list[str],
        params: list,
        filters: list[Filter] | None,
        order_by: str | None,
    ) -> list[Document]:
        where, params = self._where(clauses, params, filters)
        order = self._field_expr(order_by) if order_by else "created_at"
        async with self._connect() as db:
            cursor = await db.execute(
                f"SELECT * FROM documents WHERE {where} ORDER BY {order}, path",
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_document(row) for row in rows]

    async def _count(self, clauses: list[str], params: list) -> int:
        where, params = self._where(clauses, params, None)
        async with self._connect() as db:
            cursor = await db.execute(
                f"SELECT COUNT(*) FROM documents WHERE {where}", params
            )
            row = await cursor.fetchone()
            return row[0]

    def _row_to_document(self, row: aiosqlite.Row) -> Document:
        return Document(
            path=row["path"],
            id=row["id"],
            data=json.loads(row["data"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
