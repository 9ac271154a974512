import asyncio
import copy
import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import psycopg2
from psycopg2.extras import Json, RealDictCursor
from pydantic import BaseModel

from core.config import DATABASE_URL, DB_SETTINGS
from core.errors import StoreReadFailure, StoreWriteFailure
from core.logging_config import get_logger

logger = get_logger(__name__)

Filter = Tuple[str, str, Any]

FILTER_OPS = ("==", "!=", "<", "<=", ">", ">=", "in", "array-contains")


class DocumentSnapshot(BaseModel):
    id: str
    exists: bool
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Document data with its id merged in, the shape callers read records from."""
        return {**(self.data or {}), "id": self.id}


class DocumentStore(ABC):
    """
    Collection/document store.

    Documents are addressed by collection name + id. `set` fully replaces the
    document (creating it when absent). Queries AND their filters together and
    never match a document that lacks a filtered or ordered field.
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        pass

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def new_id(self, collection: str) -> str:
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        direction: str = "desc",
        limit: Optional[int] = None,
    ) -> List[DocumentSnapshot]:
        pass


def _generate_id() -> str:
    return uuid.uuid4().hex[:20]


def _validate_query(filters: Sequence[Filter], direction: str, limit: Optional[int]):
    for field, op, _ in filters:
        if op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator '{op}' on field '{field}'")
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort direction '{direction}'")
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")


# ============ IN-MEMORY STORE ============

_MISSING = object()


def _lookup(data: Dict[str, Any], field: str):
    value = data
    for part in field.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _matches(value, op: str, expected) -> bool:
    if value is _MISSING:
        return False
    try:
        if op == "==":
            return value == expected
        if op == "!=":
            return value != expected
        if op == "<":
            return value < expected
        if op == "<=":
            return value <= expected
        if op == ">":
            return value > expected
        if op == ">=":
            return value >= expected
        if op == "in":
            return value in expected
        if op == "array-contains":
            return isinstance(value, list) and expected in value
    except TypeError:
        # Values of different types never compare
        return False
    return False


class InMemoryDocumentStore(DocumentStore):
    """Process-local store used for development and tests. Data is copied in and out."""

    def __init__(self, seed: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        for collection, documents in (seed or {}).items():
            for doc_id, data in documents.items():
                self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return DocumentSnapshot(id=doc_id, exists=False)
        return DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def new_id(self, collection: str) -> str:
        return _generate_id()

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        direction: str = "desc",
        limit: Optional[int] = None,
    ) -> List[DocumentSnapshot]:
        _validate_query(filters, direction, limit)

        rows = [
            (doc_id, data)
            for doc_id, data in self._collections.get(collection, {}).items()
            if all(_matches(_lookup(data, field), op, value) for field, op, value in filters)
        ]

        if order_by:
            rows = [row for row in rows if _lookup(row[1], order_by) is not _MISSING]
            rows.sort(key=lambda row: _lookup(row[1], order_by), reverse=(direction == "desc"))

        if limit is not None:
            rows = rows[:limit]

        return [
            DocumentSnapshot(id=doc_id, exists=True, data=copy.deepcopy(data))
            for doc_id, data in rows
        ]

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))


# ============ POSTGRES STORE ============

def connect_from_env():
    """
    Open a psycopg2 connection. DATABASE_URL wins when set (libpq understands the URI
    form directly); otherwise the DB_* settings that are present are passed through.
    """
    if DATABASE_URL:
        return psycopg2.connect(DATABASE_URL)

    params = {key: value for key, value in DB_SETTINGS.items() if value}
    return psycopg2.connect(**params)


_SQL_OPS = {"==": "=", "!=": "<>", "<": "<", "<=": "<=", ">": ">", ">=": ">="}


def build_query_sql(
    table: str,
    filters: Sequence[Filter],
    order_by: Optional[str],
    direction: str,
    limit: Optional[int],
) -> Tuple[str, list]:
    """
    Compile a document query into SQL over a (collection, id, data JSONB) table.

    Field paths are passed as text[] parameters to the #> operator so dotted
    names reach nested values. A NULL from #> means the field is missing and
    fails every comparison, which gives the "missing field never matches" rule.
    """
    clauses = ["collection = %s"]
    params: list = []

    for field, op, value in filters:
        path = field.split(".")
        if op in _SQL_OPS:
            clauses.append(f"data #> %s {_SQL_OPS[op]} %s::jsonb")
            params.extend([path, Json(value)])
        elif op == "in":
            if not value:
                clauses.append("FALSE")
                continue
            placeholders = ", ".join(["%s::jsonb"] * len(value))
            clauses.append(f"data #> %s IN ({placeholders})")
            params.append(path)
            params.extend(Json(item) for item in value)
        elif op == "array-contains":
            clauses.append("jsonb_typeof(data #> %s) = 'array' AND data #> %s @> %s::jsonb")
            params.extend([path, path, Json([value])])

    order_sql = ""
    if order_by:
        clauses.append("data #> %s IS NOT NULL")
        params.append(order_by.split("."))
        order_sql = f" ORDER BY data #> %s {'DESC' if direction == 'desc' else 'ASC'}"
        params.append(order_by.split("."))

    limit_sql = ""
    if limit is not None:
        limit_sql = " LIMIT %s"
        params.append(limit)

    sql = f"SELECT id, data FROM {table} WHERE " + " AND ".join(clauses) + order_sql + limit_sql
    return sql, params


class PostgresDocumentStore(DocumentStore):
    """
    Document store over a single PostgreSQL table:

        CREATE TABLE documents (
            collection TEXT NOT NULL,
            id TEXT NOT NULL,
            data JSONB NOT NULL,
            PRIMARY KEY (collection, id)
        );

    psycopg2 is blocking, so every call runs in a worker thread.
    """

    def __init__(self, connection_factory: Callable = connect_from_env, table: str = "documents"):
        if not table.replace("_", "").isalnum():
            raise ValueError(f"Invalid table name '{table}'")
        self.connection_factory = connection_factory
        self.table = table

    def ensure_schema(self):
        conn = self.connection_factory()
        cursor = conn.cursor()
        try:
            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    collection TEXT NOT NULL,
                    id TEXT NOT NULL,
                    data JSONB NOT NULL,
                    PRIMARY KEY (collection, id)
                )
            """)
            conn.commit()
        finally:
            cursor.close()
            conn.close()

    def _fetch(self, sql: str, params: list) -> List[dict]:
        conn = self.connection_factory()
        cursor = conn.cursor(cursor_factory=RealDictCursor)
        try:
            cursor.execute(sql, params)
            return cursor.fetchall()
        finally:
            cursor.close()
            conn.close()

    def _write(self, collection: str, doc_id: str, data: Dict[str, Any]):
        conn = self.connection_factory()
        cursor = conn.cursor()
        try:
            cursor.execute(f"""
                INSERT INTO {self.table} (collection, id, data)
                VALUES (%s, %s, %s::jsonb)
                ON CONFLICT (collection, id) DO UPDATE SET data = EXCLUDED.data
            """, (collection, doc_id, Json(data)))
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot:
        sql = f"SELECT id, data FROM {self.table} WHERE collection = %s AND id = %s"
        try:
            rows = await asyncio.to_thread(self._fetch, sql, [collection, doc_id])
        except psycopg2.Error as e:
            logger.error("Failed to read %s/%s: %s", collection, doc_id, e)
            raise StoreReadFailure(f"Failed to read {collection}/{doc_id}", {"error": str(e)}) from e

        if not rows:
            return DocumentSnapshot(id=doc_id, exists=False)
        return DocumentSnapshot(id=doc_id, exists=True, data=rows[0]["data"])

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._write, collection, doc_id, data)
        except psycopg2.Error as e:
            logger.error("Failed to write %s/%s: %s", collection, doc_id, e)
            raise StoreWriteFailure(f"Failed to write {collection}/{doc_id}", {"error": str(e)}) from e

    def new_id(self, collection: str) -> str:
        return _generate_id()

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        direction: str = "desc",
        limit: Optional[int] = None,
    ) -> List[DocumentSnapshot]:
        _validate_query(filters, direction, limit)
        sql, params = build_query_sql(self.table, filters, order_by, direction, limit)

        try:
            rows = await asyncio.to_thread(self._fetch, sql, [collection] + params)
        except psycopg2.Error as e:
            logger.error("Query on %s failed: %s", collection, e)
            raise StoreReadFailure(f"Query on {collection} failed", {"error": str(e)}) from e

        return [DocumentSnapshot(id=row["id"], exists=True, data=row["data"]) for row in rows]
