"""
Persistence contract for the inventory tables and an in-process implementation.

Tables: groups, user_groups, tags, supplies. Rows are plain dicts, the same
shape PostgREST hands back from Supabase, so services can build their
pydantic schemas from either backend.
"""

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

logger = logging.getLogger(__name__)

TABLES = ("groups", "user_groups", "tags", "supplies")

# Columns that must be unique together, per table
UNIQUE_CONSTRAINTS = {
    "user_groups": ("group_id", "user_id"),
}

# (table, embedded relation) -> foreign key column on table
FOREIGN_KEYS = {
    ("supplies", "tags"): "tag_id",
    ("supplies", "groups"): "group_id",
    ("tags", "groups"): "group_id",
    ("user_groups", "groups"): "group_id",
}

# relation name -> columns to embed, e.g. {"tags": ("name", "color")}
Embed = Dict[str, Sequence[str]]


class StoreError(Exception):
    """Raised by a store when the backend rejects an operation."""


class UniqueViolation(StoreError):
    """An insert would duplicate a unique key."""

    def __init__(self, table: str, columns: Iterable[str]):
        self.table = table
        self.columns = tuple(columns)
        super().__init__(f"Duplicate key on {table} ({', '.join(self.columns)})")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryStore(ABC):
    """Transactional CRUD over the four inventory tables."""

    @abstractmethod
    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it with id and created_at filled in."""

    @abstractmethod
    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update one row by id. Returns the new row, or None if it does not exist."""

    @abstractmethod
    def delete(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        """Delete every row matching the equality filters and return them."""

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
        embed: Optional[Embed] = None,
    ) -> List[Dict[str, Any]]:
        """Return rows matching equality filters and IN filters.

        Without order_by rows come back in insertion order.
        Each relation named in embed is attached under its own key as a dict
        of the requested columns, or None when the foreign key is empty.
        """

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the block atomically: if it raises, none of its writes remain."""

    def get(self, table: str, row_id: str, embed: Optional[Embed] = None) -> Optional[Dict[str, Any]]:
        rows = self.select(table, filters={"id": row_id}, embed=embed)
        return rows[0] if rows else None


class MemoryStore(InventoryStore):
    """Dict-backed store used for local development and the test suite."""

    def __init__(self):
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in TABLES}
        self._lock = threading.RLock()
        self._depth = 0

    def _table(self, table: str) -> Dict[str, Dict[str, Any]]:
        if table not in self._tables:
            raise StoreError(f"Unknown table: {table}")
        return self._tables[table]

    def _check_unique(self, table: str, row: Dict[str, Any]) -> None:
        columns = UNIQUE_CONSTRAINTS.get(table)
        if not columns:
            return
        key = tuple(row.get(c) for c in columns)
        for existing in self._tables[table].values():
            if existing["id"] != row["id"] and tuple(existing.get(c) for c in columns) == key:
                raise UniqueViolation(table, columns)

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            rows = self._table(table)
            row = dict(values)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", utcnow())
            if row["id"] in rows:
                raise UniqueViolation(table, ("id",))
            self._check_unique(table, row)
            rows[row["id"]] = row
            return dict(row)

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            rows = self._table(table)
            if row_id not in rows:
                return None
            row = {**rows[row_id], **values, "id": row_id}
            self._check_unique(table, row)
            rows[row_id] = row
            return dict(row)

    def delete(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        with self._lock:
            rows = self._table(table)
            doomed = [r for r in rows.values() if _matches(r, filters, None)]
            for row in doomed:
                del rows[row["id"]]
            return [dict(r) for r in doomed]

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
        embed: Optional[Embed] = None,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [dict(r) for r in self._table(table).values() if _matches(r, filters, in_)]
            for relation, columns in (embed or {}).items():
                fk = FOREIGN_KEYS.get((table, relation))
                if fk is None:
                    raise StoreError(f"No relation {relation} on {table}")
                targets = self._table(relation)
                for row in rows:
                    target = targets.get(row.get(fk))
                    row[relation] = {c: target.get(c) for c in columns} if target else None
        if order_by:
            # Ties keep insertion order, newest first when descending
            if desc:
                rows.reverse()
            rows.sort(key=lambda r: r.get(order_by), reverse=desc)
        return rows

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            snapshot = copy.deepcopy(self._tables) if self._depth == 0 else None
            self._depth += 1
            try:
                yield
            except BaseException:
                if snapshot is not None:
                    logger.warning("Rolling back in-memory transaction")
                    self._tables = snapshot
                raise
            finally:
                self._depth -= 1


def _matches(
    row: Dict[str, Any],
    filters: Optional[Dict[str, Any]],
    in_: Optional[Dict[str, Iterable[Any]]],
) -> bool:
    for column, value in (filters or {}).items():
        if row.get(column) != value:
            return False
    for column, values in (in_ or {}).items():
        if row.get(column) not in set(values):
            return False
    return True
