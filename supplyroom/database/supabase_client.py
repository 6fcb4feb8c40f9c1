import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from postgrest.exceptions import APIError
from supabase import create_client, Client

from supplyroom.config.settings import settings
from supplyroom.database.store import Embed, InventoryStore, UniqueViolation, UNIQUE_CONSTRAINTS

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def select_columns(embed: Optional[Embed] = None) -> str:
    """PostgREST select list, e.g. '*, tags(name, color), groups(name)'"""
    parts = ["*"]
    for relation, columns in (embed or {}).items():
        parts.append(f"{relation}({', '.join(columns)})")
    return ", ".join(parts)


class SupabaseStore(InventoryStore):
    """InventoryStore over Supabase PostgREST tables.

    PostgREST has no client-side transactions, so transaction() keeps an undo
    log of every write made inside the block and replays it backwards if the
    block raises. The caller's exception is re-raised unchanged.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self._undo: Optional[List[Callable[[], None]]] = None

    def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        try:
            result = self.supabase.table(table).insert(values).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION_CODE:
                raise UniqueViolation(table, UNIQUE_CONSTRAINTS.get(table, ("id",))) from e
            raise
        row = result.data[0]
        self._record(lambda: self.supabase.table(table).delete().eq("id", row["id"]).execute())
        return row

    def update(self, table: str, row_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        before = self.get(table, row_id) if self._undo is not None else None
        result = self.supabase.table(table)\
            .update(values)\
            .eq("id", row_id)\
            .execute()
        if not result.data:
            return None
        if before is not None:
            previous = {k: before.get(k) for k in values}
            self._record(lambda: self.supabase.table(table).update(previous).eq("id", row_id).execute())
        return result.data[0]

    def delete(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        query = self.supabase.table(table).delete()
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.execute()
        rows = result.data or []
        if rows:
            self._record(lambda: self.supabase.table(table).insert(rows).execute())
        return rows

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        order_by: Optional[str] = None,
        desc: bool = False,
        embed: Optional[Embed] = None,
    ) -> List[Dict[str, Any]]:
        query = self.supabase.table(table).select(select_columns(embed))
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        for column, values in (in_ or {}).items():
            values = list(values)
            if not values:
                return []
            query = query.in_(column, values)
        if order_by:
            query = query.order(order_by, desc=desc)
        result = query.execute()
        return result.data or []

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._undo is not None:
            # Nested block joins the outer transaction
            yield
            return
        self._undo = []
        try:
            yield
        except BaseException:
            undo, self._undo = self._undo, None
            logger.warning("Transaction failed, replaying %d undo step(s)", len(undo))
            for step in reversed(undo):
                try:
                    step()
                except Exception:
                    logger.exception("Undo step failed; data may need manual repair")
            raise
        else:
            self._undo = None

    def _record(self, step: Callable[[], None]) -> None:
        if self._undo is not None:
            self._undo.append(step)
