"""Supabase client initialization and helper methods."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog
from supabase import Client, create_client

from bio_forge.config import get_settings
from bio_forge.core.errors import CollaboratorFailure

logger = structlog.get_logger()


def _apply_filters(query: Any, filters: dict[str, Any] | None) -> Any:
    if filters:
        for key, value in filters.items():
            query = query.eq(key, value)
    return query


def _execute(query: Any, table: str, op: str) -> Any:
    """Run a built query, turning driver errors into CollaboratorFailure."""
    try:
        return query.execute()
    except Exception as e:
        logger.warning("supabase.query_failed", table=table, op=op, error=str(e))
        raise CollaboratorFailure(f"Store {op} on '{table}' failed: {e}") from e


class SupabaseClient:
    """Wrapper around the Supabase client with convenience methods."""

    def __init__(self, client: Client) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        """Access the raw Supabase client."""
        return self._client

    def insert(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a record and return the created row."""
        result = _execute(self._client.table(table).insert(data), table, "insert")
        return result.data[0]

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Select records with optional filters, ordering, and limit."""
        query = _apply_filters(self._client.table(table).select("*"), filters)

        if order_by:
            query = query.order(order_by, desc=not ascending)

        if limit:
            query = query.limit(limit)

        return _execute(query, table, "select").data

    def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count matching rows without fetching them."""
        query = self._client.table(table).select("*", count="exact", head=True)
        result = _execute(_apply_filters(query, filters), table, "count")
        return result.count or 0

    def update(self, table: str, id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Update a record by ID."""
        result = _execute(self._client.table(table).update(data).eq("id", id), table, "update")
        if not result.data:
            raise CollaboratorFailure(f"Row {id} not found in {table}")
        return result.data[0]

    def update_where(
        self, table: str, filters: dict[str, Any], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """Conditional update. Returns only the rows that matched every filter."""
        query = _apply_filters(self._client.table(table).update(data), filters)
        return _execute(query, table, "update").data

    def upsert(self, table: str, data: dict[str, Any], on_conflict: str) -> dict[str, Any]:
        """Insert or overwrite the row identified by the ``on_conflict`` columns."""
        query = self._client.table(table).upsert(data, on_conflict=on_conflict)
        return _execute(query, table, "upsert").data[0]

    def delete(self, table: str, id: str) -> None:
        """Delete a record by ID."""
        _execute(self._client.table(table).delete().eq("id", id), table, "delete")

    def rpc(self, function: str, params: dict[str, Any]) -> Any:
        """Call a stored function; runs inside a single database transaction."""
        return _execute(self._client.rpc(function, params), function, "rpc").data

    def get_user(self, token: str) -> dict[str, Any] | None:
        """Resolve a bearer token through Supabase Auth. None if invalid."""
        try:
            response = self._client.auth.get_user(token)
        except Exception as e:
            logger.info("supabase.auth_rejected", error=str(e))
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return {"id": str(user.id), "email": user.email}


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """Get cached Supabase client instance."""
    settings = get_settings()
    client = create_client(settings.supabase_url, settings.supabase_key)
    logger.info("supabase.connected", url=settings.supabase_url)
    return SupabaseClient(client)
