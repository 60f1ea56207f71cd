# catalogy/repositories/supabase_store.py
from datetime import date, datetime
from typing import Any

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError
from supabase import Client

from catalogy.core.errors import ConflictError, NotFoundError, StorageError
from catalogy.repositories.document_store import Key, M

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _encode(value: Any) -> Any:
    """Render a filter value the way PostgREST expects it in the query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class SupabaseDocumentStore:
    """
    DocumentStore backed by the Supabase table API (PostgREST).

    Table names come from each model's `__tablename__`, so the SQL schema
    and the REST schema stay the same.

    Errors:
      - unique violations (23505) -> ConflictError
      - any other API / transport failure -> StorageError
      - rows that do not fit the model -> StorageError
    """

    def __init__(self, client: Client):
        self.client = client

    def _table(self, model: type[M]):
        return self.client.table(model.__tablename__)

    def _execute(self, request, table: str):
        try:
            return request.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConflictError(f"{table} record already exists") from e
            raise StorageError(f"{table} request failed: {e.message}") from e
        except httpx.HTTPError as e:
            raise StorageError(f"{table} request failed: {e}") from e

    def _decode(self, model: type[M], row: dict[str, Any]) -> M:
        try:
            return model.model_validate(row)
        except PydanticValidationError as e:
            raise StorageError(
                f"{model.__tablename__} row does not match the schema: {e}"
            ) from e

    def _where(self, request, filters: Key):
        for field, value in filters.items():
            request = request.eq(field, _encode(value))
        return request

    def get(self, model: type[M], key: Key) -> M | None:
        request = self._where(self._table(model).select("*"), key).limit(1)
        rows = self._execute(request, model.__tablename__).data
        return self._decode(model, rows[0]) if rows else None

    def create(self, document: M) -> M:
        model = type(document)
        request = self._table(model).insert(document.model_dump(mode="json"))
        rows = self._execute(request, model.__tablename__).data
        return self._decode(model, rows[0]) if rows else document

    def update(
        self,
        model: type[M],
        key: Key,
        changes: dict[str, Any],
        expected_version: int | None = None,
    ) -> M:
        table = model.__tablename__
        values = {field: _encode(value) for field, value in changes.items()}
        filters = dict(key)
        if expected_version is not None:
            values["version"] = expected_version + 1
            filters["version"] = expected_version

        request = self._where(self._table(model).update(values), filters)
        rows = self._execute(request, table).data
        if rows:
            return self._decode(model, rows[0])

        # Nothing matched: tell a stale version apart from a missing row.
        if expected_version is not None and self.get(model, key) is not None:
            raise ConflictError(f"{table} version {expected_version} is stale")
        raise NotFoundError(f"{table} record not found")

    def query(
        self,
        model: type[M],
        *,
        equals: dict[str, Any] | None = None,
        gte: dict[str, Any] | None = None,
        lte: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[M]:
        request = self._where(self._table(model).select("*"), equals or {})
        for field, value in (gte or {}).items():
            request = request.gte(field, _encode(value))
        for field, value in (lte or {}).items():
            request = request.lte(field, _encode(value))
        if order_by:
            request = request.order(order_by, desc=descending)
        if limit is not None:
            request = request.limit(limit)

        rows = self._execute(request, model.__tablename__).data
        return [self._decode(model, row) for row in rows]
