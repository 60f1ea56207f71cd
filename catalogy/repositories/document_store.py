# catalogy/repositories/document_store.py
from typing import Any, Protocol, TypeVar

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from catalogy.core.errors import ConflictError, NotFoundError, StorageError

M = TypeVar("M", bound=SQLModel)

# Primary key as {field_name: value}; composite keys list every field.
Key = dict[str, Any]


class DocumentStore(Protocol):
    """
    Keyed get/create/update/query over uniquely keyed records.

    Contract shared by every backend:
      - get:    None when the key does not exist
      - create: ConflictError when the key already exists
      - update: NotFoundError when the key does not exist;
                ConflictError when `expected_version` no longer matches
      - any other backend failure surfaces as StorageError

    There are no multi-record transactions: every call commits on its own.
    """

    def get(self, model: type[M], key: Key) -> M | None: ...

    def create(self, document: M) -> M: ...

    def update(
        self,
        model: type[M],
        key: Key,
        changes: dict[str, Any],
        expected_version: int | None = None,
    ) -> M: ...

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
    ) -> list[M]: ...


class SqlDocumentStore:
    """
    DocumentStore backed by SQLModel (Supabase Postgres in production,
    SQLite in tests).

    Responsibilities:
      - Pure DB operations, one short-lived Session per call
      - No FastAPI, no business logic
      - Map SQLAlchemy exceptions to the store error taxonomy
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        # Returned objects outlive the session; keep their loaded state.
        return Session(self.engine, expire_on_commit=False)

    def get(self, model: type[M], key: Key) -> M | None:
        """Return a record by primary key, or None if not found."""
        try:
            with self._session() as session:
                return session.get(model, key)
        except SQLAlchemyError as e:
            raise StorageError(f"get {model.__tablename__} failed: {e}") from e

    def create(self, document: M) -> M:
        """Insert a new record and return the persisted row."""
        table = type(document).__tablename__
        try:
            with self._session() as session:
                session.add(document)
                session.commit()
                session.refresh(document)
                return document
        except IntegrityError as e:
            raise ConflictError(f"{table} record already exists") from e
        except SQLAlchemyError as e:
            raise StorageError(f"create {table} failed: {e}") from e

    def update(
        self,
        model: type[M],
        key: Key,
        changes: dict[str, Any],
        expected_version: int | None = None,
    ) -> M:
        """
        Apply `changes` to the record at `key`.

        With `expected_version`, the write only happens if the stored
        version still equals it (compare-and-set) and bumps the version.
        """
        table = model.__tablename__
        values = dict(changes)
        stmt = update(model).where(
            *[getattr(model, field) == value for field, value in key.items()]
        )
        if expected_version is not None:
            stmt = stmt.where(model.version == expected_version)
            values["version"] = expected_version + 1
        stmt = stmt.values(**values)

        try:
            with self._session() as session:
                result = session.exec(stmt)
                if result.rowcount == 0:
                    session.rollback()
                    if expected_version is not None and session.get(model, key):
                        raise ConflictError(
                            f"{table} version {expected_version} is stale"
                        )
                    raise NotFoundError(f"{table} record not found")
                session.commit()
                return session.get(model, key)
        except IntegrityError as e:
            raise ConflictError(f"update {table} violates a constraint") from e
        except SQLAlchemyError as e:
            raise StorageError(f"update {table} failed: {e}") from e

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
        """
        Filtered listing.

        Args:
            equals: field == value filters
            gte / lte: inclusive range filters
            order_by: field name to sort on
            limit: max number of rows returned
        """
        stmt = select(model)
        for field, value in (equals or {}).items():
            stmt = stmt.where(getattr(model, field) == value)
        for field, value in (gte or {}).items():
            stmt = stmt.where(getattr(model, field) >= value)
        for field, value in (lte or {}).items():
            stmt = stmt.where(getattr(model, field) <= value)
        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column)
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            with self._session() as session:
                return list(session.exec(stmt).all())
        except SQLAlchemyError as e:
            raise StorageError(f"query {model.__tablename__} failed: {e}") from e
