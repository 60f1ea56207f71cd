"""
Unit Tests - Document Store Backends
"""
from datetime import date
from types import SimpleNamespace
from unittest import mock

import httpx
import pytest
from postgrest.exceptions import APIError

from catalogy.core.errors import ConflictError, NotFoundError, StorageError
from catalogy.models.analytics import AnalyticsRecord
from catalogy.models.profile import Profile
from catalogy.models.store import Store
from catalogy.repositories.supabase_store import SupabaseDocumentStore

DAY = date(2026, 10, 18)


class TestSqlDocumentStore:
    """Tests for SqlDocumentStore against in-memory SQLite"""

    def test_get_missing_returns_none(self, store):
        assert store.get(Profile, {"id": "nobody"}) is None

    def test_create_then_get(self, store):
        store.create(Profile(id="acct-1", first_name="Ana", email="a@x.com"))

        profile = store.get(Profile, {"id": "acct-1"})

        assert profile.first_name == "Ana"
        assert profile.role == "user"

    def test_duplicate_create_is_a_conflict(self, store):
        store.create(Profile(id="acct-1", first_name="Ana", email="a@x.com"))

        with pytest.raises(ConflictError):
            store.create(Profile(id="acct-1", first_name="Otra", email="b@x.com"))

    def test_composite_key(self, store):
        store.create(AnalyticsRecord(store_id="s1", date=DAY, total_views=1, unique_views=1))

        assert store.get(AnalyticsRecord, {"store_id": "s1", "date": DAY}).total_views == 1
        assert store.get(AnalyticsRecord, {"store_id": "s2", "date": DAY}) is None

    def test_versioned_update(self, store):
        key = {"store_id": "s1", "date": DAY}
        store.create(AnalyticsRecord(store_id="s1", date=DAY, total_views=1, unique_views=1))

        updated = store.update(AnalyticsRecord, key, {"total_views": 2}, expected_version=1)

        assert updated.total_views == 2
        assert updated.version == 2

    def test_stale_version_is_a_conflict(self, store):
        key = {"store_id": "s1", "date": DAY}
        store.create(AnalyticsRecord(store_id="s1", date=DAY, total_views=1, unique_views=1))
        store.update(AnalyticsRecord, key, {"total_views": 2}, expected_version=1)

        with pytest.raises(ConflictError):
            store.update(AnalyticsRecord, key, {"total_views": 99}, expected_version=1)

        assert store.get(AnalyticsRecord, key).total_views == 2

    def test_update_missing_record(self, store):
        with pytest.raises(NotFoundError):
            store.update(Profile, {"id": "nobody"}, {"active": False})

    def test_query_filters_order_and_limit(self, store):
        store.create(Store(id="a", profile_id="p", slug="uno", enabled=True))
        store.create(Store(id="b", profile_id="p", slug="uno", enabled=False))
        store.create(Store(id="c", profile_id="p", slug="dos", enabled=True))

        enabled = store.query(Store, equals={"enabled": True}, order_by="id", descending=True)
        assert [s.id for s in enabled] == ["c", "a"]

        limited = store.query(Store, equals={"slug": "uno"}, limit=1)
        assert len(limited) == 1


def _response(rows):
    return SimpleNamespace(data=rows)


@pytest.fixture
def request_builder():
    """Fluent PostgREST request builder: every filter returns itself"""
    builder = mock.MagicMock()
    for method in ("select", "insert", "update", "eq", "gte", "lte", "order", "limit"):
        getattr(builder, method).return_value = builder
    return builder


@pytest.fixture
def supabase_store(request_builder):
    client = mock.MagicMock()
    client.table.return_value = request_builder
    return SupabaseDocumentStore(client), client


class TestSupabaseDocumentStore:
    """Tests for SupabaseDocumentStore with a mocked client"""

    def test_get(self, supabase_store, request_builder):
        store, client = supabase_store
        request_builder.execute.return_value = _response(
            [{"id": "acct-1", "first_name": "Ana", "last_name": "", "email": "a@x.com"}]
        )

        profile = store.get(Profile, {"id": "acct-1"})

        client.table.assert_called_with("profiles")
        request_builder.eq.assert_called_with("id", "acct-1")
        request_builder.limit.assert_called_with(1)
        assert profile.first_name == "Ana"

    def test_get_missing(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response([])

        assert store.get(Profile, {"id": "nobody"}) is None

    def test_unique_violation_is_a_conflict(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.side_effect = APIError(
            {"code": "23505", "message": "duplicate key value", "hint": None, "details": None}
        )

        with pytest.raises(ConflictError):
            store.create(Profile(id="acct-1", first_name="Ana", email="a@x.com"))

    def test_api_error_is_a_storage_error(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.side_effect = APIError(
            {"code": "PGRST301", "message": "JWT expired", "hint": None, "details": None}
        )

        with pytest.raises(StorageError):
            store.get(Profile, {"id": "acct-1"})

    def test_undecodable_row_is_a_storage_error(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response(
            [{"store_id": "s1", "date": "2026-10-18", "total_views": 2, "unique_views": 2,
              "fingerprints": '["a","b"]', "version": 1}]
        )

        with pytest.raises(StorageError):
            store.get(AnalyticsRecord, {"store_id": "s1", "date": DAY})
        with pytest.raises(StorageError):
            store.query(AnalyticsRecord, equals={"store_id": "s1"})

    def test_transport_error_is_a_storage_error(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(StorageError):
            store.query(Store, equals={"slug": "uno"})

    def test_create_serializes_json(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response([])

        store.create(AnalyticsRecord(store_id="s1", date=DAY, total_views=1, unique_views=1, fingerprints=["fp"]))

        row = request_builder.insert.call_args.args[0]
        assert row["date"] == "2026-10-18"
        assert row["fingerprints"] == ["fp"]

    def test_versioned_update_filters_on_version(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response(
            [{"store_id": "s1", "date": "2026-10-18", "total_views": 2, "unique_views": 1,
              "fingerprints": ["fp"], "version": 2}]
        )

        updated = store.update(
            AnalyticsRecord, {"store_id": "s1", "date": DAY}, {"total_views": 2}, expected_version=1
        )

        request_builder.update.assert_called_with({"total_views": 2, "version": 2})
        request_builder.eq.assert_any_call("date", "2026-10-18")
        request_builder.eq.assert_any_call("version", 1)
        assert updated.version == 2
        assert updated.date == DAY

    def test_stale_version_is_a_conflict(self, supabase_store, request_builder):
        store, _ = supabase_store
        current = {"store_id": "s1", "date": "2026-10-18", "total_views": 5, "unique_views": 3,
                   "fingerprints": [], "version": 4}
        request_builder.execute.side_effect = [_response([]), _response([current])]

        with pytest.raises(ConflictError):
            store.update(AnalyticsRecord, {"store_id": "s1", "date": DAY}, {"total_views": 2}, expected_version=1)

    def test_update_missing_record(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response([])

        with pytest.raises(NotFoundError):
            store.update(Profile, {"id": "nobody"}, {"active": False})

    def test_query_range_and_order(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response([])

        store.query(
            AnalyticsRecord,
            equals={"store_id": "s1"},
            gte={"date": date(2026, 10, 12)},
            lte={"date": DAY},
            order_by="date",
            descending=True,
        )

        request_builder.gte.assert_called_with("date", "2026-10-12")
        request_builder.lte.assert_called_with("date", "2026-10-18")
        request_builder.order.assert_called_with("date", desc=True)

    def test_boolean_filters(self, supabase_store, request_builder):
        store, _ = supabase_store
        request_builder.execute.return_value = _response([])

        store.query(Store, equals={"slug": "uno", "enabled": True}, limit=1)

        request_builder.eq.assert_any_call("enabled", "true")
