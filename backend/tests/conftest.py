"""
Test configuration and fixtures.

Provides common fixtures and setup for all tests.
"""

import json
import os
from datetime import date
from typing import Any, Dict, List

import httpx
import pytest
import pytest_asyncio

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"

from gunce.core.security import PasswordGate
from gunce.core.settings_store import SettingsStore
from gunce.db.session import create_local_engine, create_session_factory, create_tables
from gunce.schemas.diary_entry import DiaryEntryCreate
from gunce.services.storage.adapters.local_adapter import LocalStorageAdapter
from gunce.services.storage.adapters.remote_adapter import RemoteStorageAdapter
from gunce.services.storage.supabase_client import SupabaseClient

SUPABASE_URL = "https://diary.supabase.test"


class FakeSupabase:
    """
    In-memory stand-in for the PostgREST endpoint, served through httpx.MockTransport.

    Understands the subset of the query language the remote adapter sends:
    eq, gte, lte, cs, not.is.null filters, select, order, offset and limit.
    """

    def __init__(self):
        self.tables: Dict[str, Dict[str, Dict[str, Any]]] = {"diary_entries": {}, "diary_tags": {}}
        self.requests: List[httpx.Request] = []
        self.fail_with: int | None = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def writes(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method in ("POST", "PATCH", "DELETE")]

    @staticmethod
    def _matches(row: Dict[str, Any], column: str, expression: str) -> bool:
        operator, _, operand = expression.partition(".")
        value = row.get(column)
        if operator == "eq":
            if isinstance(value, bool):
                return str(value).lower() == operand
            return str(value) == operand
        if operator == "gte":
            return value is not None and str(value) >= operand
        if operator == "lte":
            return value is not None and str(value) <= operand
        if operator == "cs":
            return all(tag in (value or []) for tag in json.loads(operand))
        if operator == "not" and operand == "is.null":
            return value is not None
        raise AssertionError(f"Unsupported filter {column}={expression}")

    def _select_rows(self, table: str, params: List[tuple]) -> List[Dict[str, Any]]:
        rows = list(self.tables[table].values())
        offset, limit = 0, None
        for key, value in params:
            if key == "select":
                continue
            if key == "order":
                for part in reversed(value.split(",")):
                    column, _, direction = part.partition(".")
                    rows.sort(key=lambda r: str(r.get(column)), reverse=direction == "desc")
            elif key == "offset":
                offset = int(value)
            elif key == "limit":
                limit = int(value)
            elif key == "or":
                continue
            else:
                rows = [row for row in rows if self._matches(row, key, value)]
        rows = rows[offset:]
        return rows if limit is None else rows[:limit]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"message": "boom"})

        table = request.url.path.rsplit("/", 1)[-1]
        params = list(request.url.params.multi_items())
        store = self.tables[table]

        if request.method == "HEAD":
            total = len(self._select_rows(table, params))
            return httpx.Response(200, headers={"content-range": f"*/{total}"})

        if request.method == "GET":
            rows = self._select_rows(table, params)
            columns = dict(params).get("select", "*")
            if columns != "*":
                wanted = columns.split(",")
                rows = [{key: row.get(key) for key in wanted} for row in rows]
            return httpx.Response(200, json=rows)

        if request.method == "POST":
            upsert = "merge-duplicates" in request.headers.get("prefer", "")
            created = []
            for row in json.loads(request.content):
                if row["id"] in store and not upsert:
                    return httpx.Response(409, json={"message": "duplicate key"})
                store[row["id"]] = {**store.get(row["id"], {}), **row}
                created.append(store[row["id"]])
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            values = json.loads(request.content)
            rows = self._select_rows(table, params)
            for row in rows:
                row.update(values)
            return httpx.Response(200, json=rows)

        if request.method == "DELETE":
            rows = self._select_rows(table, params)
            for row in rows:
                del store[row["id"]]
            return httpx.Response(200, json=rows)

        return httpx.Response(405)


def make_entry(**overrides) -> DiaryEntryCreate:
    data = {
        "title": "İlk gün",
        "content": "Bugün yeni günlük uygulamama ilk girişimi yapıyorum.",
        "entry_date": date(2024, 1, 15),
    }
    data.update(overrides)
    return DiaryEntryCreate(**data)


@pytest.fixture
def entry_factory():
    return make_entry


@pytest_asyncio.fixture(scope="function")
async def session_factory():
    """In-memory SQLite database with all tables created."""
    engine = create_local_engine("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    try:
        yield create_session_factory(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def local_adapter(session_factory):
    return LocalStorageAdapter(session_factory, locale="tr")


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def remote_adapter(fake_supabase):
    client = SupabaseClient(SUPABASE_URL, "anon-key", transport=fake_supabase.transport)
    return RemoteStorageAdapter(client, locale="tr")


@pytest.fixture
def settings_store():
    return SettingsStore()


@pytest.fixture
def gate(settings_store):
    return PasswordGate(settings_store)
