"""
Shared test fixtures.

The Supabase client is replaced by an in-memory fake that keeps rows per
table and evaluates the query builder calls the services use.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require these at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import copy
import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Any, Generator, Optional
from uuid import uuid4

from postgrest.exceptions import APIError

# ===================
# MOCK SUPABASE CLIENT
# ===================


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: Any = None, count: Optional[int] = None):
        self.data = data if data is not None else []
        self.count = count


class MockSupabaseQuery:
    """
    Chainable query builder evaluated against the fake client's rows.

    Supports the filters and modifiers used by the services: eq, neq, in_,
    gte, lte, order, range, limit, single, maybe_single and count="exact".
    """

    def __init__(self, client: "MockSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._operation = "select"
        self._payload: Any = None
        self._on_conflict: Optional[str] = None
        self._filters: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, bool]] = []
        self._range: Optional[tuple[int, int]] = None
        self._limit: Optional[int] = None
        self._single = False
        self._maybe_single = False
        self._count: Optional[str] = None

    # Operations

    def select(self, *columns, count: Optional[str] = None):
        self._count = count
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._operation = "update"
        self._payload = data
        return self

    def upsert(self, data, on_conflict: Optional[str] = None):
        self._operation = "upsert"
        self._payload = data
        self._on_conflict = on_conflict
        return self

    def delete(self):
        self._operation = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self._filters.append((column, "eq", value))
        return self

    def neq(self, column, value):
        self._filters.append((column, "neq", value))
        return self

    def in_(self, column, values):
        self._filters.append((column, "in", list(values)))
        return self

    def gte(self, column, value):
        self._filters.append((column, "gte", value))
        return self

    def lte(self, column, value):
        self._filters.append((column, "lte", value))
        return self

    # Modifiers

    def order(self, column, desc: bool = False):
        self._orders.append((column, desc))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def single(self):
        self._single = True
        return self

    def maybe_single(self):
        self._maybe_single = True
        return self

    # Evaluation

    def _matches(self, row: dict) -> bool:
        for column, op, value in self._filters:
            actual = row.get(column)
            if op == "eq" and actual != value:
                return False
            if op == "neq" and actual == value:
                return False
            if op == "in" and actual not in value:
                return False
            if op == "gte" and (actual is None or actual < value):
                return False
            if op == "lte" and (actual is None or actual > value):
                return False
        return True

    def _shape(self, rows: list[dict]) -> MockSupabaseResponse:
        total = len(rows)
        # Apply orders last-to-first so the first order() is the primary key
        for column, desc in reversed(self._orders):
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, r.get(column)),
                reverse=desc
            )
        if self._range is not None:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]

        rows = copy.deepcopy(rows)
        count = total if self._count == "exact" else None

        if self._single:
            if len(rows) != 1:
                raise APIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": "PGRST116",
                    "hint": None,
                    "details": f"The result contains {len(rows)} rows",
                })
            return MockSupabaseResponse(rows[0], count)
        if self._maybe_single:
            return MockSupabaseResponse(rows[0] if rows else None, count)
        return MockSupabaseResponse(rows, count)

    def execute(self) -> MockSupabaseResponse:
        self._client._raise_if_failing(self._table, self._operation)
        rows = self._client._rows(self._table)

        if self._operation == "select":
            return self._shape([r for r in rows if self._matches(r)])

        if self._operation == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            created = []
            for data in payload:
                row = {"id": str(uuid4()), "created_at": _now(), "updated_at": _now(), **copy.deepcopy(data)}
                self._client._check_unique(self._table, row)
                rows.append(row)
                created.append(row)
            return MockSupabaseResponse(copy.deepcopy(created))

        if self._operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    merged = {**row, **copy.deepcopy(self._payload), "updated_at": _now()}
                    self._client._check_unique(self._table, merged, exclude_id=row["id"])
                    row.update(merged)
                    updated.append(row)
            return MockSupabaseResponse(copy.deepcopy(updated))

        if self._operation == "upsert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            keys = [c.strip() for c in (self._on_conflict or "id").split(",")]
            stored = []
            for data in payload:
                existing = next(
                    (r for r in rows if all(r.get(k) == data.get(k) for k in keys)),
                    None
                )
                if existing is not None:
                    existing.update({**copy.deepcopy(data), "updated_at": _now()})
                    stored.append(existing)
                else:
                    row = {"id": str(uuid4()), "created_at": _now(), "updated_at": _now(), **copy.deepcopy(data)}
                    rows.append(row)
                    stored.append(row)
            return MockSupabaseResponse(copy.deepcopy(stored))

        if self._operation == "delete":
            removed = [r for r in rows if self._matches(r)]
            rows[:] = [r for r in rows if not self._matches(r)]
            return MockSupabaseResponse(copy.deepcopy(removed))

        raise AssertionError(f"unsupported operation {self._operation}")


class MockSupabaseTable:
    """Entry point for one table; every call starts a new query."""

    def __init__(self, client: "MockSupabaseClient", name: str):
        self._client = client
        self._name = name

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(self._client, self._name)

    def select(self, *columns, count: Optional[str] = None):
        return self._query().select(*columns, count=count)

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        return self._query().update(data)

    def upsert(self, data, on_conflict: Optional[str] = None):
        return self._query().upsert(data, on_conflict=on_conflict)

    def delete(self):
        return self._query().delete()


class MockSupabaseClient:
    """In-memory Supabase client."""

    def __init__(self):
        self._tables: dict[str, list[dict]] = {}
        self._unique: dict[str, list[tuple[str, ...]]] = {}
        self._failures: dict[tuple[str, str], Exception] = {}
        self.writes: list[tuple[str, str]] = []

    def set_table_data(self, table_name: str, data: list):
        """Replace the rows of a table."""
        self._tables[table_name] = copy.deepcopy(data)

    def get_table_data(self, table_name: str) -> list:
        """Current rows of a table (copy)."""
        return copy.deepcopy(self._tables.get(table_name, []))

    def add_unique_constraint(self, table_name: str, *columns: str):
        """Reject inserts/updates that duplicate these columns (code 23505)."""
        self._unique.setdefault(table_name, []).append(columns)

    def fail(self, table_name: str, operation: str = "select", error: Optional[Exception] = None):
        """Make every `operation` on the table raise."""
        self._failures[(table_name, operation)] = error or Exception("connection refused")

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(self, name)

    def _rows(self, name: str) -> list[dict]:
        return self._tables.setdefault(name, [])

    def _raise_if_failing(self, table: str, operation: str):
        if operation != "select":
            self.writes.append((table, operation))
        error = self._failures.get((table, operation))
        if error is not None:
            raise error

    def _check_unique(self, table: str, row: dict, exclude_id: Optional[str] = None):
        for columns in self._unique.get(table, []):
            for other in self._rows(table):
                if other.get("id") == exclude_id or other is row:
                    continue
                if all(other.get(c) == row.get(c) for c in columns):
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{table}_{"_".join(columns)}_key"',
                        "code": "23505",
                        "hint": None,
                        "details": f"Key ({', '.join(columns)}) already exists.",
                    })


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create an in-memory Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("config_items", [
                ConfigItemFactory.create(category="teams", label="Platform")
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with the fake.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("initiatives", [...])
            # Any service now reads and writes the fake
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.base_repository.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client(mock_db):
    """
    Create FastAPI test client backed by the fake database.

    Usage:
        def test_endpoint(test_client, mock_supabase):
            mock_supabase.set_table_data("initiatives", [...])
            response = test_client.get("/api/initiatives")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
