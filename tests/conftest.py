"""
Pytest configuration and fixtures for Studio Onboarding tests.
"""

import os
import threading

import pytest
from unittest.mock import MagicMock

from postgrest.exceptions import APIError

# Keep tests away from any real Supabase project
os.environ["ONBOARDING_ENV"] = "development"
os.environ.pop("SUPABASE_URL", None)
os.environ.pop("SUPABASE_ANON_KEY", None)

from studio_onboarding.config import get_settings
from studio_onboarding.db.client import reset_client
from studio_onboarding.recorder import ProgressRecorder


class FakeQuery:
    """Chainable stand-in for a PostgREST request builder over one table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op: str | None = None
        self._values: dict = {}
        self._filters: list[tuple[str, object]] = []

    def insert(self, payload: dict) -> "FakeQuery":
        self._op, self._values = "insert", payload
        return self

    def update(self, values: dict) -> "FakeQuery":
        self._op, self._values = "update", values
        return self

    def eq(self, column: str, value) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def execute(self):
        with self._db.lock:
            return self._execute()

    def _execute(self):
        self._db.calls.append((self._op, self._table, dict(self._values)))
        failure = self._db.failures.pop(self._op, None)
        if failure is not None:
            raise failure

        rows = self._db.tables.setdefault(self._table, [])
        if self._op == "insert":
            for column in self._db.unique_columns:
                if any(row[column] == self._values[column] for row in rows):
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{self._table}_{column}_key"',
                        "code": "23505",
                        "hint": None,
                        "details": f"Key ({column})=({self._values[column]}) already exists.",
                    })
            rows.append(dict(self._values))
            return MagicMock(data=[dict(self._values)])

        matched = [row for row in rows if all(row.get(c) == v for c, v in self._filters)]
        for row in matched:
            row.update(self._values)
        return MagicMock(data=[dict(row) for row in matched])


class FakeSupabase:
    """In-memory Supabase client enforcing unique keys like the real table."""

    def __init__(self, unique_columns: tuple[str, ...] = ("id", "designer_name")):
        self.unique_columns = unique_columns
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str, dict]] = []
        self.failures: dict[str, Exception] = {}
        self.lock = threading.Lock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_next(self, op: str, error: Exception) -> None:
        self.failures[op] = error

    def rows(self, table: str = "progress_tracker") -> list[dict]:
        return self.tables.get(table, [])


@pytest.fixture(autouse=True)
def _isolated_settings():
    """Fresh settings and no shared client for every test."""
    get_settings.cache_clear()
    reset_client()
    yield
    get_settings.cache_clear()
    reset_client()


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations
    mock_table = MagicMock()
    mock_table.insert.return_value = mock_table
    mock_table.update.return_value = mock_table
    mock_table.eq.return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])

    mock_client.table.return_value = mock_table

    return mock_client


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def recorder(fake_supabase):
    """Recorder wired to the in-memory store with a fixed clock."""
    return ProgressRecorder(
        client_provider=lambda: fake_supabase,
        table="progress_tracker",
        anonymous_name="anonymous",
        clock=lambda: "2026-01-01T00:00:00+00:00",
    )
