# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - An in-memory stand-in for the Supabase client (tables, RPC, storage)
#   installed as the SupabaseClient singleton
# - A TestClient with authentication overridden
# =============================================================================

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from lib.supabase_client import SupabaseClient

PUBLIC_URL_BASE = "https://test-project.supabase.co/storage/v1/object/public"
ADMIN_ID = "11111111-1111-4111-8111-111111111111"


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeAPIError(Exception):
    """Mimics postgrest's APIError: a message plus a Postgres/PostgREST code."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


def _sort_key(column: str):
    def key(row: dict) -> tuple:
        value = row.get(column)
        return (value is None, "" if value is None else value)
    return key


def _ilike(value: Any, pattern: str) -> bool:
    needle = pattern.strip("%").lower()
    return needle in str(value or "").lower()


class FakeQuery:
    """
    Chainable query over one in-memory table.

    Supports the subset of the postgrest builder the services use. Selected
    column lists are ignored; whole rows come back.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._filters: list[Callable[[dict], bool]] = []
        self._orders: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._range: tuple[int, int] | None = None
        self._single = False
        self._count: str | None = None
        self._negate = False

    # -- operations --------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self._op = "select"
        self._count = count
        return self

    def insert(self, data: dict | list[dict]) -> "FakeQuery":
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data: dict) -> "FakeQuery":
        self._op = "update"
        self._payload = data
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # -- filters -----------------------------------------------------------

    @property
    def not_(self) -> "FakeQuery":
        self._negate = True
        return self

    def _where(self, predicate: Callable[[dict], bool]) -> "FakeQuery":
        if self._negate:
            self._negate = False
            self._filters.append(lambda row: not predicate(row))
        else:
            self._filters.append(predicate)
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._where(lambda row: row.get(column) == value)

    def neq(self, column: str, value: Any) -> "FakeQuery":
        return self._where(lambda row: row.get(column) != value)

    def in_(self, column: str, values: list) -> "FakeQuery":
        values = list(values)
        return self._where(lambda row: row.get(column) in values)

    def is_(self, column: str, value: Any) -> "FakeQuery":
        if value in ("null", None):
            return self._where(lambda row: row.get(column) is None)
        return self._where(lambda row: row.get(column) == value)

    def gte(self, column: str, value: Any) -> "FakeQuery":
        return self._where(lambda row: row.get(column) is not None and row.get(column) >= value)

    def lte(self, column: str, value: Any) -> "FakeQuery":
        return self._where(lambda row: row.get(column) is not None and row.get(column) <= value)

    def lt(self, column: str, value: Any) -> "FakeQuery":
        return self._where(lambda row: row.get(column) is not None and row.get(column) < value)

    def or_(self, expression: str) -> "FakeQuery":
        """Only "column.ilike.%term%" alternatives are understood."""
        clauses = []
        for clause in expression.split(","):
            column, operator, pattern = clause.split(".", 2)
            assert operator == "ilike", f"unsupported or_ operator {operator}"
            clauses.append((column, pattern))
        return self._where(
            lambda row: any(_ilike(row.get(column), pattern) for column, pattern in clauses)
        )

    # -- shaping -----------------------------------------------------------

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._orders.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def single(self) -> "FakeQuery":
        self._single = True
        return self

    # -- execution ---------------------------------------------------------

    def _matches(self, row: dict) -> bool:
        return all(predicate(row) for predicate in self._filters)

    def execute(self) -> FakeResponse:
        self._db.check_failure(self._table, self._op)
        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            created = [self._db.new_row(dict(row)) for row in payload]
            rows.extend(created)
            return FakeResponse([dict(row) for row in created])

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self._op == "delete":
            removed = [row for row in rows if self._matches(row)]
            self._db.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResponse([dict(row) for row in removed])

        result = [dict(row) for row in rows if self._matches(row)]
        for column, desc in reversed(self._orders):
            result.sort(key=_sort_key(column), reverse=desc)

        count = len(result) if self._count else None
        if self._range is not None:
            start, end = self._range
            result = result[start:end + 1]
        if self._limit is not None:
            result = result[:self._limit]

        if self._single:
            if len(result) != 1:
                raise FakeAPIError(
                    "JSON object requested, multiple (or no) rows returned",
                    code="PGRST116",
                )
            return FakeResponse(result[0], count)

        return FakeResponse(result, count)


class FakeRPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self._db = db
        self._name = name
        self._params = params

    def execute(self) -> FakeResponse:
        self._db.rpc_calls.append((self._name, self._params))
        handler = self._db.rpc_handlers.get(self._name)
        if handler is None:
            raise FakeAPIError(f"Could not find the function public.{self._name}", code="PGRST202")
        return FakeResponse(handler(self._params))


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self._storage = storage
        self._name = name

    @property
    def files(self) -> dict[str, bytes]:
        return self._storage.buckets.setdefault(self._name, {})

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        if self._name in self._storage.failing_buckets:
            raise FakeAPIError(f"Bucket not found: {self._name}")
        if path in self.files and (file_options or {}).get("upsert") != "true":
            raise FakeAPIError("The resource already exists")
        self.files[path] = file
        self._storage.uploads.append((self._name, path, file_options or {}))
        return {"path": path}

    def remove(self, paths: list[str]):
        if self._name in self._storage.failing_buckets:
            raise FakeAPIError(f"Bucket not found: {self._name}")
        removed = []
        for path in paths:
            if self.files.pop(path, None) is not None:
                removed.append({"name": path})
        self._storage.removals.append((self._name, list(paths)))
        return removed

    def get_public_url(self, path: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self._name}/{path}"

    def list(self, folder: str = "", options: dict | None = None):
        options = options or {}
        prefix = f"{folder.strip('/')}/" if folder.strip("/") else ""
        entries = [
            {
                "name": path[len(prefix):],
                "id": path,
                "metadata": {"size": len(content), "mimetype": "image/png"},
                "created_at": None,
                "updated_at": None,
            }
            for path, content in self.files.items()
            if path.startswith(prefix) and "/" not in path[len(prefix):]
        ]
        offset = options.get("offset", 0)
        limit = options.get("limit", 100)
        return entries[offset:offset + limit]


class FakeStorage:
    def __init__(self):
        self.buckets: dict[str, dict[str, bytes]] = {}
        self.failing_buckets: set[str] = set()
        self.uploads: list[tuple[str, str, dict]] = []
        self.removals: list[tuple[str, list[str]]] = []

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self) -> list[dict]:
        return [{"name": name} for name in self.buckets]


class FakeSupabase:
    """
    In-memory replacement for the supabase Client.

    Example:
        fake.seed("events", [{"title": "GITEX", "slug": "gitex"}])
        fake.fail("events", "insert", FakeAPIError("dup", code="23505"))
        fake.rpc_handlers["get_about_main_section"] = lambda params: [...]
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.rpc_handlers: dict[str, Callable[[dict], Any]] = {}
        self.rpc_calls: list[tuple[str, dict]] = []
        self.storage = FakeStorage()
        self._failures: dict[tuple[str, str], Exception] = {}
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict | None = None) -> FakeRPC:
        return FakeRPC(self, name, params or {})

    # -- test helpers ------------------------------------------------------

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def new_row(self, row: dict) -> dict:
        row.setdefault("id", str(uuid4()))
        stamp = self._tick()
        row.setdefault("created_at", stamp)
        row.setdefault("updated_at", stamp)
        return row

    def seed(self, table: str, rows: list[dict]) -> list[dict]:
        created = [self.new_row(dict(row)) for row in rows]
        self.tables.setdefault(table, []).extend(created)
        return [dict(row) for row in created]

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def fail(self, table: str, op: str, error: Exception) -> None:
        self._failures[(table, op)] = error

    def check_failure(self, table: str, op: str) -> None:
        error = self._failures.get((table, op))
        if error is not None:
            raise error


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    """Install an empty FakeSupabase as the shared client."""
    fake = FakeSupabase()
    previous = SupabaseClient._instance
    SupabaseClient._instance = fake
    yield fake
    SupabaseClient._instance = previous


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notification_center(clock):
    from lib.notifications import NotificationCenter

    return NotificationCenter(auto_hide_seconds=5, clock=clock)


@pytest.fixture
def admin_user():
    from app.auth import AuthUser

    return AuthUser(id=ADMIN_ID, email="admin@example.com", role="authenticated")


@pytest.fixture
def client(fake_db, admin_user, notification_center):
    """TestClient signed in as admin_user, with a fake-clock notification center."""
    from fastapi.testclient import TestClient

    from app.auth import get_current_user
    from app.dependencies import get_notification_center
    from app.main import app

    app.dependency_overrides[get_current_user] = lambda: admin_user
    app.dependency_overrides[get_notification_center] = lambda: notification_center
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db):
    """TestClient without any authentication override."""
    from fastapi.testclient import TestClient

    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def png_bytes():
    """Smallest useful PNG payload (signature only; content is never decoded)."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
