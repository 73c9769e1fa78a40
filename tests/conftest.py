"""
Pytest configuration for the users API.

Provides fixtures for:
- An in-memory stand-in for `UserRepository` (unit tests)
- Source flat files written to a temp directory
- Database connection management (integration tests)
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, Iterable, List, Optional

import psycopg
import pytest

from users_api.config import Settings
from users_api.domain.models import NewUser, UserRecord

HEADER = (
    "name.firstName,name.lastName,age,address.line1,address.line2,address.city,"
    "address.state,gender,employment.status,employment.company,"
    "preferences.food.type,preferences.color.favorite"
)


class FakeUserRepository:
    """
    In-memory repository with the same surface as `UserRepository`.

    `fail_on_insert=n` makes the (n+1)-th insert attempt raise; `fail_on`
    names another method ("schema", "count", "list_users", "list_ages")
    that should raise instead.
    """

    def __init__(self, fail_on_insert: Optional[int] = None, fail_on: Optional[str] = None) -> None:
        self.rows: List[UserRecord] = []
        self.fail_on_insert = fail_on_insert
        self.fail_on = fail_on
        self.insert_calls = 0
        self.schema_calls = 0
        self.atomic_flags: List[bool] = []
        self._next_id = 1

    def _maybe_fail(self, name: str) -> None:
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def ensure_schema(self) -> None:
        self._maybe_fail("schema")
        self.schema_calls += 1

    def count(self) -> int:
        self._maybe_fail("count")
        return len(self.rows)

    def list_users(self) -> List[UserRecord]:
        self._maybe_fail("list_users")
        return sorted(self.rows, key=lambda row: row.id)

    def list_ages(self) -> List[int]:
        self._maybe_fail("list_ages")
        return [row.age for row in self.rows]

    def add(self, user: NewUser) -> int:
        record = UserRecord(id=self._next_id, **user.model_dump())
        self._next_id += 1
        self.rows.append(record)
        return record.id

    def seed_ages(self, ages: Iterable[int]) -> None:
        for age in ages:
            self.add(NewUser(name=f"user-{age}", age=age))

    @contextmanager
    def writer(self, atomic: bool = False) -> Generator[Callable[[NewUser], int], None, None]:
        self.atomic_flags.append(atomic)
        snapshot = list(self.rows)

        def insert(user: NewUser) -> int:
            if self.fail_on_insert is not None and self.insert_calls == self.fail_on_insert:
                raise RuntimeError("insert failed")
            self.insert_calls += 1
            return self.add(user)

        try:
            yield insert
        except Exception:
            if atomic:
                self.rows = snapshot
            raise


@pytest.fixture
def fake_repository() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def make_repository() -> Callable[..., FakeUserRepository]:
    return FakeUserRepository


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Write a users flat file from data lines (header prepended by default).
    """

    def _write(*lines: str, header: Optional[str] = HEADER, name: str = "users.csv") -> Path:
        path = tmp_path / name
        body = [header] if header is not None else []
        body.extend(lines)
        path.write_text("\n".join(body) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture(scope="session")
def sample_csv() -> Path:
    return Path(__file__).parent.parent / "env" / "users_sample.csv"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        DB_HOST=os.getenv("DB_HOST", "localhost"),
        DB_PORT=int(os.getenv("DB_PORT", "5432")),
        DB_USER=os.getenv("DB_USER", "postgres"),
        DB_PASSWORD=os.getenv("DB_PASSWORD", "postgres"),
        DB_NAME=os.getenv("DB_NAME", "users"),
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return test_settings.dsn


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def clean_users_table(db_connection: psycopg.Connection) -> Generator[None, None, None]:
    """
    Drop the users table before and after each test function.
    """
    with db_connection.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS users;")
    yield
    with db_connection.cursor() as cur:
        cur.execute("DROP TABLE IF EXISTS users;")
