"""
SQL access to the `users` table.

`UserRepository` is the only place that knows the table layout. The importer
and the query service depend on its methods, not on psycopg.
"""

from __future__ import annotations

from contextlib import contextmanager, nullcontext
from typing import Callable, Generator, List

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from users_api.domain.models import NewUser, UserRecord
from users_api.infrastructure.db_factory import Database

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR NOT NULL,
        age INT NOT NULL,
        address JSONB,
        additional_info JSONB
    );
"""

COUNT_SQL = "SELECT COUNT(*) AS count FROM users;"

INSERT_SQL = """
    INSERT INTO users (name, age, address, additional_info)
    VALUES (%s, %s, %s, %s)
    RETURNING id;
"""

SELECT_ALL_SQL = "SELECT id, name, age, address, additional_info FROM users ORDER BY id;"

SELECT_AGES_SQL = "SELECT age FROM users;"

InsertFn = Callable[[NewUser], int]


class UserRepository:
    def __init__(self, database: Database) -> None:
        self._database = database

    def ensure_schema(self) -> None:
        with self._database.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(CREATE_TABLE_SQL)

    def count(self) -> int:
        with self._database.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(COUNT_SQL)
                row = cur.fetchone()
        return int(row["count"]) if row else 0

    def list_users(self) -> List[UserRecord]:
        with self._database.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(SELECT_ALL_SQL)
                rows = cur.fetchall()
        return [UserRecord.model_validate(row) for row in rows]

    def list_ages(self) -> List[int]:
        with self._database.connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(SELECT_AGES_SQL)
                rows = cur.fetchall()
        return [int(row["age"]) for row in rows]

    @contextmanager
    def writer(self, atomic: bool = False) -> Generator[InsertFn, None, None]:
        """
        Yield an insert function bound to a single connection.

        With `atomic=True` every insert made through the function belongs to
        one transaction, rolled back if the block raises. Otherwise each
        insert commits immediately.
        """
        with self._database.connection() as conn:
            with conn.transaction() if atomic else nullcontext():

                def insert(user: NewUser) -> int:
                    with conn.cursor(row_factory=dict_row) as cur:
                        cur.execute(
                            INSERT_SQL,
                            (
                                user.name,
                                user.age,
                                Jsonb(user.address.model_dump()),
                                Jsonb(user.additional_info.model_dump()),
                            ),
                        )
                        row = cur.fetchone()
                    return int(row["id"])

                yield insert


__all__ = ["UserRepository", "CREATE_TABLE_SQL"]
