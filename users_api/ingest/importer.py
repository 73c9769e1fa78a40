"""
One-shot import of the users flat file into Postgres.

The import runs once at startup. It creates the table if needed and skips
entirely when the table already holds rows. Otherwise it inserts one record
per valid source row, sequentially. Failures are logged and reported in the
returned `ImportResult`; they never propagate to the caller.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Literal, Optional, Protocol, TypedDict, runtime_checkable

from users_api.domain.models import NewUser
from users_api.ingest.parser import build_user, parse_rows
from users_api.utils.logging import get_logger

log = get_logger(__name__)

ImportStatus = Literal["imported", "skipped", "failed"]


class ImportResult(TypedDict, total=False):
    """
    Outcome of a single `Importer.run()` call.
    """

    status: ImportStatus
    rows_read: int
    rows_discarded: int
    inserted: int
    duration_seconds: float
    error: Optional[str]


@runtime_checkable
class UserStore(Protocol):
    """The subset of `UserRepository` the importer writes through."""

    def ensure_schema(self) -> None: ...

    def count(self) -> int: ...

    def writer(self, atomic: bool = False): ...


class Importer:
    """
    Load users from `csv_path` into the store behind `repository`.

    With `atomic=True` the inserts share one transaction, so a failure leaves
    the table empty instead of partially populated.
    """

    def __init__(self, repository: UserStore, csv_path: Path | str, atomic: bool = False) -> None:
        self._repository = repository
        self.csv_path = Path(csv_path)
        self.atomic = atomic

    def _load_users(self) -> tuple[list[NewUser], int]:
        rows = parse_rows(self.csv_path.read_text(encoding="utf-8", errors="replace"))
        users = [user for user in (build_user(row) for row in rows) if user is not None]
        return users, len(rows)

    def run(self) -> ImportResult:
        start = time.perf_counter()
        rows_read = 0
        rows_discarded = 0
        inserted = 0

        def _result(status: ImportStatus, error: Optional[str] = None) -> ImportResult:
            return ImportResult(
                status=status,
                rows_read=rows_read,
                rows_discarded=rows_discarded,
                inserted=inserted,
                duration_seconds=round(time.perf_counter() - start, 3),
                error=error,
            )

        try:
            self._repository.ensure_schema()
            log.info("Users table ready")

            if self._repository.count() > 0:
                log.info("Data already exists, skipping import")
                return _result("skipped")

            users, rows_read = self._load_users()
            rows_discarded = rows_read - len(users)
            if rows_discarded:
                log.info(
                    f"Discarded {rows_discarded} rows without a first name",
                    extra={"rows_discarded": rows_discarded},
                )

            with self._repository.writer(atomic=self.atomic) as insert:
                for user in users:
                    insert(user)
                    inserted += 1
        except Exception as exc:  # noqa: BLE001 - import failures must not stop the server
            if self.atomic:
                inserted = 0
            log.exception(
                "Import failed",
                extra={"csv_path": str(self.csv_path), "inserted": inserted},
            )
            return _result("failed", error=str(exc))

        log.info(
            f"Inserted {inserted} records successfully",
            extra={"inserted": inserted, "rows_read": rows_read},
        )
        return _result("imported")


__all__ = ["ImportResult", "Importer", "UserStore"]
