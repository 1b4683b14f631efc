"""SQLite connection owner shared by the host registry and the posting store."""

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Self

from loguru import logger

from ats_crawler.exceptions import StoreUnavailable
from ats_crawler.storage.DDL import _DDL

# Fixed-width UTC timestamps so that text comparison in SQL matches time order.
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f+00:00"


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_db_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime(_TIMESTAMP_FORMAT)


class Database:
    """One connection per run, opened and closed by the caller.

    Usage:
        with Database(settings.database_path) as db:
            registry = HostRegistry(db)
            ...

    Every write goes through `transaction()`, which commits on success and
    rolls back on any exception.
    """

    def __init__(self, path: Path | str):
        self._path = path
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        """Connect and make sure the schema exists.

        Raises:
            StoreUnavailable
        """
        try:
            if str(self._path) != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            conn.executescript(_DDL)
        except (sqlite3.Error, OSError) as e:
            raise StoreUnavailable(f"cannot open store at {self._path}: {e}") from e
        self._conn = conn
        logger.debug(f"Opened store at {self._path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug(f"Closed store at {self._path}")

    def __enter__(self) -> Self:
        self.open()
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Use 'with Database(path) as db:' context manager.")
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self.connection
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
