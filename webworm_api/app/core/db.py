"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), running a single transaction (``get_cursor``)
and applying migrations (``init_db``).  SQLite is used as an embedded,
crash safe store: the database runs in WAL mode with
``synchronous = FULL`` so a committed transaction survives a crash
and an interrupted one leaves the previous state intact.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        -- The url column holds a template in which the episode number
        -- is replaced by the literal marker {{episode}}.
        CREATE TABLE IF NOT EXISTS bookmarks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            url TEXT NOT NULL,
            episode INTEGER NOT NULL DEFAULT 0 CHECK (episode >= 0),
            has_new INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    ``~`` is expanded.  An absolute path is used directly, otherwise
    it is resolved relative to the project root.
    """
    db_url = os.path.expanduser(database_url or settings.database_url)
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None, timeout: Optional[float] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection works in autocommit mode; transactions are opened
    explicitly by ``get_cursor``.  ``timeout`` bounds how long a call
    waits for a lock held by another connection.
    """
    path = db_path or get_database_path()
    conn = sqlite3.connect(
        path,
        timeout=settings.lock_timeout if timeout is None else timeout,
        isolation_level=None,
    )
    # Return rows as dict-like objects keyed by column name
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA synchronous = FULL")
    return conn


@contextmanager
def get_cursor(
    db_path: Optional[str] = None,
    *,
    write: bool = False,
    timeout: Optional[float] = None,
) -> Iterator[sqlite3.Cursor]:
    """Yield a cursor inside one transaction and close the connection on exit.

    Write transactions start with ``BEGIN IMMEDIATE`` so the write lock
    is taken up front and concurrent writers are serialized.  The
    transaction is committed when the block exits normally and rolled
    back on any exception.
    """
    conn = get_connection(db_path, timeout=timeout)
    try:
        conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
        try:
            yield conn.cursor()
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None, timeout: Optional[float] = None) -> None:
    """Create the database file and apply pending migrations.

    The parent directory is created when missing.  Each migration is
    applied together with its version row in one transaction.
    """
    path = db_path or get_database_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(path, timeout=timeout)
    try:
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                conn.executescript(
                    f"BEGIN;\n{sql}\nINSERT INTO migrations (version) VALUES ({int(version)});\nCOMMIT;"
                )
                logger.info("Applied migration %s to %s", version, path)
                current_version = version
    finally:
        conn.close()
