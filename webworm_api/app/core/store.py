"""
Durable bookmark store backed by SQLite.

``BookmarkStore`` owns every bookmark record.  Each public method runs
as a single transaction obtained from ``db.get_cursor``: mutations take
the write lock up front (``BEGIN IMMEDIATE``) and are committed before
the method returns, so a successful call survives a crash and a failed
one leaves the previous state untouched.  Episode changes are applied
in SQL (``episode = episode + 1``) which keeps concurrent updates of
the same bookmark from overwriting each other.

Database errors are logged and re-raised as ``StorageFailureError``.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from . import episode_url
from .db import get_cursor, get_database_path, init_db
from .errors import DuplicateKeyError, InvalidInputError, NotFoundError, StorageFailureError
from webworm_api.app.schemas.bookmark import MAX_EPISODE, Bookmark, BookmarkCreate

logger = logging.getLogger(__name__)


class BookmarkStore:
    """Uniquely keyed, persistent collection of bookmarks."""

    def __init__(self, db_path: Union[str, Path, None] = None, lock_timeout: Optional[float] = None) -> None:
        self.db_path = str(db_path) if db_path is not None else get_database_path()
        self.lock_timeout = lock_timeout
        self._initialised = False
        self._init_lock = threading.Lock()

    def initialise(self) -> None:
        """Create the database and apply migrations (once per instance)."""
        with self._init_lock:
            if self._initialised:
                return
            try:
                init_db(self.db_path, timeout=self.lock_timeout)
            except (sqlite3.Error, OSError) as exc:
                logger.error("Could not open bookmark database %s: %s", self.db_path, exc)
                raise StorageFailureError(f"could not open bookmark database: {exc}") from exc
            self._initialised = True
            logger.info("Bookmark database ready at %s", self.db_path)

    @contextmanager
    def _transaction(self, write: bool = False) -> Iterator[sqlite3.Cursor]:
        if not self._initialised:
            self.initialise()
        try:
            with get_cursor(self.db_path, write=write, timeout=self.lock_timeout) as cursor:
                yield cursor
        except OverflowError as exc:
            raise InvalidInputError(f"episode must be at most {MAX_EPISODE}") from exc
        except sqlite3.Error as exc:
            logger.error("Bookmark storage failure on %s: %s", self.db_path, exc)
            raise StorageFailureError(f"bookmark storage failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def get_all(self) -> List[Bookmark]:
        """Return every bookmark in insertion order."""
        with self._transaction() as cursor:
            rows = cursor.execute(
                "SELECT name, url, episode, has_new FROM bookmarks ORDER BY id"
            ).fetchall()
        return [self._row_to_bookmark(row) for row in rows]

    def get(self, name: str) -> Bookmark:
        with self._transaction() as cursor:
            row = self._fetch(cursor, name)
        return self._row_to_bookmark(row)

    def render_episode_url(self, name: str, episode: int) -> str:
        """Render the URL of an arbitrary episode of a bookmark."""
        with self._transaction() as cursor:
            row = self._fetch(cursor, name)
        return episode_url.render(row["url"], episode)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def insert(self, bookmark: BookmarkCreate) -> Bookmark:
        """Insert a new bookmark.

        Raises ``DuplicateKeyError`` if the name is taken and
        ``InvalidInputError`` if the episode does not occur in the URL.
        The stored record always starts with ``has_new`` unset.
        """
        template = episode_url.to_template(bookmark.url, bookmark.episode)
        with self._transaction(write=True) as cursor:
            exists = cursor.execute(
                "SELECT 1 FROM bookmarks WHERE name = ?", (bookmark.name,)
            ).fetchone()
            if exists:
                raise DuplicateKeyError(f"the name {bookmark.name} already exists")
            cursor.execute(
                "INSERT INTO bookmarks (name, url, episode, has_new) VALUES (?, ?, ?, 0)",
                (bookmark.name, template, bookmark.episode),
            )
            row = self._fetch(cursor, bookmark.name)
        return self._row_to_bookmark(row)

    def mutate_episode(self, name: str, delta: int) -> Bookmark:
        """Move a bookmark one episode forward (``+1``) or back (``-1``).

        Both directions set ``has_new``.  Going back from episode 0
        leaves the record unchanged; going past ``MAX_EPISODE`` raises
        ``InvalidInputError``.
        """
        if delta == 1:
            sql = (
                "UPDATE bookmarks SET episode = episode + 1, has_new = 1,"
                " updated_at = CURRENT_TIMESTAMP WHERE name = ? AND episode < ?"
            )
            params = (name, MAX_EPISODE)
        elif delta == -1:
            sql = (
                "UPDATE bookmarks SET episode = episode - 1, has_new = 1,"
                " updated_at = CURRENT_TIMESTAMP WHERE name = ? AND episode > 0"
            )
            params = (name,)
        else:
            raise InvalidInputError(f"episode can only change by +1 or -1, not {delta}")
        with self._transaction(write=True) as cursor:
            cursor.execute(sql, params)
            changed = cursor.rowcount
            row = self._fetch(cursor, name)
        if not changed and delta == 1:
            raise InvalidInputError(f"{name} is already at the last possible episode")
        if not changed:
            logger.debug("Bookmark %s already at episode 0", name)
        return self._row_to_bookmark(row)

    def mark_new(self, name: str) -> Bookmark:
        with self._transaction(write=True) as cursor:
            cursor.execute(
                "UPDATE bookmarks SET has_new = 1, updated_at = CURRENT_TIMESTAMP WHERE name = ?",
                (name,),
            )
            row = self._fetch(cursor, name)
        return self._row_to_bookmark(row)

    def remove(self, name: str) -> None:
        """Delete a bookmark; raises ``NotFoundError`` if it does not exist."""
        with self._transaction(write=True) as cursor:
            cursor.execute("DELETE FROM bookmarks WHERE name = ?", (name,))
            if cursor.rowcount == 0:
                raise NotFoundError(f"no bookmark named {name}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _fetch(cursor: sqlite3.Cursor, name: str) -> sqlite3.Row:
        row = cursor.execute(
            "SELECT name, url, episode, has_new FROM bookmarks WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            raise NotFoundError(f"no bookmark named {name}")
        return row

    @staticmethod
    def _row_to_bookmark(row: sqlite3.Row) -> Bookmark:
        """Convert a database row to a Bookmark with the URL rendered."""
        return Bookmark(
            name=row["name"],
            url=episode_url.render(row["url"], row["episode"]),
            episode=row["episode"],
            has_new=bool(row["has_new"]),
        )
