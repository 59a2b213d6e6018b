"""
Service layer for bookmarks.

``BookmarkService`` exposes the operations used by the transport
layer (``fetch_bookmarks``, ``insert``, ``advance``, ``previous``,
``remove``) plus the episode availability helpers (``refresh`` and
``advance_available``).  Every operation validates its input and then
runs as an independent transaction against the ``BookmarkStore``;
there is no logic spanning several records.

Input that cannot be decoded or validated raises
``InvalidInputError``.  Store errors (``DuplicateKeyError``,
``NotFoundError``, ``StorageFailureError``) propagate unchanged.
"""

from __future__ import annotations

import fnmatch
import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from webworm_api.app.core.errors import InvalidInputError, NotFoundError
from webworm_api.app.core.store import BookmarkStore
from webworm_api.app.schemas.bookmark import MAX_EPISODE, Bookmark, BookmarkCreate
from webworm_api.app.services.probe_service import ProbeService

logger = logging.getLogger(__name__)

Entry = Union[BookmarkCreate, Mapping[str, Any], str, bytes]


class BookmarkService:
    """Business operations on the bookmarks of one store."""

    def __init__(self, store: BookmarkStore, probe: Optional[ProbeService] = None) -> None:
        self.store = store
        self.probe = probe or ProbeService()

    def fetch_bookmarks(
        self,
        patterns: Optional[Iterable[str]] = None,
        only_new: bool = False,
    ) -> List[Bookmark]:
        """Return all bookmarks in insertion order.

        ``patterns`` are shell style globs matched against the names;
        a bookmark is kept if any pattern matches.  No patterns means
        every bookmark.  With ``only_new`` only bookmarks with
        ``has_new`` set are returned.
        """
        patterns = list(patterns or [])
        bookmarks = self.store.get_all()
        if patterns:
            bookmarks = [
                b for b in bookmarks if any(fnmatch.fnmatchcase(b.name, p) for p in patterns)
            ]
        if only_new:
            bookmarks = [b for b in bookmarks if b.has_new]
        return bookmarks

    def insert(self, entry: Entry) -> Bookmark:
        """Validate and store a new bookmark.

        ``entry`` may be a ``BookmarkCreate``, a mapping or a JSON
        encoded object as sent by the desktop frontend.
        """
        data = self._decode_entry(entry)
        bookmark = self.store.insert(data)
        logger.info("Created bookmark %s at episode %s", bookmark.name, bookmark.episode)
        return bookmark

    def advance(self, name: str) -> Bookmark:
        bookmark = self.store.mutate_episode(self._clean_name(name), +1)
        logger.info("Advanced %s to episode %s", bookmark.name, bookmark.episode)
        return bookmark

    def previous(self, name: str) -> Bookmark:
        bookmark = self.store.mutate_episode(self._clean_name(name), -1)
        logger.info("Moved %s back to episode %s", bookmark.name, bookmark.episode)
        return bookmark

    def remove(self, name: str) -> None:
        name = self._clean_name(name)
        self.store.remove(name)
        logger.info("Removed bookmark %s", name)

    def refresh(self, patterns: Optional[Iterable[str]] = None) -> List[Bookmark]:
        """Flag bookmarks whose next episode has become available.

        Only bookmarks without ``has_new`` are probed.  Returns the
        bookmarks that were flagged.
        """
        refreshed: List[Bookmark] = []
        for bookmark in self.fetch_bookmarks(patterns):
            if bookmark.has_new or not self._next_available(bookmark):
                continue
            try:
                refreshed.append(self.store.mark_new(bookmark.name))
            except NotFoundError:
                # removed while its next episode was being probed
                logger.info("Bookmark %s disappeared during refresh", bookmark.name)
        return refreshed

    def advance_available(self, patterns: Optional[Iterable[str]] = None) -> List[Bookmark]:
        """Advance every matching bookmark whose next episode is online."""
        advanced: List[Bookmark] = []
        for bookmark in self.fetch_bookmarks(patterns):
            if self._next_available(bookmark):
                advanced.append(self.advance(bookmark.name))
        return advanced

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _next_available(self, bookmark: Bookmark) -> bool:
        if bookmark.episode >= MAX_EPISODE:
            return False
        url = self.store.render_episode_url(bookmark.name, bookmark.episode + 1)
        available = self.probe.is_available(url)
        if not available:
            logger.debug("No new episode for %s at %s", bookmark.name, url)
        return available

    @staticmethod
    def _decode_entry(entry: Entry) -> BookmarkCreate:
        if isinstance(entry, BookmarkCreate):
            return entry
        try:
            if isinstance(entry, (str, bytes)):
                return BookmarkCreate.model_validate_json(entry)
            if isinstance(entry, Mapping):
                return BookmarkCreate.model_validate(dict(entry))
        except ValidationError as exc:
            raise InvalidInputError(
                f"could not load bookmark from {entry!r}: {describe_errors(exc)}"
            ) from exc
        raise InvalidInputError(f"could not load bookmark from {entry!r}")

    @staticmethod
    def _clean_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError("bookmark name must be a non-empty string")
        return name.strip()


def describe_errors(exc: ValidationError) -> str:
    """Summarize pydantic errors as ``field: message`` pairs."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "entry"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)
