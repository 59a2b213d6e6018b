"""
Bookmark endpoints for API v1.

These routes expose the bookmark operations with typed request and
response bodies.  Bookmarks are addressed by name in the request body
rather than in the path, since names are free text (titles of series)
and may contain slashes.

Errors are reported with the message of the underlying bookmark
error: 404 for unknown names, 409 for duplicate names, 422 for
invalid input and 500 for storage failures.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from webworm_api.app.api.deps import get_bookmark_service, http_error
from webworm_api.app.core.errors import BookmarkError
from webworm_api.app.schemas.bookmark import Bookmark, BookmarkCreate, BookmarkName, RefreshRequest
from webworm_api.app.services.bookmark_service import BookmarkService

router = APIRouter()


@router.get("/", response_model=List[Bookmark])
def list_bookmarks(
    glob: Optional[List[str]] = Query(None, description="Name patterns, e.g. 'One*'"),
    only_new: bool = Query(False, description="Only bookmarks with a new episode"),
    service: BookmarkService = Depends(get_bookmark_service),
) -> List[Bookmark]:
    """Return the bookmarks in insertion order.

    Listing never changes the ``has_new`` flags.
    """
    try:
        return service.fetch_bookmarks(glob, only_new=only_new)
    except BookmarkError as exc:
        raise http_error(exc)


@router.post("/", response_model=Bookmark, status_code=status.HTTP_201_CREATED)
def create_bookmark(
    bookmark_in: BookmarkCreate,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Create a new bookmark.

    The URL must contain the episode number.  Returns HTTP 409 if a
    bookmark with the same name exists.
    """
    try:
        return service.insert(bookmark_in)
    except BookmarkError as exc:
        raise http_error(exc)


@router.post("/advance", response_model=Bookmark)
def advance_bookmark(
    body: BookmarkName,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Move a bookmark to its next episode."""
    try:
        return service.advance(body.name)
    except BookmarkError as exc:
        raise http_error(exc)


@router.post("/previous", response_model=Bookmark)
def previous_bookmark(
    body: BookmarkName,
    service: BookmarkService = Depends(get_bookmark_service),
) -> Bookmark:
    """Move a bookmark back one episode (stays at episode 0)."""
    try:
        return service.previous(body.name)
    except BookmarkError as exc:
        raise http_error(exc)


@router.post("/remove", status_code=status.HTTP_204_NO_CONTENT)
def remove_bookmark(
    body: BookmarkName,
    service: BookmarkService = Depends(get_bookmark_service),
) -> None:
    try:
        service.remove(body.name)
    except BookmarkError as exc:
        raise http_error(exc)
    return None


@router.post("/refresh", response_model=List[Bookmark])
def refresh_bookmarks(
    body: Optional[RefreshRequest] = None,
    service: BookmarkService = Depends(get_bookmark_service),
) -> List[Bookmark]:
    """Probe for new episodes and return the bookmarks that got one."""
    globs = body.globs if body else []
    try:
        return service.refresh(globs)
    except BookmarkError as exc:
        raise http_error(exc)
