"""
Shared FastAPI dependencies.

The bookmark service is created once per application in
``create_app`` and kept on ``app.state``; endpoints receive it through
``Depends(get_bookmark_service)``.
"""

from fastapi import HTTPException, Request

from webworm_api.app.core.errors import BookmarkError
from webworm_api.app.services.bookmark_service import BookmarkService


def get_bookmark_service(request: Request) -> BookmarkService:
    return request.app.state.bookmark_service


def http_error(exc: BookmarkError) -> HTTPException:
    """Translate a bookmark error into an HTTP error with its message."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)
