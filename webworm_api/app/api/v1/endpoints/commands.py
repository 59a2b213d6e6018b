"""
Command bridge for the desktop frontend.

The frontend invokes backend operations by name with a single
argument object, e.g. ``advance`` with ``{"name": "One Piece"}`` or
``insert`` with ``{"entry": "<JSON encoded bookmark>"}``.  This route
accepts exactly those calls under ``POST /invoke/{command}`` and
forwards them to the bookmark service, so the frontend can talk to
the API without changing its call sites.

Supported commands: ``fetch_bookmarks``, ``insert``, ``advance``,
``previous``, ``remove`` and ``refresh``.  Failures are returned as
HTTP errors whose ``detail`` is the message to show to the user.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from webworm_api.app.api.deps import get_bookmark_service, http_error
from webworm_api.app.core.errors import BookmarkError, InvalidInputError
from webworm_api.app.schemas.bookmark import RefreshRequest
from webworm_api.app.services.bookmark_service import BookmarkService, describe_errors

logger = logging.getLogger(__name__)

router = APIRouter()


def _argument(args: Dict[str, Any], key: str) -> Any:
    if key not in args:
        raise InvalidInputError(f"missing argument '{key}'")
    return args[key]


def _refresh(service: BookmarkService, args: Dict[str, Any]) -> Any:
    try:
        request = RefreshRequest.model_validate(args)
    except ValidationError as exc:
        raise InvalidInputError(f"invalid refresh arguments: {describe_errors(exc)}") from exc
    return service.refresh(request.globs)


COMMANDS: Dict[str, Callable[[BookmarkService, Dict[str, Any]], Any]] = {
    "fetch_bookmarks": lambda service, args: service.fetch_bookmarks(),
    "insert": lambda service, args: service.insert(_argument(args, "entry")),
    "advance": lambda service, args: service.advance(_argument(args, "name")),
    "previous": lambda service, args: service.previous(_argument(args, "name")),
    "remove": lambda service, args: service.remove(_argument(args, "name")),
    "refresh": _refresh,
}


@router.post("/{command}")
def invoke(
    command: str,
    args: Optional[Dict[str, Any]] = Body(None),
    service: BookmarkService = Depends(get_bookmark_service),
) -> Any:
    """Run a named command with its argument object.

    Returns the JSON encoded result: a list of bookmarks for
    ``fetch_bookmarks`` and ``refresh``, the affected bookmark for
    ``insert``, ``advance`` and ``previous`` and ``null`` for
    ``remove``.
    """
    handler = COMMANDS.get(command)
    if handler is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown command {command}")
    logger.debug("Invoking %s with %s", command, args)
    try:
        result = handler(service, args or {})
    except BookmarkError as exc:
        logger.info("Command %s failed: %s", command, exc.message)
        raise http_error(exc)
    return jsonable_encoder(result)
