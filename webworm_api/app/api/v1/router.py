"""
Top-level router for version 1 of the API.

This router aggregates the bookmark routes and the command bridge used
by the desktop frontend under a unified prefix.
"""

from fastapi import APIRouter

from .endpoints import bookmarks, commands

# Create a router for version 1 and include sub-routers for each domain.
router = APIRouter()

router.include_router(bookmarks.router, prefix="/bookmarks", tags=["bookmarks"])
router.include_router(commands.router, prefix="/invoke", tags=["commands"])
