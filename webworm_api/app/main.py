"""
Main entrypoint for the Webworm API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``.  Importing the app here makes it easy to run with uvicorn
or another ASGI server, e.g.::

    uvicorn webworm_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from fastapi import FastAPI

from .core.config import settings
from .core.logging_config import setup_logging
from .core.store import BookmarkStore
from .api.v1.router import router as v1_router
from .services.bookmark_service import BookmarkService
from .services.probe_service import ProbeService


def create_app(
    db_path: Union[str, Path, None] = None,
    probe: Optional[ProbeService] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    db_path : str or Path, optional
        Bookmark database to serve.  Defaults to ``settings.database_url``.
    probe : ProbeService, optional
        Probe used to look for new episodes.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the store and
    # services can log during startup.
    setup_logging(settings.log_level, settings.log_file or None)

    store = BookmarkStore(db_path, lock_timeout=settings.lock_timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Create the database file and apply migrations before serving.
        store.initialise()
        yield

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.bookmark_service = BookmarkService(store, probe or ProbeService())

    # Mount versioned routes under /api/v1.
    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
