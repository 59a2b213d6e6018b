"""Entry point for the Webworm bookmark API.

This script serves the FastAPI application with Uvicorn.  It is
intended to be executed from the project root, for example by the
desktop frontend when it starts its backend process.

Configuration such as the database path and log level is read from
environment variables (see ``webworm_api/app/core/config.py``).  Host
and port are read from ``WEBWORM_HOST`` and ``WEBWORM_PORT``.

Usage:
    python run.py
"""
import asyncio
import os
from uvicorn import Config, Server

from webworm_api.app.main import app as api_app


async def run_api() -> None:
    """Start the API using Uvicorn.

    Host and port default to ``127.0.0.1`` and ``8000``; the API has
    no authentication and should only listen locally.
    """
    host = os.getenv("WEBWORM_HOST", "127.0.0.1")
    port = int(os.getenv("WEBWORM_PORT", "8000"))
    config = Config(app=api_app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


async def main() -> None:
    await run_api()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
