"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
backend runs without any configuration on a desktop machine; the
bookmark database then lives under ``~/.local/share/webworm``.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Webworm API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional log file.  When empty only the console handler is used.
    log_file: str = os.getenv("LOG_FILE", "")

    # Path of the SQLite bookmark database.  ``~`` is expanded; a
    # relative path is resolved relative to the project root by the
    # ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "~/.local/share/webworm/bookmarks.db")

    # Seconds a call may wait for another writer to release the
    # database before failing with a storage error.
    lock_timeout: float = float(os.getenv("LOCK_TIMEOUT", "5.0"))

    # Seconds to wait for an episode page when probing for a new episode.
    probe_timeout: float = float(os.getenv("PROBE_TIMEOUT", "1.0"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
