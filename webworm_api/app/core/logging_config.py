"""
Logging setup shared by the API server and the command line tool.

The server logs timestamped lines with the logger name
(``API_FORMAT``).  ``webworm --debug`` prints plain ``[LEVEL] message``
lines to stderr (``CLI_FORMAT``).  A log file, when configured, always
gets the timestamped format.

Handlers installed here carry the name ``HANDLER_NAME``; a second call
finds them and does nothing, while handlers added by other code (for
example uvicorn or pytest) are left alone.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

API_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
CLI_FORMAT = "[%(levelname)s] %(message)s"
HANDLER_NAME = "webworm"

# Every probe request logs here at DEBUG.
QUIET_LOGGERS = ("urllib3",)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None, fmt: str = API_FORMAT) -> None:
    """Attach the webworm handlers to the root logger.

    ``level`` is a level name (case insensitive, unknown names mean
    ``INFO``).  ``fmt`` is the console format, ``logfile`` an optional
    path whose parent directory is created if needed.
    """
    root = logging.getLogger()
    if any(handler.get_name() == HANDLER_NAME for handler in root.handlers):
        return
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))
    handlers = [console]

    if logfile:
        log_path = Path(logfile).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(API_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    for handler in handlers:
        handler.set_name(HANDLER_NAME)
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
