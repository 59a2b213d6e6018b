"""
Top-level package for the Webworm bookmark backend.

The package tracks named series ("bookmarks") together with the URL
and number of the current episode.  The FastAPI application lives in
``app``; ``cli`` offers the same operations from the command line.
"""

__all__ = []
