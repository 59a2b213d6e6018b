"""Webworm API client.

This module defines a small client wrapper around the bookmark REST
API served by ``webworm_api``.  Frontends and scripts can use it
instead of issuing HTTP calls by hand.  The client uses the
``requests`` library internally.

The client exposes one method per backend operation:

* :meth:`fetch_bookmarks` – list the bookmarks, optionally filtered.
* :meth:`insert` – create a bookmark.
* :meth:`advance` – move a bookmark to its next episode.
* :meth:`previous` – move a bookmark back one episode.
* :meth:`remove` – delete a bookmark.
* :meth:`refresh` – look for new episodes.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is empty and ``error`` is a dictionary
with the keys ``status_code`` and ``message``, where ``message`` is the
text the API reported (e.g. ``"the name One Piece already exists"``).
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = os.getenv("WEBWORM_API_URL", "http://127.0.0.1:8000")

Error = Dict[str, Any]


class WebwormAPI:
    """Client for interacting with the bookmark API."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://127.0.0.1:8000``.
                The ``/api/v1`` prefix is appended automatically.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for a response.
        """
        self.base_url = base_url.rstrip("/") + "/api/v1"
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Tuple[Optional[Any], Optional[Error]]:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET`` or ``POST``).
            path: Path relative to the API prefix (e.g. ``/bookmarks/``).
            params: Query parameters to include in the request.
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)``.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = ""
            if exc.response is not None:
                try:
                    err_json = exc.response.json()
                    detail = err_json.get("detail") if isinstance(err_json, dict) else None
                    message = detail if isinstance(detail, str) else str(detail or err_json)
                except ValueError:
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Bookmark operations
    # ------------------------------------------------------------------
    def fetch_bookmarks(
        self, globs: Optional[List[str]] = None, only_new: bool = False
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Retrieve the bookmarks in insertion order."""
        params: Dict[str, Any] = {}
        if globs:
            params["glob"] = list(globs)
        if only_new:
            params["only_new"] = "true"
        data, error = self._request("GET", "/bookmarks/", params=params or None)
        if error:
            return [], error
        return data or [], None

    def insert(
        self, name: str, url: str, episode: int
    ) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        """Create a bookmark.  ``url`` must contain ``episode``."""
        body = {"name": name, "url": url, "episode": episode}
        return self._request("POST", "/bookmarks/", json_body=body)

    def advance(self, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/bookmarks/advance", json_body={"name": name})

    def previous(self, name: str) -> Tuple[Optional[Dict[str, Any]], Optional[Error]]:
        return self._request("POST", "/bookmarks/previous", json_body={"name": name})

    def remove(self, name: str) -> Tuple[bool, Optional[Error]]:
        """Delete a bookmark.

        Returns:
            A tuple ``(success, error)``.
        """
        _, error = self._request("POST", "/bookmarks/remove", json_body={"name": name})
        return error is None, error

    def refresh(
        self, globs: Optional[List[str]] = None
    ) -> Tuple[List[Dict[str, Any]], Optional[Error]]:
        """Look for new episodes; returns the bookmarks that got one."""
        data, error = self._request("POST", "/bookmarks/refresh", json_body={"globs": list(globs or [])})
        if error:
            return [], error
        return data or [], None
