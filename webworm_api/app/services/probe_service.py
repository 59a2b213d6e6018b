"""
Availability probe for upcoming episodes.

Checking whether the next episode of a bookmark is already online is
done by requesting its URL.  Sites rarely answer with a proper 404
status for missing episodes, so the page title is inspected as well.
A probe never raises: an unreachable page simply counts as "not
available yet".
"""

from __future__ import annotations

import logging
from html.parser import HTMLParser
from typing import List, Optional

import requests

from webworm_api.app.core.config import settings

logger = logging.getLogger(__name__)


class _TitleParser(HTMLParser):
    """Collect the text of the document <title>, ignoring titles inside <svg>."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.title: Optional[str] = None
        self._parts: List[str] = []
        self._in_title = False
        self._svg_depth = 0

    def handle_starttag(self, tag: str, attrs) -> None:
        if tag == "svg":
            self._svg_depth += 1
        elif tag == "title" and self._svg_depth == 0 and self.title is None:
            self._in_title = True

    def handle_endtag(self, tag: str) -> None:
        if tag == "svg" and self._svg_depth > 0:
            self._svg_depth -= 1
        elif tag == "title" and self._in_title:
            self._in_title = False
            self.title = "".join(self._parts).strip()

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self._parts.append(data)


def page_title(html: str) -> Optional[str]:
    """Return the stripped page title or ``None`` if there is none."""
    parser = _TitleParser()
    parser.feed(html)
    parser.close()
    return parser.title


class ProbeService:
    """Ping episode URLs to find out whether they exist."""

    def __init__(self, timeout: Optional[float] = None, session: Optional[requests.Session] = None) -> None:
        self.timeout = settings.probe_timeout if timeout is None else timeout
        self.session = session or requests.Session()

    def is_available(self, url: str) -> bool:
        """Return ``True`` if ``url`` serves a page that is not a 404 page.

        Pages without a ``<title>`` are treated as unavailable.
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Couldn't reach %s: %s", url, exc)
            return False
        if response.status_code >= 400:
            logger.debug("Probe of %s returned HTTP %s", url, response.status_code)
            return False
        title = page_title(response.text or "")
        if title is None:
            logger.debug("Probe of %s returned a page without title", url)
            return False
        available = "404" not in title
        logger.debug("Probe of %s: title %r, available=%s", url, title, available)
        return available
