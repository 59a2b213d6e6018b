"""
Episode URL templates.

A bookmark URL contains the number of the current episode, e.g.
``https://example.com/show/episode-12``.  The store keeps the URL as a
template in which that number is replaced by a marker, so the URL of
any other episode can be rendered from it::

    >>> to_template("https://example.com/show/episode-12", 12)
    'https://example.com/show/episode-{{episode}}'
    >>> render("https://example.com/show/episode-{{episode}}", 13)
    'https://example.com/show/episode-13'

Zero padded numbers keep their width (``ep07`` becomes
``ep{{episode:02}}`` and renders ``ep08``).
"""

import re

from .errors import InvalidInputError

MARKER_RE = re.compile(r"\{\{episode(?::0(\d+))?\}\}")


def to_template(url: str, episode: int) -> str:
    """Replace the episode number in ``url`` by the template marker.

    The number must appear as a standalone run of digits; when it
    appears several times the last occurrence is used.  URLs that
    already contain a marker are rejected since it would be rendered
    as well.
    """
    if MARKER_RE.search(url):
        raise InvalidInputError("url must not contain an {{episode}} marker")
    pattern = re.compile(r"(?<!\d)0*%d(?!\d)" % episode)
    matches = list(pattern.finditer(url))
    if not matches:
        raise InvalidInputError("episode was not found in url")
    match = matches[-1]
    digits = match.group(0)
    if len(digits) > len(str(episode)):
        marker = "{{episode:0%d}}" % len(digits)
    else:
        marker = "{{episode}}"
    return url[: match.start()] + marker + url[match.end():]


def render(template: str, episode: int) -> str:
    """Return the URL of ``episode`` for a stored template."""

    def _replace(match: re.Match) -> str:
        width = match.group(1)
        if width:
            return str(episode).zfill(int(width))
        return str(episode)

    return MARKER_RE.sub(_replace, template)
