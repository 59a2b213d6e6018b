"""
Error types raised by the bookmark store and service.

Each error carries a human readable ``message`` which the transport
layer returns verbatim to the caller, and the HTTP status used to
report it.
"""

from fastapi import status


class BookmarkError(Exception):
    """Base class for all bookmark errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DuplicateKeyError(BookmarkError):
    """A bookmark with the same name already exists."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(BookmarkError):
    """No bookmark matches the given name."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidInputError(BookmarkError):
    """A field is empty, has the wrong type or cannot be decoded."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class StorageFailureError(BookmarkError):
    """The database could not be read or written."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
