"""
Pydantic models for bookmark data.

A bookmark tracks a series by name together with the URL of the
current episode and the episode number itself.  ``Bookmark`` is the
shape returned to clients; ``BookmarkCreate`` is accepted when a new
bookmark is inserted.  The remaining models are request bodies for
the operations that address a bookmark by name.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

# Largest integer SQLite can store.
MAX_EPISODE = 2**63 - 1


class Bookmark(BaseModel):
    """Schema for reading a bookmark."""

    name: str = Field(..., examples=["One Piece"])
    url: str = Field(..., examples=["https://example.com/one-piece/episode-1071"])
    episode: int = Field(..., ge=0, le=MAX_EPISODE, examples=[1071])
    has_new: bool = Field(False, description="True when the bookmark changed since it was last viewed")


class BookmarkCreate(BaseModel):
    """Schema for creating a bookmark.

    ``url`` must contain ``episode`` as a number.  A submitted
    ``has_new`` value is accepted for compatibility and ignored; new
    bookmarks always start with ``has_new`` unset.
    """

    name: str = Field(..., examples=["One Piece"])
    url: str = Field(..., examples=["https://example.com/one-piece/episode-1071"])
    episode: int = Field(..., ge=0, le=MAX_EPISODE, strict=True, examples=[1071])
    has_new: bool = False

    @field_validator("name", "url")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class BookmarkName(BaseModel):
    """Request body addressing a single bookmark."""

    name: str = Field(..., min_length=1, examples=["One Piece"])


class RefreshRequest(BaseModel):
    """Request body for refreshing the new episode flags."""

    globs: List[str] = Field(default_factory=list, description="Name patterns; empty means all bookmarks")
