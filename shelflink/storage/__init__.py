"""
Storage Module for ShelfLink

Persistent storage for library books and reading-list/challenge links.
"""

from shelflink.storage.models import Base
from shelflink.storage.link_repository import (
    LinkRepository,
    LibraryBook,
    BrokenLink,
    ReadingListEntry,
    ReadingListLink,
    UserRecord,
    READING_LIST_LINK,
    CHALLENGE_LINK,
)

__all__ = [
    "Base",
    "LinkRepository",
    "LibraryBook",
    "BrokenLink",
    "ReadingListEntry",
    "ReadingListLink",
    "UserRecord",
    "READING_LIST_LINK",
    "CHALLENGE_LINK",
]
