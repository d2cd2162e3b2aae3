"""SQLAlchemy models."""
from models.base import Base, StringIdMixin, TimestampMixin
from models.bookmark import Bookmark, BookmarkedLink
from models.tag import AttachedBy, Tag, TagOnBookmark
from models.user import User

__all__ = [
    "AttachedBy",
    "Base",
    "Bookmark",
    "BookmarkedLink",
    "StringIdMixin",
    "Tag",
    "TagOnBookmark",
    "TimestampMixin",
    "User",
]
