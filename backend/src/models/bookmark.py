"""Bookmark and link models."""
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, StringIdMixin, TimestampMixin

if TYPE_CHECKING:
    from models.tag import TagOnBookmark
    from models.user import User


class Bookmark(Base, StringIdMixin, TimestampMixin):
    """Bookmark model - a saved reference owned by a user."""

    __tablename__ = "bookmarks"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )

    user: Mapped["User"] = relationship(back_populates="bookmarks")
    link: Mapped[Optional["BookmarkedLink"]] = relationship(
        back_populates="bookmark",
        cascade="all, delete-orphan",
        uselist=False,
    )
    tags: Mapped[list["TagOnBookmark"]] = relationship(
        back_populates="bookmark",
        cascade="all, delete-orphan",
    )


class BookmarkedLink(Base):
    """
    URL metadata attached to a bookmark.

    Shares its primary key with the owning bookmark (one-to-one). The
    description is filled in by the crawler and is what tag inference reads.
    """

    __tablename__ = "bookmarked_links"

    id: Mapped[str] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    crawled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None,
    )

    bookmark: Mapped["Bookmark"] = relationship(back_populates="link")
