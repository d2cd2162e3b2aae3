"""Tag model and the bookmark/tag association."""
import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, StringIdMixin

if TYPE_CHECKING:
    from models.bookmark import Bookmark
    from models.user import User


class AttachedBy(enum.StrEnum):
    """Who attached a tag to a bookmark."""

    AI = "ai"
    HUMAN = "human"


# Longest tag name the tags.name column holds
MAX_TAG_NAME_LENGTH = 100


class Tag(Base, StringIdMixin):
    """Tag model - stores unique tag names per user."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_tags_user_id_name"),
    )

    name: Mapped[str] = mapped_column(String(MAX_TAG_NAME_LENGTH), nullable=False)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship(back_populates="tags")
    bookmarks: Mapped[list["TagOnBookmark"]] = relationship(
        back_populates="tag",
        cascade="all, delete-orphan",
    )


class TagOnBookmark(Base):
    """Association between a bookmark and a tag, recording who attached it."""

    __tablename__ = "tags_on_bookmarks"
    __table_args__ = (
        # Composite PK already indexes bookmark_id first
        Index("ix_tags_on_bookmarks_tag_id", "tag_id"),
    )

    bookmark_id: Mapped[str] = mapped_column(
        ForeignKey("bookmarks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )
    attached_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    attached_by: Mapped[AttachedBy] = mapped_column(
        Enum(
            AttachedBy,
            name="attached_by",
            native_enum=False,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )

    bookmark: Mapped["Bookmark"] = relationship(back_populates="tags")
    tag: Mapped["Tag"] = relationship(back_populates="bookmarks")
