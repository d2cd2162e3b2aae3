"""Service layer for tag operations."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.tag import MAX_TAG_NAME_LENGTH, AttachedBy, Tag, TagOnBookmark

logger = logging.getLogger(__name__)


def strip_hashtags(tag_names: list[str]) -> list[str]:
    """
    Normalize tag names returned by the model.

    Strips surrounding whitespace and one leading ``#``, drops names that end
    up empty or longer than MAX_TAG_NAME_LENGTH and removes duplicates
    (preserving first occurrence order).

    Args:
        tag_names: Raw tag names.

    Returns:
        List of cleaned, unique tag names.
    """
    normalized = []
    seen: set[str] = set()
    for name in tag_names:
        cleaned = name.strip()
        if cleaned.startswith("#"):
            cleaned = cleaned[1:].strip()
        if not cleaned:
            continue
        if len(cleaned) > MAX_TAG_NAME_LENGTH:
            logger.warning(
                "Dropping tag longer than %d characters: %.40s...",
                MAX_TAG_NAME_LENGTH,
                cleaned,
            )
            continue
        if cleaned not in seen:
            seen.add(cleaned)
            normalized.append(cleaned)
    return normalized


async def create_tags(
    db: AsyncSession,
    user_id: str,
    tag_names: list[str],
) -> list[str]:
    """
    Get existing tags or create new ones, returning their ids.

    Only names the user doesn't already have are created. The new rows are
    added together and written in one flush, so there is no ordering between
    them.

    Args:
        db: Database session.
        user_id: User ID to scope tags.
        tag_names: Unique tag names.

    Returns:
        IDs of the existing tags followed by the ids of the newly created ones.
    """
    if not tag_names:
        return []

    result = await db.execute(
        select(Tag.id, Tag.name).where(
            Tag.user_id == user_id,
            Tag.name.in_(tag_names),
        ),
    )
    existing = {row.name: row.id for row in result}

    new_tags = [
        Tag(user_id=user_id, name=name)
        for name in tag_names
        if name not in existing
    ]
    if new_tags:
        db.add_all(new_tags)
        await db.flush()
        logger.debug(
            "Created %d new tags for user %s: %s",
            len(new_tags),
            user_id,
            [t.name for t in new_tags],
        )

    return list(existing.values()) + [t.id for t in new_tags]


async def attach_tags(
    db: AsyncSession,
    bookmark_id: str,
    tag_ids: list[str],
    attached_by: AttachedBy,
) -> int:
    """
    Attach tags to a bookmark.

    Tags that are already attached are left as they are, which keeps a
    retried job from tripping over the association's primary key.

    Args:
        db: Database session.
        bookmark_id: ID of the bookmark.
        tag_ids: IDs of the tags to attach.
        attached_by: Who is attaching the tags.

    Returns:
        Number of new associations created.
    """
    if not tag_ids:
        return 0

    result = await db.execute(
        select(TagOnBookmark.tag_id).where(
            TagOnBookmark.bookmark_id == bookmark_id,
            TagOnBookmark.tag_id.in_(tag_ids),
        ),
    )
    already_attached = set(result.scalars())

    links = [
        TagOnBookmark(bookmark_id=bookmark_id, tag_id=tag_id, attached_by=attached_by)
        for tag_id in dict.fromkeys(tag_ids)
        if tag_id not in already_attached
    ]
    if links:
        db.add_all(links)
        await db.flush()
    return len(links)
