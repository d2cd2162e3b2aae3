"""Service layer for bookmark lookups and follow-up jobs."""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from core.queue import JobQueue
from models.bookmark import Bookmark, BookmarkedLink
from schemas.queues import Job, OpenAIRequest

logger = logging.getLogger(__name__)


async def create_bookmark(
    db: AsyncSession,
    user_id: str,
    url: str,
    title: str | None = None,
    description: str | None = None,
) -> Bookmark:
    """
    Create a bookmark together with its link.

    Args:
        db: Database session.
        user_id: Owner of the bookmark.
        url: URL of the bookmarked page.
        title: Page title, if already known.
        description: Page description, if already known.

    Returns:
        The flushed Bookmark with its link populated.
    """
    bookmark = Bookmark(user_id=user_id)
    bookmark.link = BookmarkedLink(url=url, title=title, description=description)
    db.add(bookmark)
    await db.flush()
    return bookmark


async def get_bookmark_with_link(db: AsyncSession, bookmark_id: str) -> Bookmark | None:
    """
    Get a bookmark by id with its link loaded in the same query.

    Args:
        db: Database session.
        bookmark_id: ID of the bookmark.

    Returns:
        The Bookmark if found, None otherwise. ``bookmark.link`` is None when
        the bookmark has no link.
    """
    result = await db.execute(
        select(Bookmark)
        .options(joinedload(Bookmark.link))
        .where(Bookmark.id == bookmark_id),
    )
    return result.unique().scalar_one_or_none()


async def enqueue_tag_inference(queue: JobQueue, bookmark_id: str) -> Job:
    """Queue a tag inference job for a saved bookmark."""
    payload = OpenAIRequest(bookmark_id=bookmark_id).model_dump(by_alias=True)
    job = await queue.enqueue(payload)
    logger.info("Queued tag inference job %s for bookmark %s", job.id, bookmark_id)
    return job
