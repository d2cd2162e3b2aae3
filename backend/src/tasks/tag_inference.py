"""
Tag inference job.

Consumes jobs carrying a bookmark id, asks OpenAI for hashtags describing the
bookmarked link and attaches them to the bookmark as AI-attached tags.

Usage:
    Runs inside the queue worker (``python -m tasks.worker``).

The job:
1. Returns silently if OpenAI isn't configured
2. Validates the payload
3. Loads the bookmark and its link
4. Infers tags from the link's URL and description
5. Creates the tags the user doesn't have yet and attaches all of them

Everything is written in one transaction; any failure raises OpenAIJobError
and leaves nothing behind.
"""
import logging

from openai import AsyncOpenAI
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from db.session import async_session_factory
from models.tag import AttachedBy
from schemas.queues import Job, OpenAIRequest
from services.bookmark_service import get_bookmark_with_link
from services.exceptions import OpenAIJobError
from services.inference_service import create_openai_client, infer_tags
from services.tag_service import attach_tags, create_tags

logger = logging.getLogger(__name__)


async def run_openai(
    job: Job,
    *,
    db: AsyncSession | None = None,
    openai_client: AsyncOpenAI | None = None,
    settings: Settings | None = None,
) -> None:
    """
    Run one tag inference job.

    Args:
        job: The job to run. ``job.data`` must match OpenAIRequest.
        db: Database session. If None, creates one from async_session_factory.
        openai_client: OpenAI client. If None, one is created from settings.
        settings: Settings to use. Defaults to get_settings().

    Raises:
        OpenAIJobError: On a malformed payload (checked only once OpenAI is
            configured), a missing bookmark, link or description, or an
            unusable model reply.
    """
    job_id = job.id or "unknown"
    settings = settings or get_settings()

    if not settings.openai_configured:
        logger.debug("[openai][%s] OpenAI is not configured, nothing to do now", job_id)
        return

    try:
        request = OpenAIRequest.model_validate(job.data)
    except ValidationError as e:
        raise OpenAIJobError(job_id, f"Got malformed job request: {e}") from e

    client = openai_client or create_openai_client(settings)

    async def _run(session: AsyncSession) -> None:
        bookmark_id = request.bookmark_id
        bookmark = await get_bookmark_with_link(session, bookmark_id)
        if bookmark is None:
            raise OpenAIJobError(job_id, f"bookmark with id {bookmark_id} was not found")
        if bookmark.link is None:
            raise OpenAIJobError(
                job_id, f"bookmark with id {bookmark_id} doesn't have a link",
            )

        tags = await infer_tags(client, job_id, bookmark.link, settings.openai_model)

        try:
            tag_ids = await create_tags(session, bookmark.user_id, tags)
            attached = await attach_tags(session, bookmark_id, tag_ids, AttachedBy.AI)
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        logger.info(
            "[openai][%s] Attached %d of %d inferred tags to bookmark %s",
            job_id,
            attached,
            len(tag_ids),
            bookmark_id,
        )

    if db is not None:
        await _run(db)
    else:
        async with async_session_factory() as session:
            await _run(session)
