"""
Queue worker for background jobs.

Pulls jobs off the Redis queue one at a time and runs them through the tag
inference handler. Designed to run as a long-lived process next to the API.

Usage:
    python -m tasks.worker

Failed jobs are put back on the queue until they've been attempted
WORKER_MAX_ATTEMPTS times, then moved to the failed list.
"""
import asyncio
import functools
import logging
import signal
from collections.abc import Awaitable, Callable

from core.config import get_settings
from core.queue import JobQueue
from schemas.queues import Job
from services.exceptions import OpenAIJobError
from services.inference_service import create_openai_client
from tasks.tag_inference import run_openai

logger = logging.getLogger(__name__)

JobHandler = Callable[[Job], Awaitable[None]]


async def process_job(
    job: Job,
    queue: JobQueue,
    handler: JobHandler,
    max_attempts: int,
) -> bool:
    """
    Run a single job and decide what happens to it if it fails.

    Args:
        job: The job to run.
        queue: Queue the job came from; failed jobs are retried or dead-lettered here.
        handler: Coroutine function that runs the job.
        max_attempts: Total number of attempts allowed per job.

    Returns:
        True if the job succeeded, False otherwise.
    """
    try:
        await handler(job)
    except OpenAIJobError as e:
        logger.warning("Job %s failed (attempt %d): %s", job.id, job.attempts_made + 1, e)
        error: Exception = e
    except Exception as e:
        logger.exception("Job %s crashed (attempt %d)", job.id, job.attempts_made + 1)
        error = e
    else:
        logger.info("Job %s completed", job.id)
        return True

    if job.attempts_made + 1 < max_attempts:
        await queue.retry(job)
    else:
        logger.error(
            "Job %s exhausted %d attempts, moving to %s",
            job.id,
            max_attempts,
            queue.failed_name,
        )
        await queue.fail(job, error)
    return False


async def run_worker(
    queue: JobQueue,
    handler: JobHandler = run_openai,
    *,
    max_attempts: int = 3,
    poll_timeout: int = 5,
    stop_event: asyncio.Event | None = None,
) -> None:
    """
    Consume jobs until ``stop_event`` is set.

    Jobs run one at a time; the event is checked between jobs and after each
    poll timeout.
    """
    stop_event = stop_event or asyncio.Event()
    logger.info("Worker listening on %s", queue.name)

    while not stop_event.is_set():
        job = await queue.dequeue(timeout=poll_timeout)
        if job is None:
            continue
        await process_job(job, queue, handler, max_attempts)

    logger.info("Worker on %s stopped", queue.name)


async def _main() -> None:
    settings = get_settings()
    queue = JobQueue.from_url(settings.redis_url, settings.queue_name)
    # One client, and so one HTTP connection pool, shared by every job
    openai_client = create_openai_client(settings)
    handler = functools.partial(run_openai, openai_client=openai_client, settings=settings)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    try:
        await run_worker(
            queue,
            handler,
            max_attempts=settings.worker_max_attempts,
            poll_timeout=settings.worker_poll_timeout,
            stop_event=stop_event,
        )
    finally:
        if openai_client is not None:
            await openai_client.close()
        await queue.close()


def main() -> None:
    """Entry point for running the worker as a script."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_main())


if __name__ == "__main__":
    main()
