"""Redis-backed job queue used by the background workers."""
import json
import logging
from datetime import UTC, datetime
from uuid import uuid4

from pydantic import ValidationError
from redis.asyncio import Redis

from schemas.queues import Job

logger = logging.getLogger(__name__)


class JobQueue:
    """
    FIFO job queue on top of a Redis list.

    Jobs are stored as JSON envelopes ``{"id", "data", "attempts_made"}``.
    Producers RPUSH onto ``<name>``; consumers BLPOP from it. Jobs that run out
    of attempts are pushed onto ``<name>:failed`` together with the last error.
    """

    def __init__(self, client: Redis, name: str) -> None:
        self._client = client
        self._name = name

    @classmethod
    def from_url(cls, url: str, name: str) -> "JobQueue":
        """Create a queue with its own Redis connection pool."""
        return cls(Redis.from_url(url), name)

    @property
    def name(self) -> str:
        """Name of the Redis list holding pending jobs."""
        return self._name

    @property
    def failed_name(self) -> str:
        """Name of the Redis list holding dead-lettered jobs."""
        return f"{self._name}:failed"

    async def enqueue(self, data: dict) -> Job:
        """Add a new job to the end of the queue."""
        job = Job(id=uuid4().hex, data=data)
        await self._push(job)
        return job

    async def dequeue(self, timeout: int = 5) -> Job | None:
        """
        Pop the next job, waiting up to ``timeout`` seconds.

        Returns None when the wait times out. Entries that aren't valid job
        envelopes are moved to the failed list and also yield None.
        """
        item = await self._client.blpop([self._name], timeout=timeout)
        if item is None:
            return None
        _, raw = item
        try:
            return Job.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding malformed job envelope on %s: %s", self._name, e)
            await self._client.rpush(
                self.failed_name,
                json.dumps({
                    "raw": raw.decode() if isinstance(raw, bytes) else raw,
                    "error": str(e),
                    "failed_at": datetime.now(UTC).isoformat(),
                }),
            )
            return None

    async def retry(self, job: Job) -> Job:
        """Put a job back on the queue with its attempt counter bumped."""
        retried = job.model_copy(update={"attempts_made": job.attempts_made + 1})
        await self._push(retried)
        return retried

    async def fail(self, job: Job, error: BaseException) -> None:
        """Move a job to the failed list."""
        envelope = job.model_dump()
        envelope["error"] = str(error)
        envelope["failed_at"] = datetime.now(UTC).isoformat()
        await self._client.rpush(self.failed_name, json.dumps(envelope))

    async def close(self) -> None:
        """Close the underlying Redis connection."""
        await self._client.aclose()

    async def _push(self, job: Job) -> None:
        await self._client.rpush(self._name, job.model_dump_json())
