"""Pydantic schemas for queued jobs and their payloads."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Job(BaseModel):
    """A unit of work pulled off a queue."""

    id: str | None = None
    data: Any = None
    attempts_made: int = Field(default=0, ge=0)


class OpenAIRequest(BaseModel):
    """Payload of a tag inference job."""

    model_config = ConfigDict(populate_by_name=True)

    bookmark_id: str = Field(..., min_length=1, alias="bookmarkId")
