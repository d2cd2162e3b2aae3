"""Pydantic schemas for the chat-completion tag inference response."""
from pydantic import BaseModel


class OpenAIResponse(BaseModel):
    """JSON object the model is asked to return."""

    tags: list[str]
