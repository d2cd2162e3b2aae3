"""
Tag inference through an OpenAI chat-completion model.

Builds the prompt for a bookmarked link, sends it as a single system message
asking for a JSON object and validates what comes back.
"""
import json
import logging

from openai import AsyncOpenAI
from pydantic import ValidationError

from core.config import Settings
from models.bookmark import BookmarkedLink
from schemas.inference import OpenAIResponse
from services.exceptions import OpenAIJobError
from services.tag_service import strip_hashtags

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """
You are a bot who given an article, extracts relevant "hashtags" out of them.
You must respond in JSON with the key "tags" and the value is list of tags.
----
URL: {url}
Description: {description}
"""


def build_prompt(url: str, description: str) -> str:
    """Render the tag extraction prompt for a link."""
    return PROMPT_TEMPLATE.format(url=url, description=description)


def create_openai_client(settings: Settings) -> AsyncOpenAI | None:
    """Create an OpenAI client, or None if tag inference isn't configured."""
    if not settings.openai_configured:
        return None
    return AsyncOpenAI(api_key=settings.openai_api_key)


def parse_tags(job_id: str, content: str) -> list[str]:
    """
    Parse the model's JSON reply into a list of tag names.

    Raises:
        OpenAIJobError: If the reply isn't JSON or doesn't match ``{"tags": [str]}``.
    """
    try:
        return OpenAIResponse.model_validate(json.loads(content)).tags
    except (json.JSONDecodeError, ValidationError) as e:
        raise OpenAIJobError(
            job_id, f"Failed to parse JSON response from OpenAI: {e}",
        ) from e


async def infer_tags(
    client: AsyncOpenAI,
    job_id: str,
    link: BookmarkedLink,
    model: str,
) -> list[str]:
    """
    Ask the model for hashtags describing a link.

    Args:
        client: OpenAI client.
        job_id: ID of the job, used in error messages.
        link: The bookmarked link. Its description must be non-empty.
        model: Chat-completion model name.

    Returns:
        Cleaned tag names with leading ``#`` removed.

    Raises:
        OpenAIJobError: If the link has no description, the reply is empty or
            the reply can't be parsed.
    """
    if not link.description:
        raise OpenAIJobError(
            job_id, f'No description found for link "{link.id}". Skipping ...',
        )

    chat_completion = await client.chat.completions.create(
        messages=[
            {"role": "system", "content": build_prompt(link.url, link.description)},
        ],
        model=model,
        response_format={"type": "json_object"},
    )

    response = chat_completion.choices[0].message.content if chat_completion.choices else None
    if not response:
        raise OpenAIJobError(job_id, "Got no message content from OpenAI")

    tags = parse_tags(job_id, response)
    total_tokens = chat_completion.usage.total_tokens if chat_completion.usage else None
    logger.info(
        '[openai][%s] Inferring tag for url "%s" used %s tokens and inferred: %s',
        job_id,
        link.url,
        total_tokens,
        tags,
    )
    return strip_hashtags(tags)
