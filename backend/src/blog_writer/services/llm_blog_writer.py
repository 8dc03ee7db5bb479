"""LLM service: write a blog post in the supported markdown subset."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .. import config
from ..errors import GenerationFailure

logger = logging.getLogger(__name__)

BLOG_POST_SYSTEM = """You are an expert blog post writer. Generate a comprehensive, engaging, and well-structured blog post on the given topic.
Use markdown for formatting.
- Use '##' for main headings.
- Use '###' for subheadings.
- Use '**text**' for bold text.
- Use '* ' for unordered list items.
- Ensure the content is informative and easy to read.
- Do not use '#' for the main title, just start with the content.
"""

GENERATION_FAILED_MESSAGE = (
    "Failed to generate blog post from AI. Please check your API key and try again."
)

_MAX_API_RETRIES = 3
_BASE_BACKOFF_S = 1.0


def _is_retryable(exc: BaseException) -> bool:
    """Return True for transient API errors worth retrying."""
    cls_name = type(exc).__name__
    if cls_name in ("RateLimitError", "APITimeoutError", "APIConnectionError"):
        return True
    if cls_name == "InternalServerError":
        return True
    return isinstance(exc, (TimeoutError, ConnectionError))


async def generate_blog_post(
    prompt: str, *, api_key: str | None = None, model: str | None = None
) -> str:
    """Call OpenAI to write a blog post about ``prompt``. Returns markdown text."""
    key = (api_key or "").strip() or config.OPENAI_API_KEY
    if not key:
        raise GenerationFailure("OPENAI_API_KEY is not set; cannot generate blog post")
    model = (model or "").strip() or config.LLM_MODEL

    from openai import AsyncOpenAI

    messages = [
        {"role": "system", "content": BLOG_POST_SYSTEM},
        {"role": "user", "content": prompt},
    ]
    try:
        async with AsyncOpenAI(api_key=key) as client:
            return await _complete(client, model, messages)
    except Exception as e:
        logger.exception("Error generating content for prompt %r", prompt[:80])
        raise GenerationFailure(GENERATION_FAILED_MESSAGE) from e


async def _complete(client: Any, model: str, messages: list[dict[str, str]]) -> str:
    """Chat completion with retry and exponential backoff for transient errors."""
    for attempt in range(_MAX_API_RETRIES):
        try:
            response = await client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=config.LLM_TEMPERATURE,
                top_p=config.LLM_TOP_P,
            )
            return (response.choices[0].message.content or "").strip()
        except Exception as exc:
            if not _is_retryable(exc) or attempt >= _MAX_API_RETRIES - 1:
                raise
            delay = _BASE_BACKOFF_S * (2**attempt)
            logger.warning(
                "OpenAI API error (attempt %d/%d), retrying in %.1fs: %s",
                attempt + 1,
                _MAX_API_RETRIES,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
